"""
Config system - Layered typed configuration.

Merge precedence (later overrides earlier):
config files (YAML/JSON) < .env file < environment variables < overrides
"""

from typing import Any, Dict, Optional, get_args, get_origin, get_type_hints
from dataclasses import dataclass, fields
from pathlib import Path
import os
import json
import types

from dotenv import dotenv_values

from .faults.domains import ConfigInvalidFault


CACHE_BACKENDS = ("memory", "null", "redis")


@dataclass
class FulcrumConfig:
    """
    Dispatch core configuration.

    Attributes:
        debug: Verify that a loaded controller file really defines the
            expected class (developer diagnostics, costs a lookup)
        use_system_cache: Memoize controller file existence checks
        dispatch_resolve_ttl: Seconds a cached existence flag stays valid (at least 1)
        controllers_path: Directory holding controller backing files
        controller_suffix: Appended to controller identifiers to form class names
        action_suffix: Appended to action identifiers to form method names
        max_forwards: Optional cap on forwards per request (None = unbounded)
        cache_backend: "memory", "null" or "redis"
        cache_max_size: Entry limit of the memory backend (at least 1)
        cache_key_prefix: Prefix for every cache key
        redis_url: Connection URL for the redis backend
        log_level: Level used by ``Bootstrapper.bootstrap()``
    """
    debug: bool = False
    use_system_cache: bool = True
    dispatch_resolve_ttl: int = 300
    controllers_path: str = "controllers"
    controller_suffix: str = "Controller"
    action_suffix: str = "_action"
    max_forwards: Optional[int] = None
    cache_backend: str = "memory"
    cache_max_size: int = 10000
    cache_key_prefix: str = "fc:"
    redis_url: str = "redis://localhost:6379/0"
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.cache_backend not in CACHE_BACKENDS:
            raise ConfigInvalidFault(
                "cache_backend",
                f"expected one of {', '.join(CACHE_BACKENDS)}, got '{self.cache_backend}'",
            )
        # Backends read a TTL of 0 as "never expires"
        if self.dispatch_resolve_ttl < 1:
            raise ConfigInvalidFault("dispatch_resolve_ttl", "must be positive")
        if self.cache_max_size < 1:
            raise ConfigInvalidFault("cache_max_size", "must be positive")
        if self.max_forwards is not None and self.max_forwards < 0:
            raise ConfigInvalidFault("max_forwards", "must not be negative")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > environment variables > .env file > config files > defaults
    """

    def __init__(self, env_prefix: str = "FULCRUM_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "FULCRUM_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources.

        Args:
            paths: Config file paths (glob patterns supported); defaults to
                ``fulcrum.yaml`` in the working directory when present
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        if not paths and Path("fulcrum.yaml").exists():
            paths = ["fulcrum.yaml"]

        for pattern in paths or ():
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        from glob import glob

        for path_str in sorted(glob(pattern)):
            path = Path(path_str)
            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)

    def _load_json_file(self, path: Path):
        with open(path) as f:
            data = json.load(f)
            self._merge_dict(self.config_data, data)

    def _load_yaml_file(self, path: Path):
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        if not Path(path).exists():
            return

        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert FULCRUM_SECTION__MAX_SIZE to a nested dict entry."""
        key = key[len(self.env_prefix):]

        # Double underscore separates nested keys
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False
        if value.lower() in ("none", "null"):
            return None

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current = self.config_data

        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def get_config(self) -> FulcrumConfig:
        """
        Build a validated FulcrumConfig from the merged data.

        Unknown keys are ignored.

        Raises:
            ConfigInvalidFault: A value has the wrong type or is out of range
        """
        hints = get_type_hints(FulcrumConfig)
        kwargs = {}

        for field_info in fields(FulcrumConfig):
            if field_info.name not in self.config_data:
                continue
            value = self.config_data[field_info.name]
            expected = hints[field_info.name]
            if expected is bool and isinstance(value, int) and value in (0, 1):
                value = bool(value)
            # YAML and env parsing both read a bare ``null`` as None
            if field_info.name == "cache_backend" and value is None:
                value = "null"
            if not self._check_type(value, expected):
                raise ConfigInvalidFault(
                    field_info.name,
                    f"expected {getattr(expected, '__name__', expected)}, got {type(value).__name__}",
                )
            kwargs[field_info.name] = value

        return FulcrumConfig(**kwargs)

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        origin = get_origin(expected_type)
        if origin is types.UnionType or str(origin) == "typing.Union":
            if value is None:
                return True
            args = [a for a in get_args(expected_type) if a is not type(None)]
            return any(self._check_type(value, a) for a in args)

        # bool is an int subclass; keep them apart
        if expected_type is int and isinstance(value, bool):
            return False
        if expected_type is float and isinstance(value, int) and not isinstance(value, bool):
            return True

        return isinstance(value, expected_type)

    def to_dict(self) -> dict:
        return self.config_data.copy()


# Process-wide default used by the static controller utilities.
_default_config: Optional[FulcrumConfig] = None


def set_default_config(config: Optional[FulcrumConfig]) -> None:
    """Register the process-wide default config (None resets it)."""
    global _default_config
    _default_config = config


def get_default_config() -> FulcrumConfig:
    global _default_config
    if _default_config is None:
        _default_config = FulcrumConfig()
    return _default_config
