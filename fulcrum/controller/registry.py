"""
Controller Registry

Maps controller class identifiers to factories. Entries come from two
places:
- explicit registration (``registry.register(BlogController)``)
- loading a controller backing file, which registers every controller
  class the file defines

Backing files are imported at most once per process per distinct path.
"""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import logging
import os
import sys
import threading
from typing import Any, Callable, Dict, Optional, Set

logger = logging.getLogger("fulcrum.controller.registry")

ControllerFactory = Callable[[], Any]


def is_controller_class(obj: Any) -> bool:
    """A controller is any class offering both dispatch hooks."""
    return (
        inspect.isclass(obj)
        and callable(getattr(obj, "on_pre_dispatch", None))
        and callable(getattr(obj, "on_post_dispatch", None))
    )


class ControllerRegistry:
    """
    Registry of controller factories keyed by class identifier.

    Example:
        registry = ControllerRegistry()

        @registry.register
        class BlogController(Controller):
            ...

        controller = registry.create("BlogController")
    """

    def __init__(self):
        self._factories: Dict[str, ControllerFactory] = {}
        self._loaded_files: Set[str] = set()
        self._lock = threading.RLock()

    def register(self, factory: Any = None, *, name: Optional[str] = None):
        """
        Register a controller class or zero-argument factory.

        Usable directly or as a decorator (with or without ``name=``).
        The identifier defaults to the factory's ``__name__``.
        """
        def decorator(target: Any) -> Any:
            key = name or getattr(target, "__name__", None)
            if not key:
                raise ValueError(f"Cannot derive a controller name from {target!r}")
            with self._lock:
                self._factories[key] = target
            return target

        if factory is None:
            return decorator
        return decorator(factory)

    def unregister(self, name: str) -> None:
        with self._lock:
            self._factories.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._factories

    def create(self, name: str) -> Any:
        """
        Construct a fresh, default-initialized controller.

        Raises:
            NameError: No controller class is registered under ``name``
        """
        factory = self._factories.get(name)
        if factory is None:
            raise NameError(f"Controller class '{name}' is not defined")
        return factory()

    def is_loaded(self, filename: str) -> bool:
        return os.path.abspath(filename) in self._loaded_files

    def load_file(self, filename: str) -> bool:
        """
        Import a controller backing file once and register its controllers.

        Returns:
            True if the file was imported now, False if it already had been

        Raises:
            Whatever importing the file raises (SyntaxError, ImportError, ...)
        """
        path = os.path.abspath(filename)
        with self._lock:
            if path in self._loaded_files:
                return False

            digest = hashlib.sha1(path.encode("utf-8")).hexdigest()[:10]
            stem = os.path.splitext(os.path.basename(path))[0]
            module_name = f"fulcrum_controllers.{stem}_{digest}"

            spec = importlib.util.spec_from_file_location(module_name, path)
            if spec is None or spec.loader is None:
                raise ImportError(f"Cannot load controller file '{filename}'")

            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            try:
                spec.loader.exec_module(module)
            except BaseException:
                sys.modules.pop(module_name, None)
                raise

            registered = []
            for attr_name, obj in vars(module).items():
                if is_controller_class(obj) and obj.__module__ == module_name:
                    self._factories[attr_name] = obj
                    registered.append(attr_name)

            self._loaded_files.add(path)

        logger.debug(f"Loaded controller file {path}: {', '.join(registered) or 'no controllers'}")
        return True

    def clear(self) -> None:
        """Forget every registration and loaded file (tests, reloads)."""
        with self._lock:
            self._factories.clear()
            self._loaded_files.clear()

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        return f"<ControllerRegistry controllers={len(self._factories)} files={len(self._loaded_files)}>"


# Process registry used when no registry is passed explicitly.
default_registry = ControllerRegistry()
