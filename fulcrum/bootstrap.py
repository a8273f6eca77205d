"""
Bootstrapper - application context handed to every dispatch hook.

The dispatch core never looks inside it; applications register whatever
services their controllers need.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .cache import Cache, create_cache, set_default_cache
from .config import FulcrumConfig, set_default_config


class Bootstrapper:
    """
    Application bootstrapper.

    Example:
        bootstrapper = Bootstrapper(config).bootstrap()
        bootstrapper.register("db", Database(url))
        db = controller.bootstrapper.get("db")
    """

    def __init__(self, config: Optional[FulcrumConfig] = None, cache: Optional[Cache] = None):
        self.config = config or FulcrumConfig()
        self.cache = cache
        self.services: Dict[str, Any] = {}
        self.bootstrapped = False
        self.logger = logging.getLogger("fulcrum.bootstrap")

    def bootstrap(self) -> "Bootstrapper":
        """
        Configure logging, build the cache and install the process
        defaults used by the static controller utilities.
        """
        if self.bootstrapped:
            return self

        logging.basicConfig(
            level=getattr(logging, self.config.log_level.upper(), logging.WARNING),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )

        if self.cache is None:
            self.cache = create_cache(self.config)

        set_default_config(self.config)
        set_default_cache(self.cache)

        self.bootstrapped = True
        self.logger.info(
            f"Bootstrapped (cache={self.cache.backend.name}, debug={self.config.debug})"
        )
        return self

    def register(self, name: str, service: Any) -> Any:
        self.services[name] = service
        return service

    def get(self, name: str, default: Any = None) -> Any:
        return self.services.get(name, default)

    def __contains__(self, name: str) -> bool:
        return name in self.services

    def __repr__(self) -> str:
        return f"<Bootstrapper services={sorted(self.services)} bootstrapped={self.bootstrapped}>"
