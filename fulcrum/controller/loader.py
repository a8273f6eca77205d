"""
Controller loading utilities.

``controller_file_exists`` and ``create_controller_instance`` are plain
functions so diagnostics and admin tooling can use them without a
front controller. Cache, config and registry default to the process-wide
instances.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from ..cache import Cache, get_default_cache
from ..config import FulcrumConfig, get_default_config
from ..dispatch import DispatchToken
from .faults import ControllerIntegrityFault, InvalidControllerFault
from .registry import ControllerRegistry, default_registry

logger = logging.getLogger("fulcrum.controller.loader")

CONTROLLER_FILE_EXISTS_KEY = "fulcrum.controller-file-exists"


def controller_file_exists(
    filename: str,
    *,
    cache: Optional[Cache] = None,
    config: Optional[FulcrumConfig] = None,
) -> bool:
    """
    Return whether a controller backing file exists.

    With ``use_system_cache`` disabled the filesystem is checked on every
    call. Otherwise the result is cached as a 0/1 flag for
    ``dispatch_resolve_ttl`` seconds and a cached flag is trusted without
    touching the filesystem.
    """
    if config is None:
        config = get_default_config()

    if not config.use_system_cache:
        return os.path.isfile(filename)

    if cache is None:
        cache = get_default_cache()

    cache_key = f"{CONTROLLER_FILE_EXISTS_KEY}|{filename}"
    exists = cache.fetch_local(cache_key, False)

    if exists is False:
        exists = 1 if os.path.isfile(filename) else 0
        cache.store_local(cache_key, exists, config.dispatch_resolve_ttl)

    return exists == 1


def create_controller_instance(
    dispatch_token: DispatchToken,
    *,
    cache: Optional[Cache] = None,
    config: Optional[FulcrumConfig] = None,
    registry: Optional[ControllerRegistry] = None,
) -> Any:
    """
    Create a fresh controller instance for a dispatch token.

    Raises:
        InvalidControllerFault: Backing file does not exist (nothing is loaded)
        ControllerIntegrityFault: Debug mode only; file loaded but the
            expected class is not defined
        NameError: Non-debug mode; the class is not defined
    """
    if config is None:
        config = get_default_config()
    if registry is None:
        registry = default_registry

    required_file = dispatch_token.controller_class_filename
    controller_class_name = dispatch_token.controller_class_name

    if not controller_file_exists(required_file, cache=cache, config=config):
        raise InvalidControllerFault(required_file, controller_class_name)

    if required_file:
        registry.load_file(required_file)

    if config.debug and not registry.has(controller_class_name):
        raise ControllerIntegrityFault(controller_class_name, required_file)

    return registry.create(controller_class_name)
