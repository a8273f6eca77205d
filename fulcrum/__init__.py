"""
Fulcrum - front-controller dispatch core

Complete integration of:
- Routing: Pattern router with convention-based direct routes
- Dispatch: Route -> DispatchToken resolution by naming convention
- Controllers: Action controllers loaded on demand from backing files
- Front controller: Pre/post dispatch hooks, forwarding, response filtering
- Cache: Memoized controller file existence checks (memory, null, redis)
- Faults: Structured error handling with fault domains
"""

__version__ = "0.3.0"

# ============================================================================
# Core
# ============================================================================

from .config import FulcrumConfig, ConfigLoader
from .request import HttpRequest
from .response import HttpResponse
from .bootstrap import Bootstrapper
from .app import Application

# ============================================================================
# Routing & Dispatch
# ============================================================================

from .routing import Route, Router
from .dispatch import Dispatcher, DispatchToken

# ============================================================================
# Controllers
# ============================================================================

from .controller import (
    Controller,
    ControllerRegistry,
    DispatchPolicy,
    FrontController,
    default_registry,
    controller_file_exists,
    create_controller_instance,
    InvalidControllerFault,
    InvalidControllerActionFault,
    ControllerIntegrityFault,
    DispatchLoopFault,
)

# ============================================================================
# Cache & Faults
# ============================================================================

from .cache import Cache, MemoryBackend, NullBackend, RedisBackend
from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ConfigInvalidFault,
    RouteNotFoundFault,
    RouteNotDispatchableFault,
    PatternInvalidFault,
)

__all__ = [
    "__version__",
    # Core
    "FulcrumConfig",
    "ConfigLoader",
    "HttpRequest",
    "HttpResponse",
    "Bootstrapper",
    "Application",
    # Routing & dispatch
    "Route",
    "Router",
    "Dispatcher",
    "DispatchToken",
    # Controllers
    "Controller",
    "ControllerRegistry",
    "DispatchPolicy",
    "FrontController",
    "default_registry",
    "controller_file_exists",
    "create_controller_instance",
    "InvalidControllerFault",
    "InvalidControllerActionFault",
    "ControllerIntegrityFault",
    "DispatchLoopFault",
    # Cache
    "Cache",
    "MemoryBackend",
    "NullBackend",
    "RedisBackend",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ConfigInvalidFault",
    "RouteNotFoundFault",
    "RouteNotDispatchableFault",
    "PatternInvalidFault",
]
