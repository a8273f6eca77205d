"""
Fulcrum Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- ROUTING faults
- DISPATCH faults (base; concrete controller faults live in
  ``fulcrum.controller.faults``)
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# ROUTING Faults
# ============================================================================

class RoutingFault(Fault):
    """Base class for routing faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        public: bool = True,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.ROUTING,
            severity=severity,
            retryable=False,
            public=public,
            metadata=metadata,
        )


class RouteNotFoundFault(RoutingFault):
    """Neither a configured route nor a direct route matched."""

    def __init__(self, path: str, method: str, **kwargs):
        super().__init__(
            code="ROUTE_NOT_FOUND",
            message=f"Route not found: {method} {path}",
            metadata={"path": path, "method": method, **kwargs.get("metadata", {})},
        )


class RouteNotDispatchableFault(RoutingFault):
    """Route lacks the controller or action identifier."""

    def __init__(self, route_name: str, reason: str, **kwargs):
        super().__init__(
            code="ROUTE_NOT_DISPATCHABLE",
            message=f"Route '{route_name}' cannot be dispatched: {reason}",
            public=False,
            metadata={"route": route_name, "reason": reason, **kwargs.get("metadata", {})},
        )


class PatternInvalidFault(RoutingFault):
    """Route pattern is invalid."""

    def __init__(self, pattern: str, reason: str, **kwargs):
        super().__init__(
            code="PATTERN_INVALID",
            message=f"Invalid route pattern '{pattern}': {reason}",
            severity=Severity.FATAL,
            public=False,
            metadata={"pattern": pattern, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# DISPATCH Faults
# ============================================================================

class DispatchFault(Fault):
    """Base class for controller resolution and dispatch faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.DISPATCH,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )
