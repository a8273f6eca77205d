"""
Fulcrum Faults - typed error signals for the dispatch core.

Every error the framework raises is a ``Fault``: an exception carrying a
stable code, a domain and a severity. Faults are never swallowed by the
dispatch loop; they propagate to whoever called ``dispatch()``.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ConfigFault,
    ConfigInvalidFault,
    RoutingFault,
    RouteNotFoundFault,
    RouteNotDispatchableFault,
    PatternInvalidFault,
    DispatchFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Domains
    "ConfigFault",
    "ConfigInvalidFault",
    "RoutingFault",
    "RouteNotFoundFault",
    "RouteNotDispatchableFault",
    "PatternInvalidFault",
    "DispatchFault",
]
