"""
Fulcrum Cache — Fault domain integration.

Cache faults are warnings by default: a failing cache degrades
performance, it does not change dispatch results.
"""

from __future__ import annotations

from typing import Any, Optional

from fulcrum.faults.core import Fault, FaultDomain, Severity


# Register cache fault domain
FaultDomain.CACHE = FaultDomain("cache", "Cache subsystem faults")


class CacheFault(Fault):
    """Base class for all cache faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.WARN,
        retryable: bool = True,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CACHE,
            severity=severity,
            retryable=retryable,
            public=False,
            metadata=metadata,
        )


class CacheBackendFault(CacheFault):
    """Generic cache backend error."""

    def __init__(self, backend: str, operation: str, reason: str, **kwargs):
        super().__init__(
            code="CACHE_BACKEND_ERROR",
            message=f"Cache backend '{backend}' error during {operation}: {reason}",
            severity=Severity.ERROR,
            retryable=True,
            metadata={"backend": backend, "operation": operation, "reason": reason},
        )


class CacheConfigFault(CacheFault):
    """Cache configuration error."""

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            code="CACHE_CONFIG_INVALID",
            message=f"Invalid cache configuration: {reason}",
            severity=Severity.FATAL,
            retryable=False,
            metadata={"reason": reason},
        )
