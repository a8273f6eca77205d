"""
Fulcrum Cache — Cache key builder.
"""

from __future__ import annotations


class DefaultKeyBuilder:
    """
    Default key builder using colon-separated segments.

    Pattern: ``{prefix}v{version}:{namespace}:{key}``

    Example: ``fc:v1:default:fulcrum.controller-file-exists|/app/BlogController.py``

    Version support enables mass-invalidation by incrementing
    the version number, making all old keys invisible.
    """

    def __init__(self, version: int = 0):
        self._version = version

    def build(self, namespace: str, key: str, prefix: str = "") -> str:
        """Build qualified cache key with optional version."""
        if self._version > 0:
            return f"{prefix}v{self._version}:{namespace}:{key}"
        return f"{prefix}{namespace}:{key}"
