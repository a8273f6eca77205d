"""Fulcrum Cache — storage backends."""

from .memory import MemoryBackend
from .null import NullBackend
from .redis import RedisBackend

__all__ = ["MemoryBackend", "NullBackend", "RedisBackend"]
