"""
Shared test fixtures and helpers for Fulcrum test suite.
"""

import os

import pytest

from fulcrum.bootstrap import Bootstrapper
from fulcrum.cache import Cache, MemoryBackend, set_default_cache
from fulcrum.config import FulcrumConfig, set_default_config
from fulcrum.controller import ControllerRegistry, FrontController, default_registry
from fulcrum.dispatch import Dispatcher
from fulcrum.routing import Router
from fulcrum.testing import MockCacheBackend


# ============================================================================
# Process defaults
# ============================================================================


@pytest.fixture(autouse=True)
def reset_process_defaults(monkeypatch):
    """Every test starts with fresh default config, cache and registry."""
    for key in list(os.environ):
        if key.startswith("FULCRUM_"):
            monkeypatch.delenv(key)
    set_default_config(None)
    set_default_cache(None)
    default_registry.clear()
    yield
    set_default_config(None)
    set_default_cache(None)
    default_registry.clear()


# ============================================================================
# Dispatch fixtures
# ============================================================================


@pytest.fixture
def controllers_dir(tmp_path):
    path = tmp_path / "controllers"
    path.mkdir()
    return path


@pytest.fixture
def config(controllers_dir):
    return FulcrumConfig(controllers_path=str(controllers_dir))


@pytest.fixture
def mock_backend():
    return MockCacheBackend()


@pytest.fixture
def cache(mock_backend):
    return Cache(mock_backend)


@pytest.fixture
def memory_cache():
    return Cache(MemoryBackend(max_size=100))


@pytest.fixture
def registry():
    return ControllerRegistry()


@pytest.fixture
def dispatcher(config):
    return Dispatcher.from_config(config)


@pytest.fixture
def router():
    return Router()


@pytest.fixture
def bootstrapper(config, memory_cache):
    return Bootstrapper(config, cache=memory_cache).bootstrap()


@pytest.fixture
def front(config, memory_cache, registry):
    return FrontController(config=config, cache=memory_cache, registry=registry)
