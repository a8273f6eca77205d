"""
Fulcrum Testing - helpers for testing controllers and dispatch hooks.

Usage:
    from fulcrum.testing import MockCacheBackend, make_request, write_controller

    def test_show(tmp_path):
        write_controller(tmp_path, "BlogController", '''
            def show_action(self, params):
                self.response.append("post")
        ''')
        app = Application(FulcrumConfig(controllers_path=str(tmp_path)))
        assert app.handle(make_request("/blog/show")).content == "post"

Components:
    - MockCacheBackend: Cache backend that records calls and TTLs
    - make_request:     HttpRequest from a URL
    - write_controller: Controller backing file generator
"""

from .cache import MockCacheBackend
from .utils import make_request, write_controller

__all__ = [
    "MockCacheBackend",
    "make_request",
    "write_controller",
]
