"""
End-to-end tests: Application routing, direct routes, dispatch and
bootstrapping against controller files on disk.
"""

import pytest

from fulcrum.app import Application
from fulcrum.bootstrap import Bootstrapper
from fulcrum.cache import Cache, NullBackend, get_default_cache
from fulcrum.config import FulcrumConfig, get_default_config
from fulcrum.controller import ControllerIntegrityFault, InvalidControllerActionFault
from fulcrum.faults import ConfigInvalidFault, RouteNotFoundFault
from fulcrum.testing import make_request, write_controller


@pytest.fixture
def app(config):
    return Application(config)


@pytest.fixture
def blog(controllers_dir):
    return write_controller(controllers_dir, "BlogController", """
        def index_action(self, params):
            self.response.append("index")

        def show_action(self, params):
            if "id" not in params:
                self.forward("index")
                return
            self.response.append(f"post {params['id']}")
    """)


# ============================================================================
# Application
# ============================================================================


class TestApplication:

    def test_configured_route(self, app, blog):
        app.router.add_route("post", "/posts/{id:int}", "blog", "show")

        response = app.handle(make_request("/posts/7"))

        assert response.content == "post 7"

    def test_direct_route(self, app, blog):
        assert app.handle(make_request("/blog/show/id/42")).content == "post 42"

    def test_direct_route_index(self, app, blog):
        assert app.handle(make_request("/blog")).content == "index"

    def test_forward(self, app, blog):
        assert app.handle(make_request("/blog/show")).content == "index"

    def test_not_found(self, app):
        with pytest.raises(RouteNotFoundFault) as exc_info:
            app.handle(make_request("/nowhere/at/all"))

        assert exc_info.value.metadata == {"path": "/nowhere/at/all", "method": "GET"}

    def test_root_without_route(self, app):
        with pytest.raises(RouteNotFoundFault):
            app.handle(make_request("/"))

    def test_missing_action(self, app, blog):
        with pytest.raises(InvalidControllerActionFault):
            app.handle(make_request("/blog/archive"))

    def test_debug_integrity(self, controllers_dir, blog):
        (controllers_dir / "NewsController.py").write_text(blog.read_text())
        app = Application(FulcrumConfig(controllers_path=str(controllers_dir), debug=True))

        with pytest.raises(ControllerIntegrityFault):
            app.handle(make_request("/news"))

    def test_controller_file_loaded_once(self, app, blog):
        app.handle(make_request("/blog"))
        app.handle(make_request("/blog/show/id/1"))

        from fulcrum.controller import default_registry
        assert default_registry.is_loaded(str(blog))
        assert default_registry.load_file(str(blog)) is False

    def test_resolve_route_prefers_router(self, app, blog):
        app.router.add_route("blog_home", "/blog", "blog", "show", defaults={"id": "home"})

        assert app.handle(make_request("/blog")).content == "post home"

    def test_repr(self, app):
        assert "routes=0" in repr(app)


# ============================================================================
# Configured from files
# ============================================================================


class TestFromConfig:

    def test_routes_from_yaml(self, tmp_path, controllers_dir, blog):
        path = tmp_path / "fulcrum.yaml"
        path.write_text(
            f"controllers_path: {controllers_dir}\n"
            "routes:\n"
            "  post:\n"
            "    pattern: /p/{id:int}\n"
            "    controller: blog\n"
            "    action: show\n"
            "    methods: [GET]\n"
        )

        app = Application.from_config([str(path)])

        assert [r.name for r in app.router.routes] == ["post"]
        assert app.handle(make_request("/p/3")).content == "post 3"

    def test_overrides(self, controllers_dir):
        app = Application.from_config(controllers_path=str(controllers_dir), debug=True)

        assert app.config.debug is True
        assert app.dispatcher.controllers_path == str(controllers_dir)

    @pytest.mark.parametrize("routes", [
        ["not", "a", "mapping"],
        {"post": "/p"},
        {"post": {"controller": "blog"}},
        {"post": {"pattern": "/p"}},
    ])
    def test_invalid_routes(self, app, routes):
        with pytest.raises(ConfigInvalidFault):
            app.load_routes(routes)


# ============================================================================
# Bootstrapper
# ============================================================================


class TestBootstrapper:

    def test_installs_process_defaults(self, config):
        bootstrapper = Bootstrapper(config).bootstrap()

        assert get_default_config() is config
        assert get_default_cache() is bootstrapper.cache

    def test_idempotent(self, config):
        bootstrapper = Bootstrapper(config)
        bootstrapper.bootstrap()
        cache = bootstrapper.cache

        assert bootstrapper.bootstrap() is bootstrapper
        assert bootstrapper.cache is cache

    def test_keeps_given_cache(self, config):
        cache = Cache(NullBackend())
        assert Bootstrapper(config, cache=cache).bootstrap().cache is cache

    def test_services(self):
        bootstrapper = Bootstrapper()
        db = object()

        assert bootstrapper.register("db", db) is db
        assert "db" in bootstrapper
        assert bootstrapper.get("db") is db
        assert bootstrapper.get("mail", "none") == "none"

    def test_controllers_can_reach_services(self, config, controllers_dir):
        write_controller(controllers_dir, "StatusController", """
            def index_action(self, params):
                self.response.append(self.bootstrapper.get("version"))
        """)
        app = Application(config)
        app.bootstrapper.register("version", "1.2.3")

        assert app.handle(make_request("/status")).content == "1.2.3"
