"""
Tests for the fulcrum CLI (click CliRunner).
"""

import pytest
from click.testing import CliRunner

from fulcrum.cli.__main__ import cli
from fulcrum.testing import write_controller


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, controllers_dir):
    def _invoke(*args):
        return runner.invoke(cli, ["--controllers", str(controllers_dir), *args], obj={})
    return _invoke


@pytest.fixture
def blog(controllers_dir):
    return write_controller(controllers_dir, "BlogController", """
        def show_action(self, params):
            self.response.set_header("X-Post", str(params.get("id")))
            self.response.append(f"post {params.get('id')}")
    """)


class TestResolve:

    def test_direct_route(self, invoke, blog):
        result = invoke("resolve", "/blog/show/id/42")

        assert result.exit_code == 0, result.output
        assert "direct" in result.output
        assert "BlogController" in result.output
        assert "show_action" in result.output
        assert str(blog) in result.output

    def test_quiet(self, invoke, blog):
        result = invoke("--quiet", "resolve", "/blog/show")

        assert result.exit_code == 0
        assert result.output.strip() == "BlogController.show_action"

    def test_not_found(self, invoke):
        result = invoke("resolve", "/ghost/show")

        assert result.exit_code == 1
        assert "[ROUTE_NOT_FOUND]" in result.output

    def test_configured_route(self, runner, tmp_path, controllers_dir, blog):
        config = tmp_path / "fulcrum.yaml"
        config.write_text(
            f"controllers_path: {controllers_dir}\n"
            "routes:\n"
            "  post:\n"
            "    pattern: /p/{id:int}\n"
            "    controller: blog\n"
            "    action: show\n"
        )

        result = runner.invoke(cli, ["--config", str(config), "resolve", "/p/9"], obj={})

        assert result.exit_code == 0, result.output
        assert "router" in result.output
        assert "/p/{id:int}" in result.output


class TestCheck:

    def test_existing(self, invoke, blog):
        result = invoke("check", "blog", "show", "--instantiate")

        assert result.exit_code == 0, result.output
        assert "Controller file exists" in result.output
        assert "Action is callable" in result.output

    def test_missing_file(self, invoke):
        result = invoke("check", "ghost")

        assert result.exit_code == 1
        assert "GhostController" in result.output
        assert "Controller file not found" in result.output

    def test_missing_action(self, invoke, blog):
        result = invoke("check", "blog", "archive", "--instantiate")

        assert result.exit_code == 1
        assert "archive_action" in result.output

    def test_debug_integrity_fault(self, invoke, controllers_dir, blog):
        (controllers_dir / "NewsController.py").write_text(blog.read_text())

        result = invoke("--debug", "check", "news", "--instantiate")

        assert result.exit_code == 1
        assert "[CONTROLLER_CLASS_MISSING]" in result.output


class TestDispatch:

    def test_dispatch(self, invoke, blog):
        result = invoke("dispatch", "/blog/show/id/5")

        assert result.exit_code == 0, result.output
        assert "200" in result.output
        assert "X-Post" in result.output
        assert result.output.rstrip().endswith("post 5")

    def test_missing_action_fault(self, invoke, blog):
        result = invoke("dispatch", "/blog/archive")

        assert result.exit_code == 1
        assert "[CONTROLLER_ACTION_NOT_CALLABLE]" in result.output

    def test_undefined_controller_class(self, invoke, controllers_dir):
        (controllers_dir / "EmptyController.py").write_text("VALUE = 1\n")

        result = invoke("dispatch", "/empty")

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "EmptyController" in result.output


class TestRoutes:

    def test_no_routes(self, invoke):
        result = invoke("routes")

        assert result.exit_code == 0
        assert "No routes configured" in result.output

    def test_invalid_config(self, runner, tmp_path):
        config = tmp_path / "fulcrum.yaml"
        config.write_text("dispatch_resolve_ttl: -1\n")

        result = runner.invoke(cli, ["--config", str(config), "routes"], obj={})

        assert result.exit_code == 1
        assert "[CONFIG_INVALID]" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "fulcrum" in result.output
