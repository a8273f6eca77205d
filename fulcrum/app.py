"""
Application - ties router, dispatcher and front controller together.

``handle()`` is what an HTTP server adapter calls for each request:

    route  = router.match(request)
          or front_controller.get_direct_route(request, dispatcher)
          or RouteNotFoundFault
    token  = dispatcher.resolve(route)
    return front_controller.dispatch(...)

Faults propagate; mapping them to error pages is the caller's job.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .bootstrap import Bootstrapper
from .config import ConfigLoader, FulcrumConfig
from .controller.front import FrontController
from .dispatch import Dispatcher
from .faults.domains import ConfigInvalidFault, RouteNotFoundFault
from .request import HttpRequest
from .response import HttpResponse
from .routing import Route, Router


class Application:
    """
    Fulcrum application.

    Example:
        app = Application(FulcrumConfig(controllers_path="app/controllers"))
        app.router.add_route("post", "/blog/{id:int}", "blog", "show")
        response = app.handle(HttpRequest(path="/blog/42"))
    """

    def __init__(
        self,
        config: Optional[FulcrumConfig] = None,
        router: Optional[Router] = None,
        dispatcher: Optional[Dispatcher] = None,
        front_controller: Optional[FrontController] = None,
        bootstrapper: Optional[Bootstrapper] = None,
    ):
        self.config = config or FulcrumConfig()
        self.bootstrapper = bootstrapper or Bootstrapper(self.config)
        self.bootstrapper.bootstrap()
        self.router = router or Router()
        self.dispatcher = dispatcher or Dispatcher.from_config(self.config)
        self.front_controller = front_controller or FrontController(
            config=self.config,
            cache=self.bootstrapper.cache,
        )
        self.logger = logging.getLogger("fulcrum.app")

    @classmethod
    def from_config(cls, paths: Optional[list[str]] = None, **overrides: Any) -> "Application":
        """
        Build an application from config files, environment and overrides.

        A top-level ``routes`` mapping declares routes by name:

            routes:
              post:
                pattern: /blog/{id:int}
                controller: blog
                action: show
                methods: [GET]
        """
        loader = ConfigLoader.load(paths=paths, overrides=overrides or None)
        app = cls(loader.get_config())
        app.load_routes(loader.get("routes") or {})
        return app

    def load_routes(self, routes: Dict[str, Dict[str, Any]]) -> None:
        """
        Register routes declared as ``name -> options``.

        Raises:
            ConfigInvalidFault: A declaration is not a mapping or lacks
                ``pattern`` or ``controller``
        """
        if not isinstance(routes, dict):
            raise ConfigInvalidFault("routes", "expected a mapping of route name to options")

        for name, options in routes.items():
            if not isinstance(options, dict):
                raise ConfigInvalidFault(f"routes.{name}", "expected a mapping")
            for required in ("pattern", "controller"):
                if not options.get(required):
                    raise ConfigInvalidFault(f"routes.{name}", f"missing '{required}'")
            self.router.add_route(
                name,
                options["pattern"],
                options["controller"],
                options.get("action", "index"),
                defaults=options.get("defaults"),
                methods=options.get("methods"),
            )
            self.logger.debug(f"Route {name!r} loaded from config")

    def resolve_route(self, request: HttpRequest) -> Route:
        """
        Find the route for a request, falling back to a direct route.

        Raises:
            RouteNotFoundFault: Neither a configured nor a direct route exists
        """
        route = self.router.match(request)
        if route is None:
            route = self.front_controller.get_direct_route(request, self.dispatcher)
        if route is None:
            raise RouteNotFoundFault(request.path, request.method)
        return route

    def handle(self, request: HttpRequest) -> HttpResponse:
        """Route and dispatch a request, returning the accumulated response."""
        route = self.resolve_route(request)
        dispatch_token = self.dispatcher.resolve(route)

        self.logger.debug(f"{request.method} {request.path} -> {dispatch_token!r}")

        return self.front_controller.dispatch(
            request,
            self.bootstrapper,
            self.router,
            self.dispatcher,
            route,
            dispatch_token,
        )

    def __repr__(self) -> str:
        return f"<Application controllers={self.config.controllers_path!r} routes={len(self.router.routes)}>"
