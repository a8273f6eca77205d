"""
Inspection commands - resolve, check and dispatch against a live
Application without a server in front of it.
"""

from dataclasses import dataclass
from typing import List, Optional

from ...app import Application
from ...dispatch import DispatchToken
from ...faults.domains import RouteNotFoundFault
from ...request import HttpRequest
from ...response import HttpResponse
from ...routing import Route


@dataclass
class Resolution:
    """How a path resolved: via a configured route or a direct route."""
    source: str
    route: Route
    token: DispatchToken


@dataclass
class ControllerReport:
    token: DispatchToken
    file_exists: bool
    instance_class: Optional[str] = None
    action_callable: Optional[bool] = None


def resolve_path(app: Application, path: str, method: str = "GET") -> Resolution:
    """
    Resolve a path the way ``Application.handle`` would, without dispatching.

    Raises:
        RouteNotFoundFault: Neither a configured nor a direct route exists
    """
    request = HttpRequest.from_url(path, method=method)

    route = app.router.match(request)
    source = "router"
    if route is None:
        route = app.front_controller.get_direct_route(request, app.dispatcher)
        source = "direct"
    if route is None:
        raise RouteNotFoundFault(request.path, request.method)

    return Resolution(source=source, route=route, token=app.dispatcher.resolve(route))


def check_controller(
    app: Application,
    controller: str,
    action: str = "index",
    instantiate: bool = False,
) -> ControllerReport:
    """
    Report where a controller/action pair resolves to and whether its
    backing file exists. With ``instantiate`` the controller is loaded and
    created, so a missing class or file raises its fault.
    """
    route = Route(
        name=controller,
        pattern=f"/{controller}/{action}",
        controller=controller,
        action=action,
    )
    token = app.dispatcher.resolve(route)
    front = app.front_controller

    report = ControllerReport(
        token=token,
        file_exists=front.controller_file_exists(
            token.controller_class_filename,
            cache=front.cache,
            config=app.config,
        ),
    )

    if instantiate:
        instance = front.create_controller_instance(
            token,
            cache=front.cache,
            config=app.config,
            registry=front.registry,
        )
        report.instance_class = type(instance).__name__
        report.action_callable = callable(getattr(instance, token.action_method_name, None))

    return report


def dispatch_path(app: Application, path: str, method: str = "GET") -> HttpResponse:
    """Run the full dispatch loop for a path."""
    return app.handle(HttpRequest.from_url(path, method=method))


def list_routes(app: Application) -> List[List[str]]:
    """Configured routes as table rows."""
    return [
        [route.name, route.pattern, f"{route.controller}.{route.action}"]
        for route in app.router.routes
    ]
