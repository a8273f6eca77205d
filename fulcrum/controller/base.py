"""
Controller Base Class

Action controllers are plain classes whose ``*_action`` methods receive the
dispatch token's parameters. Two lifecycle hooks wrap every action:

    on_pre_dispatch(...)  -> return False to skip the action
    on_post_dispatch()    -> return a DispatchToken to forward, or None
"""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..bootstrap import Bootstrapper
    from ..dispatch import Dispatcher, DispatchToken
    from ..request import HttpRequest
    from ..response import HttpResponse
    from ..routing import Route, Router
    from .front import FrontController


class Controller:
    """
    Base action controller.

    A fresh instance is created for every iteration of the dispatch loop,
    even when a forward targets the same class again, so instance state
    never leaks between forwarded actions.

    Example:
        class BlogController(Controller):
            def index_action(self, params):
                self.response.append("<h1>Blog</h1>")

            def show_action(self, params):
                if "id" not in params:
                    self.forward("index")
                    return
                self.response.append(f"post {params['id']}")
    """

    # Dispatch context, filled in by on_pre_dispatch
    front_controller: Optional["FrontController"] = None
    request: Optional["HttpRequest"] = None
    bootstrapper: Optional["Bootstrapper"] = None
    router: Optional["Router"] = None
    dispatcher: Optional["Dispatcher"] = None
    route: Optional["Route"] = None
    dispatch_token: Optional["DispatchToken"] = None
    response: Optional["HttpResponse"] = None

    _forward_token: Optional["DispatchToken"] = None

    # Lifecycle hooks

    def on_pre_dispatch(
        self,
        front_controller: "FrontController",
        request: "HttpRequest",
        bootstrapper: "Bootstrapper",
        router: "Router",
        dispatcher: "Dispatcher",
        route: "Route",
        dispatch_token: "DispatchToken",
        response: "HttpResponse",
    ) -> bool:
        """
        Called before the action method.

        The default stores the dispatch context on the instance and allows
        the action to run. Overrides should call ``super()`` if they use
        ``forward()`` or the stored attributes.

        Returns:
            False to skip the action; ``on_post_dispatch`` still runs
        """
        self.front_controller = front_controller
        self.request = request
        self.bootstrapper = bootstrapper
        self.router = router
        self.dispatcher = dispatcher
        self.route = route
        self.dispatch_token = dispatch_token
        self.response = response
        return True

    def on_post_dispatch(self) -> Optional["DispatchToken"]:
        """
        Called after the action, even when it was skipped.

        Returns:
            Token to forward the request to, or None to finish
        """
        return self._forward_token

    # Forwarding

    def forward(
        self,
        action: str,
        controller: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> "DispatchToken":
        """
        Forward the request to another action once this one returns.

        The client sees a single response; no redirect is issued.

        Args:
            action: Action identifier, e.g. ``"show"``
            controller: Controller identifier (defaults to the current one)
            params: Action parameters (defaults to none)

        Returns:
            The token the loop will dispatch next
        """
        from ..routing import Route

        if self.dispatcher is None or self.dispatch_token is None:
            raise RuntimeError(
                "forward() needs the dispatch context; "
                "call super().on_pre_dispatch(...) in overridden hooks"
            )

        controller = controller or self.dispatch_token.controller_name
        route = Route(
            name=f"{controller}.{action}",
            pattern=f"/{controller}/{action}",
            controller=controller,
            action=action,
            params=dict(params or {}),
        )
        self._forward_token = self.dispatcher.resolve(route)
        return self._forward_token

    def cancel_forward(self) -> None:
        self._forward_token = None

    @property
    def forward_token(self) -> Optional["DispatchToken"]:
        return self._forward_token
