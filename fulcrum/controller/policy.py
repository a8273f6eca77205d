"""
Dispatch policies - composable front-controller hooks.

Cross-cutting concerns (authentication, auditing, response filtering)
can be written as small policy objects and handed to the front
controller instead of subclassing it.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..bootstrap import Bootstrapper
    from ..dispatch import Dispatcher, DispatchToken
    from ..request import HttpRequest
    from ..response import HttpResponse
    from ..routing import Route, Router
    from .front import FrontController


class DispatchPolicy:
    """
    Base policy; every hook passes through unchanged.

    Example:
        class RequireLogin(DispatchPolicy):
            def on_pre_dispatch(self, front_controller, request, bootstrapper,
                                router, dispatcher, route, dispatch_token, response):
                if dispatch_token.controller_name == "admin" and "user" not in request.state:
                    response.redirect("/login")
                    return False
                return True
    """

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
        """Return False to veto dispatching ``dispatch_token``."""
        return True

    def on_post_dispatch(self, dispatch_token: Optional["DispatchToken"]) -> Optional["DispatchToken"]:
        """Return the token to continue with (possibly a different one) or None."""
        return dispatch_token

    def filter_response(self, response: "HttpResponse") -> None:
        pass
