"""
Front Controller - runs the dispatch loop.

Every request passes through the front controller, which can apply
security policies, choose a different controller and post-process the
response. One loop iteration:

1. front controller ``on_pre_dispatch``; a falsy result skips to step 5
   with no token
2. instantiate the controller and check the action is callable
3. controller ``on_pre_dispatch``; unless it returns exactly False the
   action runs with the token's parameters
4. controller ``on_post_dispatch`` yields the next token (or None)
5. front controller ``on_post_dispatch`` may replace that token

The loop ends when step 5 yields None. Nothing here catches errors
raised by hooks or actions.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..bootstrap import Bootstrapper
from ..cache import Cache
from ..config import FulcrumConfig, get_default_config
from ..dispatch import Dispatcher, DispatchToken
from ..request import HttpRequest
from ..response import HttpResponse
from ..routing import Route, Router
from ..routing.router import POSITIONAL_FLAG
from .faults import DispatchLoopFault, InvalidControllerActionFault
from .loader import controller_file_exists, create_controller_instance
from .policy import DispatchPolicy
from .registry import ControllerRegistry


class FrontController:
    """
    Base front controller.

    Override ``on_pre_dispatch`` / ``on_post_dispatch`` / ``filter_response``
    in a subclass, or pass ``policies`` to compose the same behaviour.

    Args:
        config: Dispatch configuration (process default when omitted)
        cache: Cache for controller file existence flags
        registry: Controller registry (process default when omitted)
        policies: Hook objects consulted in order
    """

    response_class = HttpResponse

    def __init__(
        self,
        config: Optional[FulcrumConfig] = None,
        cache: Optional[Cache] = None,
        registry: Optional[ControllerRegistry] = None,
        policies: Optional[Sequence[DispatchPolicy]] = None,
    ):
        self.config = config
        self.cache = cache
        self.registry = registry
        self.policies: List[DispatchPolicy] = list(policies or [])
        self.logger = logging.getLogger("fulcrum.dispatch")

    def add_policy(self, policy: DispatchPolicy) -> None:
        self.policies.append(policy)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def on_pre_dispatch(
        self,
        front_controller: "FrontController",
        request: HttpRequest,
        bootstrapper: Bootstrapper,
        router: Router,
        dispatcher: Dispatcher,
        route: Route,
        dispatch_token: DispatchToken,
        response: HttpResponse,
    ) -> bool:
        """
        Called before the front controller dispatches a token.

        If this returns a falsy value the action controller is not created
        and the front controller's ``on_post_dispatch`` receives None. The
        default asks each policy in turn; the first veto wins.

        Returns:
            Should the token be dispatched
        """
        for policy in self.policies:
            if not policy.on_pre_dispatch(
                front_controller,
                request,
                bootstrapper,
                router,
                dispatcher,
                route,
                dispatch_token,
                response,
            ):
                self.logger.debug(
                    f"{type(policy).__name__} vetoed {dispatch_token.controller_class_name}"
                    f".{dispatch_token.action_method_name}"
                )
                return False
        return True

    def on_post_dispatch(self, dispatch_token: Optional[DispatchToken]) -> Optional[DispatchToken]:
        """
        Called after each loop iteration with the token the action
        controller requested (None when it requested nothing or the
        iteration was vetoed). The returned token is dispatched next.
        """
        for policy in self.policies:
            dispatch_token = policy.on_post_dispatch(dispatch_token)
        return dispatch_token

    def filter_response(self, response: HttpResponse) -> None:
        """Post-process the response once the loop has finished."""
        for policy in self.policies:
            policy.filter_response(response)

    # ------------------------------------------------------------------
    # Dispatch loop
    # ------------------------------------------------------------------

    def dispatch(
        self,
        request: HttpRequest,
        bootstrapper: Bootstrapper,
        router: Router,
        dispatcher: Dispatcher,
        route: Route,
        dispatch_token: Optional[DispatchToken],
    ) -> HttpResponse:
        """
        Dispatch a request to controller actions until no token remains.

        Args:
            request: The initial HTTP request
            bootstrapper: The application bootstrapper
            router: The router used to route the request
            dispatcher: The dispatcher used for the request
            route: The initially matched route
            dispatch_token: The token resolved from ``route``

        Returns:
            The single response written to by every dispatched action

        Raises:
            InvalidControllerFault: Controller backing file does not exist
            InvalidControllerActionFault: Action method is not callable
            DispatchLoopFault: ``max_forwards`` configured and exceeded
            Exception: Anything raised by hooks or actions, unchanged
        """
        # Same response for the entire dispatch loop
        response = self.response_class()
        max_forwards = self._config().max_forwards
        iterations = 0

        while dispatch_token is not None:
            iterations += 1
            if max_forwards is not None and iterations > max_forwards + 1:
                raise DispatchLoopFault(max_forwards, repr(dispatch_token))

            if self.on_pre_dispatch(
                self,
                request,
                bootstrapper,
                router,
                dispatcher,
                route,
                dispatch_token,
                response,
            ):
                dispatch_token = self._dispatch_token(
                    request,
                    bootstrapper,
                    router,
                    dispatcher,
                    route,
                    dispatch_token,
                    response,
                )
            else:
                # Cleared so a veto cannot loop forever
                dispatch_token = None

            # Front controller may override the action controller's token
            dispatch_token = self.on_post_dispatch(dispatch_token)

        self.logger.debug(f"Dispatch finished after {iterations} iteration(s)")

        self.filter_response(response)

        return response

    def _dispatch_token(
        self,
        request: HttpRequest,
        bootstrapper: Bootstrapper,
        router: Router,
        dispatcher: Dispatcher,
        route: Route,
        dispatch_token: DispatchToken,
        response: HttpResponse,
    ) -> Optional[DispatchToken]:
        """Run one controller action; returns the token it forwards to."""
        controller_class_name = dispatch_token.controller_class_name
        action_method_name = dispatch_token.action_method_name

        controller = create_controller_instance(
            dispatch_token,
            cache=self.cache,
            config=self.config,
            registry=self.registry,
        )

        action = getattr(controller, action_method_name, None)
        if not callable(action):
            raise InvalidControllerActionFault(controller_class_name, action_method_name)

        self.logger.debug(f"Dispatching {controller_class_name}.{action_method_name}")

        if controller.on_pre_dispatch(
            self,
            request,
            bootstrapper,
            router,
            dispatcher,
            route,
            dispatch_token,
            response,
        ) is not False:
            action(dispatch_token.get_params())
        else:
            self.logger.debug(f"{controller_class_name} skipped {action_method_name}")

        # Post-dispatch runs even if the action was skipped
        return controller.on_post_dispatch()

    # ------------------------------------------------------------------
    # Direct routes
    # ------------------------------------------------------------------

    def get_direct_route(self, request: HttpRequest, dispatcher: Dispatcher) -> Optional[Route]:
        """
        Resolve a request straight to a controller action without a
        configured route.

        The first route parameter key is the controller, its value the
        action (``index`` when the value is the positional flag ``1``);
        the remaining parameters become action parameters.

        Returns:
            The synthesized route if its controller file exists, else None
        """
        route_params = request.route_params
        if not route_params:
            return None

        controller_name = next(iter(route_params))
        value = route_params[controller_name]

        if isinstance(value, int) and value == POSITIONAL_FLAG:
            action_name = "index"
        else:
            action_name = str(value)

        parameters = {k: v for k, v in route_params.items() if k != controller_name}

        route = Route(
            name=controller_name,
            pattern=f"/{controller_name}/{action_name}",
            controller=controller_name,
            action=action_name,
            params=parameters,
        )

        dispatch_token = dispatcher.resolve(route)

        if self.controller_file_exists(
            dispatch_token.controller_class_filename,
            cache=self.cache,
            config=self.config,
        ):
            return route

        return None

    # ------------------------------------------------------------------
    # Static utilities
    # ------------------------------------------------------------------

    create_controller_instance = staticmethod(create_controller_instance)
    controller_file_exists = staticmethod(controller_file_exists)

    def _config(self) -> FulcrumConfig:
        return self.config if self.config is not None else get_default_config()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} policies={len(self.policies)}>"
