"""
Controller faults - resolution, action and integrity errors raised while
turning a DispatchToken into a running controller action.
"""

from __future__ import annotations

from ..faults.core import Severity
from ..faults.domains import DispatchFault


class InvalidControllerFault(DispatchFault):
    """The controller's backing file does not exist."""

    def __init__(self, filename: str, controller_class: str = "", **kwargs):
        super().__init__(
            code="CONTROLLER_NOT_FOUND",
            message=f'Controller file "{filename}" does not exist',
            metadata={"filename": filename, "controller_class": controller_class},
        )


class InvalidControllerActionFault(DispatchFault):
    """The resolved action is not a callable method of the controller."""

    def __init__(self, controller_class: str, action_method: str, **kwargs):
        super().__init__(
            code="CONTROLLER_ACTION_NOT_CALLABLE",
            message=f"Controller action {controller_class}.{action_method} is not callable",
            metadata={"controller_class": controller_class, "action_method": action_method},
        )


class ControllerIntegrityFault(DispatchFault):
    """Backing file loaded but the expected class never got defined (debug only)."""

    def __init__(self, controller_class: str, filename: str, **kwargs):
        super().__init__(
            code="CONTROLLER_CLASS_MISSING",
            message=(
                f'Controller class "{controller_class}" not found in expected file '
                f'of "{filename}", forgot to rename it after copying?'
            ),
            severity=Severity.FATAL,
            metadata={"controller_class": controller_class, "filename": filename},
        )


class DispatchLoopFault(DispatchFault):
    """A request forwarded more times than ``max_forwards`` allows."""

    def __init__(self, limit: int, last_token: str = "", **kwargs):
        super().__init__(
            code="DISPATCH_LOOP_LIMIT",
            message=f"Request forwarded more than {limit} times (last: {last_token})",
            metadata={"limit": limit, "last_token": last_token},
        )
