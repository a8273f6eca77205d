"""
Dispatcher - resolves Routes into DispatchTokens.

Naming convention:
- controller ``blog`` -> class ``BlogController`` in
  ``<controllers_path>/BlogController.py``
- controller ``user-profile`` -> ``UserProfileController``
- action ``show`` -> method ``show_action``
- action ``edit-password`` or ``editPassword`` -> ``edit_password_action``
"""

from __future__ import annotations

import os
import re
from typing import Any

from ..faults.domains import RouteNotDispatchableFault
from ..routing.route import Route
from .token import DispatchToken

_WORD_SPLIT_RE = re.compile(r"[-_\s]+")
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_class_name(identifier: str, suffix: str = "Controller") -> str:
    """``user-profile`` -> ``UserProfileController``."""
    words = [w for w in _WORD_SPLIT_RE.split(_CAMEL_RE.sub("-", identifier)) if w]
    return "".join(w[:1].upper() + w[1:] for w in words) + suffix


def to_method_name(identifier: str, suffix: str = "_action") -> str:
    """``editPassword`` / ``edit-password`` -> ``edit_password_action``."""
    words = [w for w in _WORD_SPLIT_RE.split(_CAMEL_RE.sub("-", identifier)) if w]
    return "_".join(w.lower() for w in words) + suffix


class Dispatcher:
    """
    Maps a Route's controller/action identifiers to concrete class, method
    and backing file names.
    """

    def __init__(
        self,
        controllers_path: str = "controllers",
        controller_suffix: str = "Controller",
        action_suffix: str = "_action",
    ):
        self.controllers_path = controllers_path
        self.controller_suffix = controller_suffix
        self.action_suffix = action_suffix

    @classmethod
    def from_config(cls, config: Any) -> "Dispatcher":
        return cls(
            controllers_path=config.controllers_path,
            controller_suffix=config.controller_suffix,
            action_suffix=config.action_suffix,
        )

    def resolve(self, route: Route) -> DispatchToken:
        """
        Resolve a route into a dispatch token.

        Raises:
            RouteNotDispatchableFault: Route has an empty controller or action
        """
        if not route.is_dispatchable:
            missing = "controller" if not route.controller else "action"
            raise RouteNotDispatchableFault(route.name, f"empty {missing} identifier")

        class_name = to_class_name(str(route.controller), self.controller_suffix)

        return DispatchToken(
            controller_class_name=class_name,
            action_method_name=to_method_name(str(route.action), self.action_suffix),
            controller_class_filename=os.path.join(self.controllers_path, f"{class_name}.py"),
            params=route.params,
            controller_name=str(route.controller),
            action_name=str(route.action),
        )

    def __repr__(self) -> str:
        return f"<Dispatcher path={self.controllers_path!r}>"
