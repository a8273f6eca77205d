"""
DispatchToken - resolved descriptor for one controller invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class DispatchToken:
    """
    Immutable (controller class, action method, backing file, params) tuple.

    Produced by ``Dispatcher.resolve`` and consumed by one iteration of the
    dispatch loop. Controllers forward by producing a new token.

    Attributes:
        controller_class_name: Class identifier looked up in the registry
        action_method_name: Method invoked on the controller instance
        controller_class_filename: File expected to define the class
        params: Read-only, ordered action parameters
        controller_name: Controller identifier of the originating route
        action_name: Action identifier of the originating route
    """

    controller_class_name: str
    action_method_name: str
    controller_class_filename: str
    params: Mapping[str, Any] = field(default_factory=dict)
    controller_name: str = ""
    action_name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def get_params(self) -> Dict[str, Any]:
        """Fresh mutable copy of the parameters, as handed to the action."""
        return dict(self.params)

    def __repr__(self) -> str:
        return (
            f"<DispatchToken {self.controller_class_name}.{self.action_method_name} "
            f"params={dict(self.params)!r}>"
        )
