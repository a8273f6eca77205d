"""
Route - a routing rule plus the parameters bound when it matched.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


@dataclass
class Route:
    """
    Matched (or synthesized) routing rule.

    ``name`` and ``pattern`` are informational; the dispatcher only looks
    at ``controller``, ``action`` and ``params``.

    Attributes:
        name: Route name (used by ``Router.url_for``)
        pattern: URL pattern the route was declared with
        controller: Controller identifier, e.g. ``"blog"``
        action: Action identifier, e.g. ``"show"``
        params: Parameter name -> value, in order
    """

    name: str
    pattern: str
    controller: str
    action: str
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_dispatchable(self) -> bool:
        """Both identifiers must be non-empty for the route to be resolvable."""
        return bool(self.controller) and bool(self.action)

    def with_params(self, params: Mapping[str, Any]) -> "Route":
        """Copy of this route carrying ``params``."""
        return dataclasses.replace(self, params=dict(params))

    def __repr__(self) -> str:
        return (
            f"<Route {self.name!r} {self.pattern!r} -> "
            f"{self.controller}.{self.action} params={self.params!r}>"
        )
