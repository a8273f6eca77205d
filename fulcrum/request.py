"""
Request - HTTP request value object consumed by the dispatch core.

Network I/O is terminated upstream; by the time a request reaches the
router it is a plain in-memory object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlsplit


@dataclass
class HttpRequest:
    """
    Incoming HTTP request.

    Attributes:
        method: HTTP method (upper-case)
        path: URL path without query string
        query: Query parameters (single value per key)
        headers: Request headers
        body: Raw request body
        route_params: Ordered parameters filled in by the router
        state: Free-form per-request state for hooks and controllers
    """

    method: str = "GET"
    path: str = "/"
    query: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    route_params: Dict[str, Any] = field(default_factory=dict)
    state: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.method = self.method.upper()

    @classmethod
    def from_url(cls, url: str, method: str = "GET", **kwargs) -> "HttpRequest":
        """Build a request from a path with an optional query string."""
        parts = urlsplit(url)
        query = {k: v[-1] for k, v in parse_qs(parts.query).items()}
        return cls(method=method, path=parts.path or "/", query=query, **kwargs)

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def query_param(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.query.get(key, default)

    def set_route_params(self, params: Dict[str, Any]) -> None:
        self.route_params = dict(params)
