"""
Router - maps request paths to Routes.

Two-tier matching:
1. Static route hash map: O(1) lookup for patterns with no placeholders
2. Compiled regex list for parameterized patterns, in registration order

When nothing matches, the path is split into *positional* parameters so
the front controller can attempt a convention-based direct route.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..faults.domains import PatternInvalidFault
from ..request import HttpRequest
from .route import Route

logger = logging.getLogger("fulcrum.routing")

# Placeholder syntax: {name} or {name:converter}
_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::([a-z]+))?\}")

# converter -> (regex fragment, cast)
_CONVERTERS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "str": (r"[^/]+", str),
    "int": (r"-?\d+", int),
    "path": (r".+", str),
}

# Value given to a positional key with no following segment.
POSITIONAL_FLAG = 1


@dataclass
class _CompiledRoute:
    route: Route
    regex: Optional["re.Pattern[str]"]
    casts: Dict[str, Callable[[str], Any]]
    methods: Optional[frozenset]

    def allows(self, method: str) -> bool:
        return self.methods is None or method in self.methods


def compile_pattern(pattern: str) -> Tuple[Optional["re.Pattern[str]"], Dict[str, Callable[[str], Any]]]:
    """
    Compile a route pattern.

    Returns ``(None, {})`` for static patterns.

    Raises:
        PatternInvalidFault: Pattern does not start with ``/``, uses an
            unknown converter or repeats a placeholder name
    """
    if not pattern.startswith("/"):
        raise PatternInvalidFault(pattern, "pattern must start with '/'")

    casts: Dict[str, Callable[[str], Any]] = {}
    parts: List[str] = []
    last = 0

    for match in _PLACEHOLDER_RE.finditer(pattern):
        name, converter = match.group(1), match.group(2) or "str"
        if converter not in _CONVERTERS:
            raise PatternInvalidFault(pattern, f"unknown converter '{converter}'")
        if name in casts:
            raise PatternInvalidFault(pattern, f"duplicate placeholder '{name}'")

        fragment, cast = _CONVERTERS[converter]
        parts.append(re.escape(pattern[last:match.start()]))
        parts.append(f"(?P<{name}>{fragment})")
        casts[name] = cast
        last = match.end()

    if not casts:
        return None, {}

    parts.append(re.escape(pattern[last:]))
    return re.compile("^" + "".join(parts) + "$"), casts


def positional_params(path: str) -> Dict[str, Any]:
    """
    Pair path segments into key/value parameters.

    ``/blog/show/id/42`` -> ``{"blog": "show", "id": "42"}``;
    a trailing key with no value maps to ``1``: ``/blog`` -> ``{"blog": 1}``.
    """
    segments = [s for s in path.split("/") if s]
    params: Dict[str, Any] = {}
    for i in range(0, len(segments), 2):
        key = segments[i]
        params[key] = segments[i + 1] if i + 1 < len(segments) else POSITIONAL_FLAG
    return params


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


class Router:
    """
    Pattern-based router.

    Example:
        router = Router()
        router.add_route("post", "/blog/{id:int}", "blog", "show")
        route = router.match(HttpRequest(path="/blog/42"))
        # route.params == {"id": 42}
    """

    def __init__(self):
        self._routes: List[_CompiledRoute] = []
        self._static: Dict[str, List[_CompiledRoute]] = {}
        self._by_name: Dict[str, Route] = {}

    def add(self, route: Route, methods: Optional[Sequence[str]] = None) -> Route:
        """Register a route, optionally limited to some HTTP methods."""
        regex, casts = compile_pattern(route.pattern)
        compiled = _CompiledRoute(
            route=route,
            regex=regex,
            casts=casts,
            methods=frozenset(m.upper() for m in methods) if methods else None,
        )
        if regex is None:
            self._static.setdefault(_normalize(route.pattern), []).append(compiled)
        else:
            self._routes.append(compiled)
        self._by_name[route.name] = route
        return route

    def add_route(
        self,
        name: str,
        pattern: str,
        controller: str,
        action: str = "index",
        defaults: Optional[Dict[str, Any]] = None,
        methods: Optional[Sequence[str]] = None,
    ) -> Route:
        return self.add(
            Route(name, pattern, controller, action, dict(defaults or {})),
            methods=methods,
        )

    @property
    def routes(self) -> List[Route]:
        return list(self._by_name.values())

    def match(self, request: HttpRequest) -> Optional[Route]:
        """
        Match a request.

        On success the bound parameters (route defaults overlaid with path
        values) are stored in ``request.route_params`` and a Route carrying
        them is returned. On failure the positional parameters of the path
        are stored instead and None is returned.
        """
        path = _normalize(request.path)

        for compiled in self._static.get(path, ()):
            if compiled.allows(request.method):
                return self._bind(request, compiled.route, {})

        for compiled in self._routes:
            if not compiled.allows(request.method):
                continue
            match = compiled.regex.match(path)
            if match is None:
                continue
            try:
                values = {
                    name: compiled.casts[name](raw)
                    for name, raw in match.groupdict().items()
                }
            except ValueError:
                continue
            return self._bind(request, compiled.route, values)

        request.set_route_params(positional_params(path))
        logger.debug(f"No route matched {request.method} {path}")
        return None

    def _bind(self, request: HttpRequest, route: Route, values: Dict[str, Any]) -> Route:
        params = {**route.params, **values}
        request.set_route_params(params)
        return route.with_params(params)

    def url_for(self, name: str, **params: Any) -> str:
        """
        Build a path for the named route.

        Raises:
            KeyError: Unknown route name or missing placeholder value
        """
        route = self._by_name[name]

        def substitute(match: "re.Match[str]") -> str:
            return str(params[match.group(1)])

        return _PLACEHOLDER_RE.sub(substitute, route.pattern)
