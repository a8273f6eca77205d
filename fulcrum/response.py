"""
Response - mutable HTTP response accumulator.

One response is created per top-level dispatch and every controller in a
forwarding chain writes into it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class HttpResponse:
    """
    HTTP response built up across a dispatch loop.

    Body content is kept as ordered chunks so several forwarded actions
    can each contribute output.
    """

    __slots__ = ("status", "headers", "_chunks")

    def __init__(
        self,
        content: Optional[str] = None,
        *,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.status = status
        self.headers: Dict[str, str] = dict(headers or {})
        self._chunks: List[str] = []
        if content is not None:
            self._chunks.append(content)

    @property
    def content(self) -> str:
        """Full body text."""
        return "".join(self._chunks)

    @property
    def chunks(self) -> List[str]:
        return list(self._chunks)

    def append(self, content: Any) -> "HttpResponse":
        """Append to the body."""
        self._chunks.append(str(content))
        return self

    def set_content(self, content: Any) -> "HttpResponse":
        """Replace the body."""
        self._chunks = [str(content)]
        return self

    def set_status(self, status: int) -> "HttpResponse":
        if not 100 <= status <= 599:
            raise ValueError(f"Invalid HTTP status code: {status}")
        self.status = status
        return self

    def set_header(self, name: str, value: str) -> "HttpResponse":
        self.headers[name] = value
        return self

    def redirect(self, url: str, status: int = 302) -> "HttpResponse":
        """Turn the response into a redirect to ``url``."""
        self.set_status(status)
        self.headers["Location"] = url
        return self

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400 and "Location" in self.headers

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "headers": dict(self.headers),
            "content": self.content,
        }

    def __repr__(self) -> str:
        return f"<HttpResponse status={self.status} bytes={len(self.content)}>"
