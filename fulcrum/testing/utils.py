"""
Fulcrum Testing - request and controller-file helpers.
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Union

from ..request import HttpRequest


def make_request(path: str = "/", method: str = "GET", **kwargs: Any) -> HttpRequest:
    """
    Build an HttpRequest from a path with an optional query string.

    Usage::

        request = make_request("/blog/show/id/42?preview=1")
        assert request.query == {"preview": "1"}
    """
    return HttpRequest.from_url(path, method=method, **kwargs)


def write_controller(
    directory: Union[str, Path],
    class_name: str,
    body: str = "",
    *,
    imports: str = "from fulcrum.controller import Controller",
) -> Path:
    """
    Write a controller backing file ``<directory>/<class_name>.py``.

    ``body`` is the class body; it is dedented and indented for you.
    An empty body produces a controller with a single ``index_action``.

    Usage::

        write_controller(tmp_path, "BlogController", '''
            def show_action(self, params):
                self.response.append(f"post {params['id']}")
        ''')
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    body = textwrap.dedent(body).strip() or "def index_action(self, params):\n    pass"
    source = (
        f"{imports}\n\n\n"
        f"class {class_name}(Controller):\n"
        f"{textwrap.indent(body, '    ')}\n"
    )

    path = directory / f"{class_name}.py"
    path.write_text(source)
    return path
