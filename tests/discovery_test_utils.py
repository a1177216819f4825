"""
Shared test doubles for the discovery and download tests.
"""

import json
from typing import Dict, Union
from unittest.mock import AsyncMock

from device_faker_templates.models import FetchResponse

Route = Union[FetchResponse, Exception]


def make_fake_client(routes: Dict[str, Route]):
    """
    Build a client double whose `fetch` answers from a URL → response table.

    Unknown URLs answer 404. Exceptions in the table are raised.
    """

    async def _fetch(url):
        route = routes.get(url)
        if route is None:
            return FetchResponse(ok=False, status=404, body="Not Found", url=url)
        if isinstance(route, Exception):
            raise route
        return route

    client = AsyncMock()
    client.fetch = AsyncMock(side_effect=_fetch)
    return client


def json_response(payload, status=200):
    return FetchResponse(
        ok=status < 400, status=status, body=json.dumps(payload), url=""
    )


def html_response(body, status=200):
    return FetchResponse(ok=status < 400, status=status, body=body, url="")


def api_entry(kind, path):
    return {"type": kind, "name": path.rsplit("/", 1)[-1], "path": path}


def tree_page(repository, files=(), dirs=()):
    """Render a minimal directory-browsing page linking the given paths."""
    prefix = f"/{repository.owner}/{repository.name}"
    links = [
        f'<a class="file" href="{prefix}/blob/{repository.branch}/{f}">{f}</a>'
        for f in files
    ]
    links += [
        f'<a class="dir" href="{prefix}/tree/{repository.branch}/{d}">{d}</a>'
        for d in dirs
    ]
    return "<html><body><div class='tree'>" + "\n".join(links) + "</div></body></html>"
