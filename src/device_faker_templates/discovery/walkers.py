"""
Recursive template tree walkers.

Both walkers share the same recursion and brand relabelling; they differ only
in how a single directory's children are listed. The API walker reads the
structured contents API, the HTML walker scrapes the directory-browsing page.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import AbstractSet, List, Tuple
from urllib.parse import quote, unquote

from device_faker_templates.config import RepositoryCoordinates
from device_faker_templates.constants import (
    STRATEGY_API,
    STRATEGY_HTML,
    TEMPLATE_EXTENSION,
)
from device_faker_templates.exceptions import DiscoveryError, FetchError
from device_faker_templates.log_utils import logger
from device_faker_templates.models import Category, FetchResponse, TemplateReference

ENTRY_FILE = "file"
ENTRY_DIR = "dir"

# (kind, repository-relative path) of one directory child
Entry = Tuple[str, str]


class TreeWalker(ABC):
    """Base class for walkers enumerating template files below a path."""

    strategy: str = ""

    def __init__(self, client, repository: RepositoryCoordinates) -> None:
        self.client = client
        self.repository = repository

    async def walk(
        self, path: str, category: Category, known_brands: AbstractSet[str]
    ) -> List[TemplateReference]:
        """
        Enumerate every template file below `path`.

        Files directly under `path` are returned unbranded. When a
        subdirectory's name is a known brand, every reference found below it
        is relabelled with that name before being added, overriding any
        deeper brand.

        Raises:
            DiscoveryError: If any directory in the subtree cannot be listed.
        """
        references: List[TemplateReference] = []
        for kind, entry_path in await self.list_entries(path):
            if kind == ENTRY_FILE:
                references.append(
                    TemplateReference.from_path(
                        entry_path, category, self.repository.raw_url(entry_path)
                    )
                )
                continue

            dir_name = entry_path.rstrip("/").rsplit("/", 1)[-1]
            children = await self.walk(entry_path, category, known_brands)
            if dir_name in known_brands:
                for child in children:
                    child.brand = dir_name
            references.extend(children)

        return references

    async def _get(self, path: str, url: str) -> FetchResponse:
        try:
            response = await self.client.fetch(url)
        except FetchError as e:
            raise DiscoveryError(
                f"Failed to fetch {path}",
                path=path,
                strategy=self.strategy,
                details=str(e),
            ) from e

        if not response.ok:
            raise DiscoveryError(
                f"HTTP error! status: {response.status}",
                path=path,
                strategy=self.strategy,
                status_code=response.status,
            )
        return response

    @abstractmethod
    async def list_entries(self, path: str) -> List[Entry]:
        """Return the template files and subdirectories directly under `path`."""


class ApiTreeWalker(TreeWalker):
    """Walks the tree through the structured contents API."""

    strategy = STRATEGY_API

    async def list_entries(self, path: str) -> List[Entry]:
        response = await self._get(path, self.repository.contents_url(path))

        try:
            items = json.loads(response.body)
        except ValueError as e:
            raise DiscoveryError(
                "API response is not valid JSON",
                path=path,
                strategy=self.strategy,
                details=str(e),
            ) from e

        if not isinstance(items, list):
            raise DiscoveryError(
                "API response is not an array",
                path=path,
                strategy=self.strategy,
                details=f"got {type(items).__name__}",
            )

        entries: List[Entry] = []
        for item in items:
            if not isinstance(item, dict):
                raise DiscoveryError(
                    "API response contains a malformed entry",
                    path=path,
                    strategy=self.strategy,
                    details=f"expected dict, got {type(item).__name__}",
                )
            kind = item.get("type")
            if kind not in (ENTRY_FILE, ENTRY_DIR):
                continue

            name = item.get("name")
            item_path = item.get("path")
            if not isinstance(name, str) or not isinstance(item_path, str):
                raise DiscoveryError(
                    "API response contains an entry without name or path",
                    path=path,
                    strategy=self.strategy,
                    details=f"{kind} entry: {item!r}",
                )

            if kind == ENTRY_FILE and name.endswith(TEMPLATE_EXTENSION):
                entries.append((ENTRY_FILE, item_path))
            elif kind == ENTRY_DIR:
                entries.append((ENTRY_DIR, item_path))

        return entries


class HtmlTreeWalker(TreeWalker):
    """
    Walks the tree by scraping the rendered directory-browsing pages.

    Relies on the host's markup linking files as `/<owner>/<repo>/blob/<branch>/<path>`
    and directories as `/<owner>/<repo>/tree/<branch>/<path>`. If the markup
    changes, listings come back empty rather than failing.
    """

    strategy = STRATEGY_HTML

    def _link_prefix(self, kind: str) -> str:
        repo = self.repository
        return "/".join(
            re.escape(part) for part in ("", repo.owner, repo.name, kind, repo.branch)
        )

    def _patterns(self, path: str) -> Tuple["re.Pattern[str]", "re.Pattern[str]"]:
        # pages link non-ASCII paths percent-encoded
        escaped_path = "(?:" + "|".join(
            re.escape(p) for p in dict.fromkeys((path, quote(path, safe="/")))
        ) + ")"
        file_pattern = re.compile(
            rf'{self._link_prefix("blob")}/({escaped_path}/[^"]+{re.escape(TEMPLATE_EXTENSION)})'
        )
        dir_pattern = re.compile(
            rf'{self._link_prefix("tree")}/({escaped_path}/[^"/]+)(?=")'
        )
        return file_pattern, dir_pattern

    async def list_entries(self, path: str) -> List[Entry]:
        response = await self._get(path, self.repository.tree_url(path))
        html = response.body
        file_pattern, dir_pattern = self._patterns(path)

        # dict keys keep first-seen order while dropping repeated links
        files = dict.fromkeys(unquote(m.group(1)) for m in file_pattern.finditer(html))
        dirs = dict.fromkeys(
            d
            for d in (unquote(m.group(1)) for m in dir_pattern.finditer(html))
            if d != path
        )

        if not files and not dirs:
            logger.debug(f"No template links found on the page for {path}")

        return [(ENTRY_FILE, f) for f in files] + [(ENTRY_DIR, d) for d in dirs]
