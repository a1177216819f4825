"""
Template download and parse pipeline.

Each template is imported with the on-device conversion tool into a transient
file, read back, removed, and parsed as TOML. Failures are per-file: a bad
template is logged and left out of the batch.
"""

import asyncio
import posixpath
import shlex
import threading
import time
import tomllib
from typing import Any, Callable, Dict, Iterable, List, Optional

from device_faker_templates.constants import (
    DEFAULT_CLI_PATH,
    DEFAULT_TEMP_DIR,
    TEMP_FILE_PREFIX,
    TEMPLATE_EXTENSION,
    TEMPLATES_TABLE_KEY,
)
from device_faker_templates.exceptions import CommandError, TemplateParseError
from device_faker_templates.log_utils import logger
from device_faker_templates.models import DownloadedTemplate, TemplateReference

_last_stamp = 0
_stamp_lock = threading.Lock()


def next_temp_stamp() -> int:
    """Return a nanosecond timestamp strictly greater than any returned before."""
    global _last_stamp
    with _stamp_lock:
        _last_stamp = max(time.time_ns(), _last_stamp + 1)
        return _last_stamp


def extract_first_template(document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Return the first entry of the document's templates table.

    Returns None when the table is missing, empty, or not a table of tables.
    """
    templates = document.get(TEMPLATES_TABLE_KEY)
    if not isinstance(templates, dict) or not templates:
        return None
    first = next(iter(templates.values()))
    return first if isinstance(first, dict) else None


class TemplateDownloader:
    """Downloads template references and parses them into template payloads."""

    def __init__(
        self,
        executor,
        cli_path: str = DEFAULT_CLI_PATH,
        temp_dir: str = DEFAULT_TEMP_DIR,
        parser: Callable[[str], Dict[str, Any]] = tomllib.loads,
    ) -> None:
        """
        Parameters:
            executor: Object with an async `execute(command_line) -> stdout`.
            cli_path (str): Path of the conversion tool on the device.
            temp_dir (str): Directory for transient files.
            parser (Callable): Parses document text into a mapping; raises on malformed input.
        """
        self.executor = executor
        self.cli_path = cli_path
        self.temp_dir = temp_dir
        self.parser = parser

    def _temp_path(self) -> str:
        return posixpath.join(
            self.temp_dir, f"{TEMP_FILE_PREFIX}{next_temp_stamp()}{TEMPLATE_EXTENSION}"
        )

    async def _retrieve(self, reference: TemplateReference) -> str:
        temp_file = self._temp_path()
        quoted = shlex.quote(temp_file)
        await self.executor.execute(
            f"{shlex.quote(self.cli_path)} import -s {shlex.quote(reference.download_url)} -o {quoted}"
        )
        content = await self.executor.execute(f"cat {quoted}")
        try:
            await self.executor.execute(f"rm -f {quoted}")
        except CommandError as e:
            logger.debug(f"Ignoring failure to remove {temp_file}: {e}")
        return content

    def _parse(self, reference: TemplateReference, content: str) -> Dict[str, Any]:
        try:
            document = self.parser(content)
        except (tomllib.TOMLDecodeError, ValueError, TypeError) as e:
            raise TemplateParseError(
                f"Template {reference.path} is not valid TOML", details=str(e)
            ) from e
        if not isinstance(document, dict):
            raise TemplateParseError(f"Template {reference.path} is not a table")
        return document

    async def fetch_and_parse(
        self, reference: TemplateReference
    ) -> Optional[DownloadedTemplate]:
        """
        Download and parse one template.

        Returns:
            DownloadedTemplate | None: The reference with its first template
            definition, or None if any step failed or the document defines no
            templates.
        """
        try:
            content = await self._retrieve(reference)
            document = self._parse(reference, content)
        except Exception as e:
            logger.error(f"Failed to download template {reference.name}: {e}")
            return None

        payload = extract_first_template(document)
        if payload is None:
            logger.warning(f"Template {reference.path} defines no templates")
            return None
        return DownloadedTemplate.from_reference(reference, payload)

    async def fetch_and_parse_all(
        self, references: Iterable[TemplateReference]
    ) -> List[DownloadedTemplate]:
        """Download all references concurrently, keeping only successful ones."""
        references = list(references)
        results = await asyncio.gather(*(self.fetch_and_parse(r) for r in references))
        downloaded = [r for r in results if r is not None]
        logger.info(f"Downloaded {len(downloaded)} of {len(references)} templates")
        return downloaded
