"""Best-effort listing of remote subdirectories through the contents API."""

import json
from typing import List

from device_faker_templates.config import RepositoryCoordinates
from device_faker_templates.exceptions import FetchError
from device_faker_templates.log_utils import logger


async def list_directories(
    client, repository: RepositoryCoordinates, path: str
) -> List[str]:
    """
    Return the names of the subdirectories directly under `path`.

    Used only for brand classification, so it never raises: a network error,
    a non-success status, invalid JSON or a payload that is not a list all
    yield an empty list.

    Parameters:
        client: Object with an async `fetch(url)` returning a FetchResponse.
        repository (RepositoryCoordinates): Repository to query.
        path (str): Repository-relative directory path.

    Returns:
        List[str]: Directory names in the order the API reports them.
    """
    url = repository.contents_url(path)
    try:
        response = await client.fetch(url)
    except FetchError as e:
        logger.debug(f"Directory listing failed for {path}: {e}")
        return []

    if not response.ok:
        logger.debug(f"Directory listing for {path} returned HTTP {response.status}")
        return []

    try:
        entries = json.loads(response.body)
    except ValueError as e:
        logger.debug(f"Directory listing for {path} is not valid JSON: {e}")
        return []

    if not isinstance(entries, list):
        logger.debug(
            f"Directory listing for {path}: expected list, got {type(entries).__name__}"
        )
        return []

    return [
        entry["name"]
        for entry in entries
        if isinstance(entry, dict)
        and entry.get("type") == "dir"
        and isinstance(entry.get("name"), str)
    ]
