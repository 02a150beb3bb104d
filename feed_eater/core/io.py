"""Loading the category/link list from a JSON file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

import aiofiles
import orjson

from feed_eater.errors import ErrorCode, HandlerError
from feed_eater.models import Url

logger = logging.getLogger(__name__)


def _field(entry: dict, name: str) -> str:
    # Keys match case-insensitively; a missing key reads as "".
    for key, value in entry.items():
        if isinstance(key, str) and key.lower() == name:
            if not isinstance(value, str):
                raise TypeError(f"{name!r} must be a string, got {type(value).__name__}")
            return value
    return ""


def parse_urls(raw: bytes | str) -> List[Url]:
    """Decode a JSON array of ``{"Category": ..., "Link": ...}`` objects.

    Raises :class:`HandlerError` with ``UNMARSHAL_JSON`` when the document is
    not valid JSON or does not have the expected shape.
    """
    try:
        data: Any = orjson.loads(raw)
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        urls: List[Url] = []
        for entry in data:
            if not isinstance(entry, dict):
                raise TypeError(f"expected a JSON object, got {type(entry).__name__}")
            urls.append(Url(category=_field(entry, "category"), link=_field(entry, "link")))
    except (orjson.JSONDecodeError, TypeError) as exc:
        raise HandlerError("Unable to unmarshal json data", ErrorCode.UNMARSHAL_JSON, exc) from exc
    return urls


async def load_urls_file(path: Path) -> List[Url]:
    """Read ``path`` and return the URL list it contains."""
    try:
        fd = await aiofiles.open(path, "rb")
    except OSError as exc:
        raise HandlerError("Unable to open file for read", ErrorCode.OPEN_FILE, exc) from exc

    try:
        try:
            content = await fd.read()
        finally:
            await fd.close()
        text = content.decode("utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise HandlerError("Error reading file", ErrorCode.READ_FILE, exc) from exc

    urls = parse_urls(text)
    if not urls:
        raise HandlerError(f"No urls found in {path}", ErrorCode.EMPTY_URL_FILE)
    logger.debug("Loaded %d urls from %s", len(urls), path)
    return urls
