"""Checking and normalizing a :class:`Configuration` before a run."""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from feed_eater.config import Configuration
from feed_eater.core.io import load_urls_file
from feed_eater.errors import ErrorCode, HandlerError
from feed_eater.watchdog import Watchdog

logger = logging.getLogger(__name__)


async def verify_configuration(
    config: Optional[Configuration],
    watchdog: Optional[Watchdog] = None,
) -> Configuration:
    """Return a normalized copy of ``config`` or raise :class:`HandlerError`.

    Parameters
    ----------
    config:
        The caller's configuration. It is not modified.
    watchdog:
        Armed with ``config.period`` when OS-signal handling is enabled and
        both ``timeout`` and ``period`` are set.

    Notes
    -----
    When ``urls`` is empty and ``file_path`` is set, the URL list is loaded
    from that file. No network request is made here.
    """
    if config is None:
        raise HandlerError("You must provide valid configuration", ErrorCode.INVALID_CONFIGURATION)

    urls = list(config.urls)
    if not urls and config.file_path:
        urls = await load_urls_file(config.file_path)

    if not urls:
        raise HandlerError("You must provide list of urls to eat", ErrorCode.NO_URLS)

    if not config.timeout:
        raise HandlerError("You must provide the request timeout", ErrorCode.NO_TIMEOUT)

    verified = dataclasses.replace(config, urls=urls, headers=dict(config.headers))

    if watchdog is not None and verified.use_os_exit_signal and verified.timeout and verified.period:
        watchdog.arm(verified.period)

    logger.debug(
        "Configuration verified: %d urls, method=%s, timeout=%d ms, period=%s s",
        len(verified.urls), verified.method or "GET", verified.timeout, verified.period,
    )
    return verified
