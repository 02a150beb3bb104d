"""Concurrent fetch-and-aggregate of categorized urls."""

from __future__ import annotations

from feed_eater.config import Configuration
from feed_eater.errors import ErrorCode, FetchError, HandlerError
from feed_eater.models import Feeds, FetchFailure, Harvest, Url
from feed_eater.pipeline import eat, eat_it
from feed_eater.validation import verify_configuration
from feed_eater.watchdog import Watchdog

__all__ = [
    "Configuration",
    "ErrorCode",
    "FetchError",
    "HandlerError",
    "Feeds",
    "FetchFailure",
    "Harvest",
    "Url",
    "Watchdog",
    "eat",
    "eat_it",
    "verify_configuration",
]
