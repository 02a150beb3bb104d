"""Async worker implementations used by the pipeline."""

from __future__ import annotations

from .fetch import apply_hook, fetch_worker

__all__ = [
    "apply_hook",
    "fetch_worker",
]
