from __future__ import annotations

from .io import load_urls_file, parse_urls

__all__ = [
    "load_urls_file",
    "parse_urls",
]
