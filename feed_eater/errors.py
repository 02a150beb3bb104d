"""Structured errors raised by the configuration and fetch layers."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric codes carried by :class:`HandlerError`."""

    READ_FILE = 100
    UNMARSHAL_JSON = 101
    OPEN_FILE = 102
    NO_URLS = 103
    NO_TIMEOUT = 104
    EMPTY_URL_FILE = 105
    INVALID_CONFIGURATION = 107


class HandlerError(Exception):
    """Configuration or I/O failure detected before any request is issued.

    Parameters
    ----------
    message:
        Human readable description.
    code:
        One of :class:`ErrorCode`.
    cause:
        The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"[{int(self.code)}] {self.message}: {self.cause}"
        return f"[{int(self.code)}] {self.message}"


class FetchError(Exception):
    """A per-request failure promoted to fatal by ``fail_fast``."""

    def __init__(self, link: str, cause: BaseException) -> None:
        super().__init__(f"fetching {link} failed: {type(cause).__name__}: {cause}")
        self.link = link
        self.cause = cause
