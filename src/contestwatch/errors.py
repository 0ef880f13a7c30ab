"""Contest watcher error types."""

from __future__ import annotations

from enum import Enum


class WatcherErrorCode(Enum):
    """Error classification codes."""

    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"
    PUBLISH_FAILED = "publish_failed"
    AUTH_FAILED = "auth_failed"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    CONFIG_INVALID = "config_invalid"


class WatcherError(Exception):
    """Watcher exception with error code and retryable flag.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether the next cycle may succeed where this one failed.
    """

    def __init__(
        self,
        message: str,
        code: WatcherErrorCode = WatcherErrorCode.FETCH_FAILED,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable
