"""Exceptions raised by the earthquake relay."""

from __future__ import annotations


class QuakeError(Exception):
    """Base class for earthquake relay failures."""


class ExtractionError(QuakeError):
    """The bulletin page yielded no usable rows."""


class FetchError(QuakeError):
    """All fetch attempts failed. ``cause`` holds the last underlying error."""

    def __init__(self, message: str, cause: BaseException | None = None, attempts: int = 0) -> None:
        super().__init__(message)
        self.cause = cause
        self.attempts = attempts


class UpstreamUnavailable(QuakeError):
    """No snapshot could be fetched and none was cached to fall back on."""
