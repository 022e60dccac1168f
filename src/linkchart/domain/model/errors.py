"""Fatal error types raised by pipeline stages."""

from __future__ import annotations


class LinkChartError(Exception):
    """Base class for linkchart failures."""


class ParseError(LinkChartError, ValueError):
    """Raised when an input blob cannot be read into rows."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class EmptyInputError(ParseError):
    """Raised when an input blob contains no header or no data rows."""


class PipelineCancelledError(LinkChartError):
    """Raised when a cancellation token is observed at a stage boundary."""

    def __init__(self, *, stage: str) -> None:
        self.stage = stage
        super().__init__(f"Pipeline cancelled at stage {stage!r}")


class UnknownRecognizerError(LinkChartError, KeyError):
    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"No recognizer registered for type {tag!r}")
