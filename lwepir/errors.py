"""Exceptions raised by the PIR scheme."""


class PIRError(Exception):
    """Base class for every error raised by this package."""


class UnexpectedInputSizeError(PIRError, ValueError):
    """An input to a low-level operation has the wrong size."""

    def __init__(self, details: str) -> None:
        self.details = details
        super().__init__(f"Unexpected input size error: {details}")


class QueryParamsReusedError(PIRError):
    """Query parameters were used for a second query."""

    def __init__(self) -> None:
        super().__init__("Attempted to reuse query parameters that were used already")


class OverflownAddError(PIRError, OverflowError):
    """An addition that must not wrap around would have overflowed."""

    def __init__(self) -> None:
        super().__init__("Attempted to overflow addition")