"""Error types raised by the loading and aggregation code.

Nothing in the library retries or swallows these; the CLI entry point is the
only place that catches them.
"""


class JourneyError(Exception):
    """Base class for all journeyviz errors."""


class DataError(JourneyError, ValueError):
    """A record is missing a required field or holds an unparseable value."""

    def __init__(self, message: str, row: int | None = None, field: str | None = None):
        self.row = row
        self.field = field
        location = []
        if row is not None:
            location.append(f"row {row}")
        if field is not None:
            location.append(f"field '{field}'")
        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)


class DivisionByZeroError(JourneyError, ZeroDivisionError):
    """A measure cannot be normalised because its grand total is zero."""

    def __init__(self, measure: str):
        self.measure = measure
        super().__init__(f"Grand total of '{measure}' is zero, cannot compute shares")
