"""Error taxonomy for the benchmark client.

Every error raised on purpose by this project derives from
:class:`BenchmarkClientError`, so callers that only care about
"the operation failed" can catch a single type.

Hierarchy::

    BenchmarkClientError
    ├── InputValidationError     user input rejected before any network call
    ├── BackendError             non-2xx response or unreadable body
    │   └── NetworkError         transport failure, no HTTP status
    └── MalformedResultError     a result record lacks a documented field

Propagation policy:
    Input, backend, and network errors are terminal for the current
    submission and are surfaced to the user. ``MalformedResultError``
    never reaches the user: the normalizer catches it per field and
    renders the placeholder instead, so one bad entry cannot blank
    the whole results table.
"""


GENERIC_FAILURE_MESSAGE: str = "Benchmark failed"
"""Fallback message when the backend does not supply an ``error`` field."""


class BenchmarkClientError(Exception):
    """Base class for all benchmark client errors."""


class InputValidationError(BenchmarkClientError):
    """Submission rejected because of missing or invalid user input.

    Example:
        >>> raise InputValidationError("Please enter an HTTP message")
        Traceback (most recent call last):
        ...
        core.errors.InputValidationError: Please enter an HTTP message
    """


class BackendError(BenchmarkClientError):
    """The backend answered with a failure status or an unreadable body.

    Args:
        message: Server-supplied error text, or a generic fallback.
        status_code: HTTP status code, ``None`` when no response arrived.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.status_code: int | None = status_code

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )


class NetworkError(BackendError):
    """The request never produced an HTTP response (DNS, refused, reset)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=None)


class MalformedResultError(BenchmarkClientError, ValueError):
    """A result record violates the optional-field presence contract.

    Raised when a successful entry is missing one of its numeric
    measurements. Subclasses ``ValueError`` so it can be handled
    together with formatter input errors.

    Args:
        library: Library name of the offending record.
        field: Name of the missing or invalid field.
    """

    def __init__(self, library: str, field: str) -> None:
        super().__init__(f"result for {library!r} has no usable {field!r}")
        self.library: str = library
        self.field: str = field
