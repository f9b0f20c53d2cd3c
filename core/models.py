"""Data models for benchmark requests, results, and their display forms.

This module defines the wire contract with the benchmark backend and
the derived, display-ready structures produced by the normalizer and
presenter. All models are Pydantic-based with ``frozen=True``.

Wire models:
    - :class:`BenchmarkRequest` — body of ``POST /api/benchmark``.
    - :class:`SuccessResult` / :class:`FailureResult` — one per
      library, discriminated by the ``success`` flag. Together they
      form the :data:`RawResult` tagged union.
    - :class:`BenchmarkResponse` — recommendation plus ordered results.
    - :class:`LibrariesResponse` — body of ``GET /api/libraries``.

Derived models:
    - :class:`DisplayRow` — one formatted table row per raw result.
    - :class:`ChartSeries` — parallel (label, value, highlight)
      sequences for one bar chart.
    - :class:`PresentedResults` — everything one presentation pass
      produced.

Lenient parsing:
    Result models ignore unknown keys. The backend serializes every
    numeric field even for failed libraries (zeroed), and sends
    extras such as ``total_time``; neither must break parsing. A
    successful entry missing a numeric field still parses; the
    normalizer renders that field as a placeholder.

Example:
    >>> response = BenchmarkResponse.model_validate({
    ...     "recommendation": "libB is 1.50x faster than libA",
    ...     "results": [
    ...         {"library": "libA", "success": True, "ops_per_second": 500000},
    ...         {"library": "libC", "success": False, "error": "timeout"},
    ...     ],
    ... })
    >>> type(response.results[0]).__name__
    'SuccessResult'
    >>> response.results[1].error
    'timeout'
"""

import logging
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

logger: logging.Logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class MessageType(str, Enum):
    """Kind of HTTP message submitted for parsing.

    When a request carries no message type, the backend detects it
    from the first line (method token → request, ``HTTP/`` → response).
    """

    REQUEST = "request"
    RESPONSE = "response"


class ResultStatus(str, Enum):
    """Display status of one library's result.

    Attributes:
        WINNER: Successful and flagged fastest by the backend.
        SUCCESS: Successful, not flagged.
        FAILED: The backend could not benchmark this library.
    """

    WINNER = "Winner"
    SUCCESS = "Success"
    FAILED = "Failed"


class ChartKind(str, Enum):
    """The two comparison charts rendered for every response."""

    THROUGHPUT = "throughput"
    LATENCY = "latency"


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class BenchmarkRequest(BaseModel):
    """Benchmark job description sent to ``POST /api/benchmark``.

    Constructed fresh for every submission. The message is stored
    trimmed, and library names keep their selection order with
    duplicates removed.

    Attributes:
        message: Raw HTTP message to parse. Non-blank.
        message_type: ``request`` or ``response``. ``None`` leaves the
            choice to the backend's auto-detection.
        iterations: Parse iterations per library. Positive.
        concurrency: Concurrent workers per library. Positive.
        libraries: Parser libraries to compare. At least one.

    Example:
        >>> request = BenchmarkRequest(
        ...     message="GET / HTTP/1.1",
        ...     message_type=MessageType.REQUEST,
        ...     iterations=1000,
        ...     concurrency=4,
        ...     libraries=("libA", "libB", "libA"),
        ... )
        >>> request.libraries
        ('libA', 'libB')
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str = Field(min_length=1, description="Raw HTTP message")
    message_type: MessageType | None = Field(
        default=None,
        description="Message kind; None lets the backend auto-detect",
    )
    iterations: int = Field(gt=0, description="Parse iterations per library")
    concurrency: int = Field(gt=0, description="Concurrent workers per library")
    libraries: tuple[str, ...] = Field(
        min_length=1,
        description="Selected parser libraries, in selection order",
    )

    @field_validator("message")
    @classmethod
    def _strip_message(cls, v: str) -> str:
        stripped: str = v.strip()
        if not stripped:
            raise ValueError("message must not be blank")
        return stripped

    @field_validator("libraries")
    @classmethod
    def _dedupe_libraries(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        names: tuple[str, ...] = tuple(
            dict.fromkeys(name.strip() for name in v if name.strip())
        )
        if not names:
            raise ValueError("at least one library must be selected")
        return names

    def to_payload(self) -> dict[str, object]:
        """Return the JSON-ready request body (``None`` fields omitted)."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Raw results (tagged union on ``success``)
# ---------------------------------------------------------------------------


def _lenient_measurement(v: object) -> object:
    """Map a value that is not a number to ``None``.

    Numbers pass through unchanged (integers stay integers). Numeric
    strings are left for Pydantic to coerce. Anything else is logged
    and dropped so one bad field cannot reject the whole response.
    """
    if v is None:
        return None
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return v
    if isinstance(v, str):
        try:
            float(v)
        except ValueError:
            pass
        else:
            return v
    logger.warning("Discarding non-numeric measurement %r", v)
    return None


Measurement = Annotated[int | float | None, BeforeValidator(_lenient_measurement)]
"""Optional numeric field; integers are kept exact."""


class SuccessResult(BaseModel):
    """Measurements for a library the backend benchmarked successfully.

    Numeric fields are optional only so that a malformed record can
    still be displayed; a well-formed backend always sends them.

    Attributes:
        library: Parser library name.
        success: Always ``True``.
        winner: ``True`` if the backend marked this the fastest result.
        ops_per_second: Parse operations per second.
        avg_time_per_parse: Mean time per parse in nanoseconds.
        memory_allocated: Bytes allocated per parse.
        allocs_per_op: Heap allocations per parse.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    library: str = Field(description="Parser library name")
    success: Literal[True] = Field(description="Success discriminator")
    winner: bool = Field(default=False, description="Marked fastest by backend")
    ops_per_second: Measurement = Field(
        default=None,
        description="Parse operations per second",
    )
    avg_time_per_parse: Measurement = Field(
        default=None,
        description="Mean time per parse (nanoseconds)",
    )
    memory_allocated: Measurement = Field(
        default=None,
        description="Bytes allocated per parse",
    )
    allocs_per_op: Measurement = Field(
        default=None,
        description="Heap allocations per parse",
    )


class FailureResult(BaseModel):
    """A library the backend could not benchmark.

    ``winner`` is accepted for wire compatibility but never honoured
    for a failed entry.

    Attributes:
        library: Parser library name.
        success: Always ``False``.
        winner: Ignored for display.
        error: Backend error text, if any.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    library: str = Field(description="Parser library name")
    success: Literal[False] = Field(description="Success discriminator")
    winner: bool = Field(default=False, description="Ignored for failures")
    error: str | None = Field(default=None, description="Backend error text")


RawResult = Union[SuccessResult, FailureResult]
"""One library's result as returned by the backend."""


class BenchmarkResponse(BaseModel):
    """Successful body of ``POST /api/benchmark``.

    Attributes:
        recommendation: Backend's human-readable verdict.
        results: One entry per requested library, in backend order.
        message_type: Message type the backend used (after detection).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    recommendation: str = Field(default="", description="Backend verdict")
    results: list[RawResult] = Field(
        default_factory=list,
        description="Per-library results, in backend order",
    )
    message_type: str | None = Field(
        default=None,
        description="Message type used by the backend",
    )

    @field_validator("results", mode="before")
    @classmethod
    def _null_results_as_empty(cls, v: object) -> object:
        return [] if v is None else v


class LibrariesResponse(BaseModel):
    """Body of ``GET /api/libraries``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    libraries: list[str] = Field(default_factory=list)

    @field_validator("libraries", mode="before")
    @classmethod
    def _null_libraries_as_empty(cls, v: object) -> object:
        return [] if v is None else v


# ---------------------------------------------------------------------------
# Derived display models
# ---------------------------------------------------------------------------


class DisplayRow(BaseModel):
    """One formatted results-table row.

    Numeric columns hold display strings; unavailable values hold
    the ``"-"`` placeholder.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    library: str
    ops_per_sec_display: str
    avg_time_display: str
    memory_display: str
    allocs_display: str
    status: ResultStatus
    error_text: str = ""


class ChartSeries(BaseModel):
    """Chart-ready bar series: parallel labels, values, and highlights.

    Attributes:
        kind: Which comparison chart this series feeds.
        title: Chart title.
        unit: Value axis unit (``ops/s`` or ``μs``).
        labels: Library names, in result order.
        values: Bar heights, aligned with ``labels``.
        highlight_flags: ``True`` for bars drawn in winner style.

    Example:
        >>> series = ChartSeries(
        ...     kind=ChartKind.THROUGHPUT,
        ...     title="Operations per Second (Higher is Better)",
        ...     unit="ops/s",
        ...     labels=("libA",),
        ...     values=(500000.0,),
        ...     highlight_flags=(False,),
        ... )
        >>> len(series)
        1
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ChartKind
    title: str
    unit: str
    labels: tuple[str, ...] = ()
    values: tuple[float, ...] = ()
    highlight_flags: tuple[bool, ...] = ()

    @model_validator(mode="after")
    def _validate_parallel_lengths(self) -> "ChartSeries":
        """Ensure labels, values, and highlight flags line up."""
        if not len(self.labels) == len(self.values) == len(self.highlight_flags):
            raise ValueError(
                f"series lengths differ: labels={len(self.labels)}, "
                f"values={len(self.values)}, "
                f"highlight_flags={len(self.highlight_flags)}"
            )
        return self

    def __len__(self) -> int:
        return len(self.labels)

    @property
    def is_empty(self) -> bool:
        """Whether the series has no bars (nothing to draw)."""
        return not self.labels


class PresentedResults(BaseModel):
    """Output of one presentation pass over a backend response."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    recommendation: str = ""
    rows: tuple[DisplayRow, ...] = ()
    throughput: ChartSeries
    latency: ChartSeries
