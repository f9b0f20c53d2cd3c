"""Result normalizer: classify raw results and project them for display.

Takes the ordered result list of a :class:`~core.models.BenchmarkResponse`
and produces two parallel projections:

- **rows** — one :class:`~core.models.DisplayRow` per raw result, in
  input order, for the results table.
- **chart_eligible** — the successful results only, in input order,
  for the comparison charts.

Classification:
    ==========================  ==========
    Raw result                  Status
    ==========================  ==========
    ``success = False``         ``Failed``
    ``success`` and ``winner``  ``Winner``
    ``success`` only            ``Success``
    ==========================  ==========

The normalizer never re-sorts and never recomputes the winner. If the
backend flags more than one success as winner, every flagged entry is
shown as ``Winner`` (pass-through); a warning is logged.

Malformed entries:
    A successful entry missing a numeric field, or carrying a value a
    formatter rejects (negative, NaN, too large), renders that one
    field as ``"-"``. The row itself is always produced.
"""

import logging
from typing import Callable, Sequence

from pydantic import BaseModel, ConfigDict

from core.errors import MalformedResultError
from core.formatting import (
    PLACEHOLDER,
    format_bytes,
    format_count,
    format_duration,
)
from core.models import (
    DisplayRow,
    FailureResult,
    RawResult,
    ResultStatus,
    SuccessResult,
)

logger: logging.Logger = logging.getLogger(__name__)

Formatter = Callable[[float], str]


class NormalizedResults(BaseModel):
    """Both projections of one result batch.

    Attributes:
        rows: One display row per raw result, input order.
        chart_eligible: Successful results only, input order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    rows: tuple[DisplayRow, ...] = ()
    chart_eligible: tuple[SuccessResult, ...] = ()

    @property
    def winner_count(self) -> int:
        """Number of rows rendered with ``Winner`` status."""
        return sum(1 for row in self.rows if row.status == ResultStatus.WINNER)


def classify(result: RawResult) -> ResultStatus:
    """Return the display status of a single raw result."""
    if isinstance(result, FailureResult):
        return ResultStatus.FAILED
    if result.winner:
        return ResultStatus.WINNER
    return ResultStatus.SUCCESS


def _render_field(
    result: SuccessResult,
    field: str,
    formatter: Formatter,
) -> str:
    """Format one measurement, falling back to the placeholder.

    Missing values raise :class:`MalformedResultError`; values the
    formatter refuses raise ``ValueError``. Both are logged and
    replaced by :data:`~core.formatting.PLACEHOLDER`.
    """
    value: int | float | None = getattr(result, field)
    try:
        if value is None:
            raise MalformedResultError(library=result.library, field=field)
        return formatter(value)
    except ValueError as exc:
        logger.warning("Malformed result, rendering placeholder: %s", exc)
        return PLACEHOLDER


def to_display_row(result: RawResult) -> DisplayRow:
    """Build the table row for one raw result.

    Args:
        result: Success or failure record from the backend.

    Returns:
        Display row. Failures show ``"-"`` in every numeric column and
        carry the backend error text; successes pass each measurement
        through its unit formatter.

    Example:
        >>> row = to_display_row(FailureResult(
        ...     library="libC", success=False, error="timeout",
        ... ))
        >>> row.status.value, row.ops_per_sec_display, row.error_text
        ('Failed', '-', 'timeout')
    """
    status: ResultStatus = classify(result)

    if isinstance(result, FailureResult):
        return DisplayRow(
            library=result.library,
            ops_per_sec_display=PLACEHOLDER,
            avg_time_display=PLACEHOLDER,
            memory_display=PLACEHOLDER,
            allocs_display=PLACEHOLDER,
            status=status,
            error_text=result.error or "",
        )

    return DisplayRow(
        library=result.library,
        ops_per_sec_display=_render_field(result, "ops_per_second", format_count),
        avg_time_display=_render_field(
            result, "avg_time_per_parse", format_duration,
        ),
        memory_display=_render_field(result, "memory_allocated", format_bytes),
        allocs_display=_render_field(result, "allocs_per_op", format_count),
        status=status,
    )


def normalize_results(results: Sequence[RawResult]) -> NormalizedResults:
    """Classify and project a batch of raw results.

    Args:
        results: Backend results, in received order.

    Returns:
        :class:`NormalizedResults` with ``len(rows) == len(results)``
        and ``chart_eligible`` holding exactly the successes.
    """
    rows: tuple[DisplayRow, ...] = tuple(to_display_row(r) for r in results)
    chart_eligible: tuple[SuccessResult, ...] = tuple(
        r for r in results if isinstance(r, SuccessResult)
    )
    normalized: NormalizedResults = NormalizedResults(
        rows=rows,
        chart_eligible=chart_eligible,
    )

    if normalized.winner_count > 1:
        logger.warning(
            "Backend flagged %d winners; highlighting all of them",
            normalized.winner_count,
        )
    logger.debug(
        "Normalized %d results (%d successful)",
        len(rows),
        len(chart_eligible),
    )
    return normalized
