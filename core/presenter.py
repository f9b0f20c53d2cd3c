"""Result presenter: table rows and comparison chart series.

Orchestrates one normalizer pass and turns it into three artifacts:

1. **Table rows** — every result, in backend order, no sorting.
2. **Throughput series** — successful libraries with their raw
   ``ops_per_second``; winners highlighted.
3. **Latency series** — same libraries and order, with
   ``avg_time_per_parse`` rescaled from nanoseconds to microseconds.
   The latency axis is always microseconds, unlike the table's
   adaptive :func:`~core.formatting.format_duration`.

Output targets are injected, never looked up globally:

- :class:`TableSink` receives the rows and the recommendation.
- :class:`ChartSink` draws one series and returns a
  :class:`ChartHandle` the presenter owns.

Chart ownership:
    The presenter holds at most one live handle per
    :class:`~core.models.ChartKind`. Every previous handle is destroyed
    before the first new chart is drawn, so repeated runs never stack
    overlapping charts and a failed draw leaves no stale chart behind.
    When no result succeeded, both series are empty, stale handles are
    released, and :meth:`ChartSink.draw` is not called at all.

Thread safety:
    **NOT thread-safe.** Call from the submitting thread only.
"""

import logging
from typing import Protocol, Sequence

from core.models import (
    BenchmarkResponse,
    ChartKind,
    ChartSeries,
    DisplayRow,
    PresentedResults,
    SuccessResult,
)
from core.normalizer import NormalizedResults, normalize_results

logger: logging.Logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Sink protocols
# ---------------------------------------------------------------------------


class TableSink(Protocol):
    """Receives the formatted results table."""

    def render_table(
        self,
        rows: Sequence[DisplayRow],
        recommendation: str,
    ) -> None:
        """Replace any previously shown table with ``rows``."""
        ...


class ChartHandle(Protocol):
    """A drawn chart that can be torn down."""

    def destroy(self) -> None:
        """Release the chart and everything it holds."""
        ...


class ChartSink(Protocol):
    """Rendering engine for bar charts."""

    def draw(self, series: ChartSeries) -> ChartHandle:
        """Draw ``series`` as a bar chart and return its handle."""
        ...


# ---------------------------------------------------------------------------
# Series construction
# ---------------------------------------------------------------------------

_NS_PER_US: float = 1_000.0

_SERIES_LAYOUT: dict[ChartKind, tuple[str, str, str, float]] = {
    ChartKind.THROUGHPUT: (
        "ops_per_second",
        "Operations per Second (Higher is Better)",
        "ops/s",
        1.0,
    ),
    ChartKind.LATENCY: (
        "avg_time_per_parse",
        "Average Time per Parse (Lower is Better)",
        "μs",
        _NS_PER_US,
    ),
}
"""kind → (result field, title, unit, divisor applied to the raw value)."""


def build_chart_series(
    kind: ChartKind,
    results: Sequence[SuccessResult],
) -> ChartSeries:
    """Build one chart series from successful results.

    A result missing the measurement contributes a ``0.0`` bar so the
    series always has one entry per successful library.

    Args:
        kind: Which chart to build.
        results: Successful results, in display order.

    Returns:
        Series with labels, values, and winner highlight flags.

    Example:
        >>> series = build_chart_series(ChartKind.LATENCY, [
        ...     SuccessResult(library="libA", success=True,
        ...                   avg_time_per_parse=2000),
        ... ])
        >>> series.values
        (2.0,)
    """
    field, title, unit, divisor = _SERIES_LAYOUT[kind]

    values: list[float] = []
    for result in results:
        raw: int | float | None = getattr(result, field)
        if raw is None:
            logger.warning(
                "Result for %s has no %s; charting it as 0",
                result.library,
                field,
            )
            values.append(0.0)
        else:
            values.append(raw / divisor)

    return ChartSeries(
        kind=kind,
        title=title,
        unit=unit,
        labels=tuple(r.library for r in results),
        values=tuple(values),
        highlight_flags=tuple(r.winner for r in results),
    )


# ---------------------------------------------------------------------------
# Presenter
# ---------------------------------------------------------------------------


class ResultPresenter:
    """Builds and renders table rows and chart series for a response.

    Args:
        table_sink: Target for the results table.
        chart_sink: Rendering engine for the two charts.

    Example::

        presenter = ResultPresenter(
            table_sink=ConsoleTableSink(),
            chart_sink=MatplotlibChartSink(output_dir=Path("charts")),
        )
        presented = presenter.present(response)
        presented.throughput.labels
    """

    def __init__(self, table_sink: TableSink, chart_sink: ChartSink) -> None:
        self._table_sink: TableSink = table_sink
        self._chart_sink: ChartSink = chart_sink
        self._charts: dict[ChartKind, ChartHandle] = {}

    @property
    def active_charts(self) -> frozenset[ChartKind]:
        """Chart kinds that currently have a live handle."""
        return frozenset(self._charts)

    def build(self, response: BenchmarkResponse) -> PresentedResults:
        """Compute rows and series for ``response`` without rendering.

        Args:
            response: Parsed backend response.

        Returns:
            Fresh :class:`~core.models.PresentedResults`.
        """
        normalized: NormalizedResults = normalize_results(response.results)
        return PresentedResults(
            recommendation=response.recommendation,
            rows=normalized.rows,
            throughput=build_chart_series(
                ChartKind.THROUGHPUT, normalized.chart_eligible,
            ),
            latency=build_chart_series(
                ChartKind.LATENCY, normalized.chart_eligible,
            ),
        )

    def present(self, response: BenchmarkResponse) -> PresentedResults:
        """Render the table and both charts for ``response``.

        Previously drawn charts are destroyed before new ones are
        drawn. With no successful results, no chart is drawn.

        Args:
            response: Parsed backend response.

        Returns:
            The :class:`~core.models.PresentedResults` that was rendered.
        """
        presented: PresentedResults = self.build(response)

        self._table_sink.render_table(presented.rows, presented.recommendation)
        self.clear_charts()
        self._draw_chart(presented.throughput)
        self._draw_chart(presented.latency)

        logger.info(
            "Presented %d rows (%d charted)",
            len(presented.rows),
            len(presented.throughput),
        )
        return presented

    def clear_charts(self) -> None:
        """Destroy every chart this presenter owns."""
        for kind in list(self._charts):
            self._release_chart(kind)

    # ------------------------------------------------------------------
    # Chart ownership
    # ------------------------------------------------------------------

    def _draw_chart(self, series: ChartSeries) -> None:
        """Draw ``series`` unless it is empty. Old charts are already gone."""
        if series.is_empty:
            logger.debug("No successful results; skipping %s chart", series.kind.value)
            return
        self._charts[series.kind] = self._chart_sink.draw(series)

    def _release_chart(self, kind: ChartKind) -> None:
        handle: ChartHandle | None = self._charts.pop(kind, None)
        if handle is None:
            return
        try:
            handle.destroy()
        except Exception:
            logger.warning("Failed to destroy %s chart", kind.value, exc_info=True)
