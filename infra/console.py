"""Console sinks: results table and status chrome for terminal use.

Provides text-mode implementations of the presenter and orchestrator
sink protocols:

- :class:`ConsoleTableSink` — prints the formatted results table.
- :class:`ConsoleStatusSink` — reports loading, errors, and results
  visibility on stderr and keeps the flags for inspection.

Table layout::

    ======================================================================
    BENCHMARK RESULTS
    ======================================================================
    libB is 1.50x faster than libA (750000 vs 500000 ops/sec)
    ----------------------------------------------------------------------
    Library  Ops/sec  Avg Time  Memory    Allocs/Op  Status
    ----------------------------------------------------------------------
    libA     500,000  2.00 μs   128.00 B  2          Success
    libB     750,000  1.33 μs   96.00 B   1          Winner
    ======================================================================
"""

import sys
from typing import Sequence, TextIO

from core.models import DisplayRow

_RULE_WIDTH: int = 70

_HEADERS: tuple[str, ...] = (
    "Library",
    "Ops/sec",
    "Avg Time",
    "Memory",
    "Allocs/Op",
    "Status",
)


def _row_cells(row: DisplayRow) -> tuple[str, ...]:
    return (
        row.library,
        row.ops_per_sec_display,
        row.avg_time_display,
        row.memory_display,
        row.allocs_display,
        row.status.value,
    )


def format_results_table(
    rows: Sequence[DisplayRow],
    recommendation: str = "",
) -> str:
    """Render display rows as a fixed-width text table.

    Rows keep their given order. A failed row's error text is printed
    on its own indented line below the row.

    Args:
        rows: Display rows from the normalizer.
        recommendation: Backend verdict shown above the table.

    Returns:
        Multi-line table string (no trailing newline).
    """
    cells: list[tuple[str, ...]] = [_row_cells(row) for row in rows]
    widths: list[int] = [
        max([len(header)] + [len(line[i]) for line in cells])
        for i, header in enumerate(_HEADERS)
    ]

    def _line(values: Sequence[str]) -> str:
        return "  ".join(
            value.ljust(width) for value, width in zip(values, widths)
        ).rstrip()

    rule_width: int = max(_RULE_WIDTH, len(_line(_HEADERS)))

    lines: list[str] = []
    lines.append("=" * rule_width)
    lines.append("BENCHMARK RESULTS")
    lines.append("=" * rule_width)
    if recommendation:
        lines.append(recommendation)
        lines.append("-" * rule_width)
    lines.append(_line(_HEADERS))
    lines.append("-" * rule_width)

    if not rows:
        lines.append("(no results)")
    for row, line_cells in zip(rows, cells):
        lines.append(_line(line_cells))
        if row.error_text:
            lines.append(f"    error: {row.error_text}")

    lines.append("=" * rule_width)
    return "\n".join(lines)


class ConsoleTableSink:
    """Prints the results table to a text stream.

    Args:
        stream: Output stream. Defaults to ``sys.stdout`` at call time.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream: TextIO | None = stream

    def render_table(
        self,
        rows: Sequence[DisplayRow],
        recommendation: str,
    ) -> None:
        print(
            format_results_table(rows, recommendation),
            file=self._stream or sys.stdout,
        )


class ConsoleStatusSink:
    """Terminal stand-in for the loading indicator, submit control,
    results section, and alert box.

    Progress and errors go to ``stream`` (stderr by default), the
    same way the benchmark scripts report progress. Current flags are
    kept as attributes so callers can inspect them.

    Attributes:
        loading: Whether the loading indicator is shown.
        submit_enabled: Whether a new submission is allowed.
        results_visible: Whether the results section is shown.
        errors: Every message passed to :meth:`notify_error`.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream: TextIO | None = stream
        self.loading: bool = False
        self.submit_enabled: bool = True
        self.results_visible: bool = False
        self.errors: list[str] = []

    def _print(self, text: str) -> None:
        print(text, file=self._stream or sys.stderr)

    def show_loading(self, visible: bool) -> None:
        self.loading = visible
        if visible:
            self._print("Running benchmark...")

    def set_submit_enabled(self, enabled: bool) -> None:
        self.submit_enabled = enabled

    def hide_results(self) -> None:
        self.results_visible = False

    def show_results(self) -> None:
        self.results_visible = True

    def scroll_to_results(self) -> None:
        # Nothing to scroll in a terminal; the table is the latest output.
        pass

    def notify_error(self, message: str) -> None:
        self.errors.append(message)
        self._print(f"Error: {message}")
