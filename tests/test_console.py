"""Unit tests for infra.console."""

import io

from core.models import DisplayRow, ResultStatus
from infra.console import ConsoleStatusSink, ConsoleTableSink, format_results_table


def _rows() -> list[DisplayRow]:
    return [
        DisplayRow(
            library="libA",
            ops_per_sec_display="500,000",
            avg_time_display="2.00 μs",
            memory_display="128.00 B",
            allocs_display="2",
            status=ResultStatus.SUCCESS,
        ),
        DisplayRow(
            library="libB",
            ops_per_sec_display="750,000",
            avg_time_display="1.33 μs",
            memory_display="96.00 B",
            allocs_display="1",
            status=ResultStatus.WINNER,
        ),
        DisplayRow(
            library="libC",
            ops_per_sec_display="-",
            avg_time_display="-",
            memory_display="-",
            allocs_display="-",
            status=ResultStatus.FAILED,
            error_text="timeout",
        ),
    ]


# ---------------------------------------------------------------------------
# format_results_table
# ---------------------------------------------------------------------------


class TestFormatResultsTable:
    """Tests for the text table layout."""

    def test_rows_in_order(self) -> None:
        """Each row appears once, in the given order."""
        table: str = format_results_table(_rows())
        lines: list[str] = table.splitlines()

        libraries: list[str] = [
            line.split()[0] for line in lines
            if line.startswith(("libA", "libB", "libC"))
        ]
        assert libraries == ["libA", "libB", "libC"]

    def test_cells_rendered(self) -> None:
        """Display strings are printed unchanged."""
        table: str = format_results_table(_rows())
        row_line: str = next(
            line for line in table.splitlines() if line.startswith("libB")
        )
        assert row_line.split("  ")[0] == "libB"
        for cell in ("750,000", "1.33 μs", "96.00 B", "Winner"):
            assert cell in row_line

    def test_header(self) -> None:
        """All six column headers are present."""
        table: str = format_results_table(_rows())
        header: str = next(
            line for line in table.splitlines() if line.startswith("Library")
        )
        assert header.split() == [
            "Library", "Ops/sec", "Avg", "Time", "Memory", "Allocs/Op", "Status",
        ]

    def test_error_line(self) -> None:
        """A failed row's error is printed below it."""
        lines: list[str] = format_results_table(_rows()).splitlines()
        index: int = next(i for i, line in enumerate(lines) if line.startswith("libC"))
        assert lines[index + 1] == "    error: timeout"

    def test_recommendation(self) -> None:
        """The recommendation sits between the title and the header."""
        lines: list[str] = format_results_table(
            _rows(), "libB completed successfully with 750000 ops/sec",
        ).splitlines()
        assert lines[1] == "BENCHMARK RESULTS"
        assert lines[3] == "libB completed successfully with 750000 ops/sec"
        assert lines[5].startswith("Library")

    def test_no_recommendation(self) -> None:
        """Without a recommendation the header follows the title rule."""
        lines: list[str] = format_results_table(_rows()).splitlines()
        assert lines[3].startswith("Library")

    def test_empty(self) -> None:
        """An empty result set says so."""
        table: str = format_results_table([])
        assert "(no results)" in table
        assert table.splitlines()[-1] == "=" * 70


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


class TestConsoleTableSink:
    """Tests for the table sink."""

    def test_writes_to_stream(self) -> None:
        """The rendered table goes to the given stream."""
        stream = io.StringIO()
        ConsoleTableSink(stream=stream).render_table(_rows(), "verdict")
        output: str = stream.getvalue()
        assert "BENCHMARK RESULTS" in output
        assert "verdict" in output
        assert output.endswith("\n")


class TestConsoleStatusSink:
    """Tests for the status sink."""

    def test_initial_flags(self) -> None:
        """A fresh sink is idle with no results shown."""
        sink = ConsoleStatusSink(stream=io.StringIO())
        assert sink.loading is False
        assert sink.submit_enabled is True
        assert sink.results_visible is False
        assert sink.errors == []

    def test_flags_follow_calls(self) -> None:
        """Each call updates its flag."""
        sink = ConsoleStatusSink(stream=io.StringIO())
        sink.show_loading(True)
        sink.set_submit_enabled(False)
        sink.show_results()
        sink.scroll_to_results()
        assert sink.loading is True
        assert sink.submit_enabled is False
        assert sink.results_visible is True

        sink.hide_results()
        sink.show_loading(False)
        assert sink.results_visible is False
        assert sink.loading is False

    def test_messages(self) -> None:
        """Progress and errors are printed; errors are also kept."""
        stream = io.StringIO()
        sink = ConsoleStatusSink(stream=stream)
        sink.show_loading(True)
        sink.notify_error("Invalid message type")

        assert sink.errors == ["Invalid message type"]
        assert stream.getvalue().splitlines() == [
            "Running benchmark...",
            "Error: Invalid message type",
        ]
