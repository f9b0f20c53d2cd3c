"""Unit tests for infra.charts.

Figures are drawn with the headless Agg backend.

Tests cover:
    - PNG output per chart kind
    - Winner vs base bar colours
    - Category labels
    - Figure teardown and idempotent destroy
    - No figure accumulation across presenter runs
"""

from pathlib import Path

import matplotlib.pyplot as plt
import pytest
from matplotlib.colors import to_rgba

from core.models import BenchmarkResponse, ChartKind, ChartSeries
from core.presenter import ResultPresenter
from infra.charts import ChartStyle, MatplotlibChart, MatplotlibChartSink


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def throughput_series() -> ChartSeries:
    return ChartSeries(
        kind=ChartKind.THROUGHPUT,
        title="Operations per Second (Higher is Better)",
        unit="ops/s",
        labels=("libA", "libB"),
        values=(500000.0, 750000.0),
        highlight_flags=(False, True),
    )


@pytest.fixture()
def latency_series() -> ChartSeries:
    return ChartSeries(
        kind=ChartKind.LATENCY,
        title="Average Time per Parse (Lower is Better)",
        unit="μs",
        labels=("libA", "libB"),
        values=(2.0, 1.333),
        highlight_flags=(False, True),
    )


@pytest.fixture(autouse=True)
def _close_figures():
    """Leave no open figures behind between tests."""
    yield
    plt.close("all")


# ---------------------------------------------------------------------------
# ChartStyle
# ---------------------------------------------------------------------------


class TestChartStyle:
    """Tests for the default chart palette."""

    def test_colors_for(self) -> None:
        """Each kind has its own base and winner colours."""
        style = ChartStyle()
        assert style.colors_for(ChartKind.THROUGHPUT) == ("#3b82f6", "#fbbf24")
        assert style.colors_for(ChartKind.LATENCY) == ("#8b5cf6", "#10b981")

    def test_alpha_bounds(self) -> None:
        """Fill alpha must lie in [0, 1]."""
        with pytest.raises(ValueError):
            ChartStyle(fill_alpha=1.5)


# ---------------------------------------------------------------------------
# MatplotlibChartSink
# ---------------------------------------------------------------------------


class TestMatplotlibChartSink:
    """Tests for drawing and saving bar charts."""

    def test_saves_png(
        self, tmp_path: Path, throughput_series: ChartSeries,
    ) -> None:
        """A configured output directory receives <kind>.png."""
        out_dir: Path = tmp_path / "charts"
        chart: MatplotlibChart = MatplotlibChartSink(output_dir=out_dir).draw(
            throughput_series,
        )

        assert chart.path == out_dir / "throughput.png"
        assert chart.path.read_bytes().startswith(b"\x89PNG")

    def test_in_memory(self, latency_series: ChartSeries) -> None:
        """Without an output directory nothing is saved."""
        chart: MatplotlibChart = MatplotlibChartSink().draw(latency_series)
        assert chart.path is None
        assert chart.kind == ChartKind.LATENCY

    @pytest.mark.parametrize(
        ("series_name", "base", "winner"),
        [
            ("throughput_series", "#3b82f6", "#fbbf24"),
            ("latency_series", "#8b5cf6", "#10b981"),
        ],
    )
    def test_winner_highlighted(
        self,
        request: pytest.FixtureRequest,
        series_name: str,
        base: str,
        winner: str,
    ) -> None:
        """Winner bars use the accent colour, others the base colour."""
        series: ChartSeries = request.getfixturevalue(series_name)
        chart: MatplotlibChart = MatplotlibChartSink().draw(series)

        bars = chart.figure.axes[0].patches
        assert len(bars) == 2
        assert bars[0].get_facecolor() == pytest.approx(to_rgba(base, 0.8))
        assert bars[1].get_facecolor() == pytest.approx(to_rgba(winner, 0.8))
        assert bars[1].get_edgecolor() == pytest.approx(to_rgba(winner))

    def test_labels_and_title(self, throughput_series: ChartSeries) -> None:
        """Libraries label the bars in order; the title is set."""
        chart: MatplotlibChart = MatplotlibChartSink().draw(throughput_series)
        axis = chart.figure.axes[0]

        assert [t.get_text() for t in axis.get_xticklabels()] == ["libA", "libB"]
        assert axis.get_title() == "Operations per Second (Higher is Better)"
        assert axis.get_ylim()[0] == 0

    def test_save_failure_closes_figure(
        self, tmp_path: Path, throughput_series: ChartSeries,
    ) -> None:
        """A failed save raises without leaving a figure open."""
        blocker: Path = tmp_path / "not-a-dir"
        blocker.write_text("occupied", encoding="utf-8")
        sink = MatplotlibChartSink(output_dir=blocker)
        baseline: int = len(plt.get_fignums())

        for _ in range(3):
            with pytest.raises(OSError):
                sink.draw(throughput_series)

        assert len(plt.get_fignums()) == baseline

    def test_bar_heights(self, latency_series: ChartSeries) -> None:
        """Bar heights are the series values."""
        chart: MatplotlibChart = MatplotlibChartSink().draw(latency_series)
        heights = [bar.get_height() for bar in chart.figure.axes[0].patches]
        assert heights == pytest.approx([2.0, 1.333])


# ---------------------------------------------------------------------------
# MatplotlibChart
# ---------------------------------------------------------------------------


class TestMatplotlibChart:
    """Tests for figure teardown."""

    def test_destroy_closes_figure(self, throughput_series: ChartSeries) -> None:
        """destroy() closes the figure; a second call is a no-op."""
        chart: MatplotlibChart = MatplotlibChartSink().draw(throughput_series)
        number: int = chart.figure.number
        assert plt.fignum_exists(number)

        chart.destroy()
        chart.destroy()

        assert chart.destroyed
        assert not plt.fignum_exists(number)

    def test_destroy_keeps_saved_file(
        self, tmp_path: Path, throughput_series: ChartSeries,
    ) -> None:
        """The PNG outlives the figure."""
        chart: MatplotlibChart = MatplotlibChartSink(output_dir=tmp_path).draw(
            throughput_series,
        )
        chart.destroy()
        assert (tmp_path / "throughput.png").exists()


# ---------------------------------------------------------------------------
# Presenter integration
# ---------------------------------------------------------------------------


class _NullTable:
    def render_table(self, rows, recommendation: str) -> None:
        pass


class TestPresenterIntegration:
    """Tests for chart replacement with real figures."""

    def test_no_figure_accumulation(self, tmp_path: Path) -> None:
        """Repeated runs keep exactly two figures open."""
        response: BenchmarkResponse = BenchmarkResponse.model_validate({
            "results": [
                {
                    "library": "libA",
                    "success": True,
                    "ops_per_second": 500000,
                    "avg_time_per_parse": 2000,
                },
                {
                    "library": "libB",
                    "success": True,
                    "winner": True,
                    "ops_per_second": 750000,
                    "avg_time_per_parse": 1333,
                },
            ],
        })
        presenter = ResultPresenter(
            table_sink=_NullTable(),
            chart_sink=MatplotlibChartSink(output_dir=tmp_path),
        )
        baseline: int = len(plt.get_fignums())

        for _ in range(3):
            presenter.present(response)
            assert len(plt.get_fignums()) == baseline + 2

        presenter.clear_charts()
        assert len(plt.get_fignums()) == baseline
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "latency.png",
            "throughput.png",
        ]
