"""matplotlib rendering engine for the comparison bar charts.

Implements the presenter's :class:`~core.presenter.ChartSink` protocol
with headless matplotlib (``Agg`` backend). Each :meth:`draw` creates
one figure and, when an output directory is configured, saves it as
``<kind>.png`` (``throughput.png``, ``latency.png``).

Styling:
    Winner bars use an accent colour per chart (amber for throughput,
    green for latency); all other bars use the chart's base colour
    (blue, purple). The value axis starts at zero and is labelled
    with grouped counts (throughput) or fixed microseconds (latency).

Ownership:
    The returned :class:`MatplotlibChart` owns its figure until
    :meth:`MatplotlibChart.destroy` closes it. The presenter destroys
    the previous chart of a kind before asking for a new one, so
    pyplot never accumulates open figures across runs.
"""

import logging
from pathlib import Path
from typing import Callable

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend, no display needed

import matplotlib.pyplot as plt
import matplotlib.ticker as ticker
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from pydantic import BaseModel, ConfigDict, Field

from core.formatting import format_count, format_microseconds
from core.models import ChartKind, ChartSeries

logger: logging.Logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ChartStyle(BaseModel):
    """Colours and geometry for the comparison charts.

    Colours are any matplotlib colour spec. ``fill_alpha`` applies to
    bar faces only; edges are drawn opaque.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    throughput_color: str = Field(default="#3b82f6", description="Base bar colour")
    throughput_winner_color: str = Field(
        default="#fbbf24",
        description="Winner bar colour",
    )
    latency_color: str = Field(default="#8b5cf6", description="Base bar colour")
    latency_winner_color: str = Field(
        default="#10b981",
        description="Winner bar colour",
    )
    fill_alpha: float = Field(default=0.8, ge=0.0, le=1.0)
    width_inches: float = Field(default=8.0, gt=0.0)
    height_inches: float = Field(default=4.5, gt=0.0)
    dpi: int = Field(default=150, gt=0)

    def colors_for(self, kind: ChartKind) -> tuple[str, str]:
        """Return ``(base, winner)`` colours for a chart kind."""
        if kind == ChartKind.THROUGHPUT:
            return self.throughput_color, self.throughput_winner_color
        return self.latency_color, self.latency_winner_color


def _tick_label(kind: ChartKind) -> Callable[[float, int], str]:
    if kind == ChartKind.THROUGHPUT:
        return lambda value, _pos: format_count(value)
    return lambda value, _pos: format_microseconds(value)


# ---------------------------------------------------------------------------
# Chart handle
# ---------------------------------------------------------------------------


class MatplotlibChart:
    """Handle for one drawn figure.

    Args:
        kind: Chart kind this figure shows.
        figure: The matplotlib figure, owned by this handle.
        path: Where the figure was saved, if anywhere.
    """

    def __init__(self, kind: ChartKind, figure: Figure, path: Path | None) -> None:
        self._kind: ChartKind = kind
        self._figure: Figure = figure
        self._path: Path | None = path
        self._destroyed: bool = False

    @property
    def kind(self) -> ChartKind:
        return self._kind

    @property
    def figure(self) -> Figure:
        return self._figure

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        """Close the figure. Idempotent. Saved files are kept."""
        if self._destroyed:
            return
        plt.close(self._figure)
        self._destroyed = True


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


class MatplotlibChartSink:
    """Draws chart series as bar charts with matplotlib.

    Args:
        output_dir: Directory for PNG output. Created on first draw.
            ``None`` keeps figures in memory only.
        style: Colours and geometry. Defaults to :class:`ChartStyle`.
    """

    def __init__(
        self,
        output_dir: Path | None = None,
        style: ChartStyle | None = None,
    ) -> None:
        self._output_dir: Path | None = output_dir
        self._style: ChartStyle = style or ChartStyle()

    def draw(self, series: ChartSeries) -> MatplotlibChart:
        """Draw ``series`` as a bar chart.

        Args:
            series: Non-empty chart series.

        Returns:
            Handle owning the new figure.
        """
        style: ChartStyle = self._style
        base, winner = style.colors_for(series.kind)
        edge_colors: list[str] = [
            winner if flag else base for flag in series.highlight_flags
        ]
        face_colors: list[tuple[float, float, float, float]] = [
            to_rgba(color, style.fill_alpha) for color in edge_colors
        ]
        positions: list[int] = list(range(len(series)))

        fig, axis = plt.subplots(
            figsize=(style.width_inches, style.height_inches),
        )
        # No handle exists until draw returns; close the figure on any error.
        try:
            axis.bar(
                positions,
                series.values,
                color=face_colors,
                edgecolor=edge_colors,
                linewidth=2,
            )
            axis.set_xticks(positions)
            axis.set_xticklabels(series.labels)
            axis.set_title(series.title, fontsize=14, fontweight="bold")
            axis.set_ylim(bottom=0)
            axis.yaxis.set_major_formatter(
                ticker.FuncFormatter(_tick_label(series.kind)),
            )
            axis.grid(axis="y", alpha=0.3)
            fig.tight_layout()

            path: Path | None = None
            if self._output_dir is not None:
                self._output_dir.mkdir(parents=True, exist_ok=True)
                path = self._output_dir / f"{series.kind.value}.png"
                fig.savefig(str(path), dpi=style.dpi, bbox_inches="tight")
                logger.info("Saved %s chart to %s", series.kind.value, path)
        except BaseException:
            plt.close(fig)
            raise

        return MatplotlibChart(kind=series.kind, figure=fig, path=path)
