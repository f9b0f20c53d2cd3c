"""Infrastructure layer for the ParseInsight benchmark client.

This package provides the HTTP client for the benchmark backend and
the concrete output sinks: console table and status, and matplotlib
comparison charts.
"""

from infra.api_client import ApiClientConfig, BenchmarkApiClient
from infra.charts import ChartStyle, MatplotlibChart, MatplotlibChartSink
from infra.console import ConsoleStatusSink, ConsoleTableSink, format_results_table

__all__: list[str] = [
    "ApiClientConfig",
    "BenchmarkApiClient",
    "ChartStyle",
    "ConsoleStatusSink",
    "ConsoleTableSink",
    "MatplotlibChart",
    "MatplotlibChartSink",
    "format_results_table",
]
