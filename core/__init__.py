"""Core domain layer for the ParseInsight benchmark client.

This package provides the wire and display models, unit formatting,
result normalization, presentation, and the submission orchestrator.
Everything here is transport- and UI-agnostic: output targets are
injected as sink objects. All models are Pydantic-based with frozen
configuration for immutability.
"""

from core.errors import (
    BackendError,
    BenchmarkClientError,
    InputValidationError,
    MalformedResultError,
    NetworkError,
)
from core.formatting import (
    PLACEHOLDER,
    format_bytes,
    format_count,
    format_duration,
    format_microseconds,
)
from core.models import (
    BenchmarkRequest,
    BenchmarkResponse,
    ChartKind,
    ChartSeries,
    DisplayRow,
    FailureResult,
    MessageType,
    PresentedResults,
    RawResult,
    ResultStatus,
    SuccessResult,
)
from core.normalizer import NormalizedResults, classify, normalize_results
from core.orchestrator import (
    BenchmarkOrchestrator,
    SubmissionOutcome,
    SubmissionState,
)
from core.presenter import ResultPresenter, build_chart_series

__all__: list[str] = [
    "BackendError",
    "BenchmarkClientError",
    "BenchmarkOrchestrator",
    "BenchmarkRequest",
    "BenchmarkResponse",
    "ChartKind",
    "ChartSeries",
    "DisplayRow",
    "FailureResult",
    "InputValidationError",
    "MalformedResultError",
    "MessageType",
    "NetworkError",
    "NormalizedResults",
    "PLACEHOLDER",
    "PresentedResults",
    "RawResult",
    "ResultPresenter",
    "ResultStatus",
    "SubmissionOutcome",
    "SubmissionState",
    "SuccessResult",
    "build_chart_series",
    "classify",
    "format_bytes",
    "format_count",
    "format_duration",
    "format_microseconds",
    "normalize_results",
]
