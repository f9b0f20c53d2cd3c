"""Benchmark request orchestrator: validate, submit, present.

Drives one benchmark submission through its lifecycle and keeps the
user-facing controls consistent while it runs.

State machine::

    IDLE ──submit()──▶ SUBMITTING ──▶ SUCCEEDED ──┐
      ▲                     │                      │
      │                     └──────▶ FAILED ───────┤
      └────────────────────────────────────────────┘

- A submission with a blank message or no selected library is
  rejected synchronously: the user is notified, no network call is
  made, and the state never leaves ``IDLE``.
- Entering ``SUBMITTING`` shows the loading indicator, disables the
  submit control, and hides any previous results.
- Exactly one backend call is made. There is no retry and no
  cancellation.
- On success the presenter renders the response and the results
  section is revealed and scrolled into view.
- On a backend or network error, or if presenting fails, the
  user sees the server message (or ``"Benchmark failed"``) and the
  results stay hidden.
- Whatever happens, the loading indicator is hidden, the submit
  control re-enabled, and the state returned to ``IDLE`` in a
  ``finally`` block.

Concurrency:
    Overlapping submissions are prevented by UI policy (the submit
    control is disabled while ``SUBMITTING``). Calling :meth:`submit`
    while not ``IDLE`` is a caller bug and raises ``RuntimeError``.
"""

import logging
import threading
from enum import Enum
from typing import Protocol, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError

from core.errors import (
    GENERIC_FAILURE_MESSAGE,
    BackendError,
    BenchmarkClientError,
    InputValidationError,
)
from core.models import (
    BenchmarkRequest,
    BenchmarkResponse,
    MessageType,
    PresentedResults,
)
from core.presenter import ResultPresenter

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS: int = 10_000
DEFAULT_CONCURRENCY: int = 1

# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


class BenchmarkBackend(Protocol):
    """Library catalog and benchmark execution service."""

    def fetch_libraries(self) -> list[str]:
        """Return the selectable parser library names."""
        ...

    def run_benchmark(self, request: BenchmarkRequest) -> BenchmarkResponse:
        """Run ``request`` and return the parsed response."""
        ...


class StatusSink(Protocol):
    """Presentation chrome driven by the orchestrator."""

    def show_loading(self, visible: bool) -> None: ...

    def set_submit_enabled(self, enabled: bool) -> None: ...

    def hide_results(self) -> None: ...

    def show_results(self) -> None: ...

    def scroll_to_results(self) -> None: ...

    def notify_error(self, message: str) -> None: ...


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


class SubmissionState(str, Enum):
    """Lifecycle state of :class:`BenchmarkOrchestrator`.

    States:
        IDLE: Ready for a submission.
        SUBMITTING: Request in flight; submit control disabled.
        SUCCEEDED: Response received and presented.
        FAILED: Backend, network, or presentation error.
    """

    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class SubmissionOutcome(BaseModel):
    """Result of one :meth:`BenchmarkOrchestrator.submit` call.

    Attributes:
        state: Terminal state reached: ``SUCCEEDED``, ``FAILED``, or
            ``IDLE`` when the input was rejected before submitting.
        presented: Rendered results, on success only.
        error: Message shown to the user, on rejection or failure.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    state: SubmissionState
    presented: PresentedResults | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == SubmissionState.SUCCEEDED


def _describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class BenchmarkOrchestrator:
    """Collects inputs, submits benchmark jobs, and hands results on.

    Args:
        backend: Catalog and benchmark service client.
        presenter: Renders a successful response.
        status_sink: Loading indicator, submit control, results
            section, and user notifications.

    Example::

        orchestrator = BenchmarkOrchestrator(
            backend=BenchmarkApiClient(ApiClientConfig()),
            presenter=ResultPresenter(table_sink, chart_sink),
            status_sink=ConsoleStatusSink(),
        )
        libraries = orchestrator.load_libraries()
        outcome = orchestrator.submit(
            message="GET / HTTP/1.1\\r\\nHost: example.com\\r\\n\\r\\n",
            libraries=libraries,
        )
    """

    def __init__(
        self,
        backend: BenchmarkBackend,
        presenter: ResultPresenter,
        status_sink: StatusSink,
    ) -> None:
        self._backend: BenchmarkBackend = backend
        self._presenter: ResultPresenter = presenter
        self._status_sink: StatusSink = status_sink

        self._state: SubmissionState = SubmissionState.IDLE
        self._state_lock: threading.Lock = threading.Lock()

        self._available_libraries: tuple[str, ...] = ()
        self._last_outcome: SubmissionOutcome | None = None

        self._submitted: int = 0
        self._succeeded: int = 0
        self._failed: int = 0
        self._rejected: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> SubmissionState:
        """Current lifecycle state."""
        with self._state_lock:
            return self._state

    @property
    def available_libraries(self) -> tuple[str, ...]:
        """Library names from the last successful catalog fetch."""
        return self._available_libraries

    @property
    def last_outcome(self) -> SubmissionOutcome | None:
        """Outcome of the most recent :meth:`submit`, if any."""
        return self._last_outcome

    def load_libraries(self) -> list[str]:
        """Fetch the library catalog.

        Failure is logged and non-fatal: the selection stays empty and
        any later submission fails validation.

        Returns:
            Library names in catalog order; empty on failure.
        """
        try:
            libraries: list[str] = list(self._backend.fetch_libraries())
        except BenchmarkClientError:
            logger.exception("Failed to load libraries")
            libraries = []

        self._available_libraries = tuple(libraries)
        logger.info("Loaded %d parser libraries", len(libraries))
        return libraries

    @staticmethod
    def build_request(
        message: str,
        libraries: Sequence[str],
        message_type: MessageType | str | None = None,
        iterations: int = DEFAULT_ITERATIONS,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> BenchmarkRequest:
        """Validate raw user input and build a request.

        Only presence is checked here: non-blank message, at least one
        library, positive counts. Message syntax and upper limits are
        the backend's concern.

        Raises:
            InputValidationError: If any input is missing or invalid.
        """
        if not message.strip():
            raise InputValidationError("Please enter an HTTP message")
        if not any(name.strip() for name in libraries):
            raise InputValidationError(
                "Please select at least one parser library"
            )

        try:
            return BenchmarkRequest(
                message=message,
                message_type=message_type or None,
                iterations=iterations,
                concurrency=concurrency,
                libraries=tuple(libraries),
            )
        except ValidationError as exc:
            raise InputValidationError(_describe_validation_error(exc)) from exc

    def submit(
        self,
        message: str,
        libraries: Sequence[str],
        message_type: MessageType | str | None = None,
        iterations: int = DEFAULT_ITERATIONS,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> SubmissionOutcome:
        """Validate input, run one benchmark, and present the result.

        Args:
            message: Raw HTTP message; surrounding whitespace is trimmed.
            libraries: Selected parser libraries.
            message_type: ``request``/``response``, or ``None`` to let
                the backend detect it.
            iterations: Parse iterations per library.
            concurrency: Concurrent workers per library.

        Returns:
            The :class:`SubmissionOutcome`. Rejected input yields state
            ``IDLE`` with the validation message.

        Raises:
            RuntimeError: If a submission is already in progress.
        """
        self._ensure_idle()

        try:
            request: BenchmarkRequest = self.build_request(
                message=message,
                libraries=libraries,
                message_type=message_type,
                iterations=iterations,
                concurrency=concurrency,
            )
        except InputValidationError as exc:
            logger.warning("Submission rejected: %s", exc)
            self._rejected += 1
            self._status_sink.notify_error(str(exc))
            return self._record(
                SubmissionOutcome(state=SubmissionState.IDLE, error=str(exc)),
            )

        self._enter_submitting()
        self._submitted += 1
        self._status_sink.show_loading(True)
        self._status_sink.set_submit_enabled(False)
        self._status_sink.hide_results()

        outcome: SubmissionOutcome
        try:
            logger.info(
                "Submitting benchmark: %d libraries, %d iterations, "
                "concurrency %d",
                len(request.libraries),
                request.iterations,
                request.concurrency,
            )
            response: BenchmarkResponse = self._backend.run_benchmark(request)
            presented: PresentedResults = self._presenter.present(response)
            self._set_state(SubmissionState.SUCCEEDED)
            self._succeeded += 1
            self._status_sink.show_results()
            self._status_sink.scroll_to_results()
            outcome = SubmissionOutcome(
                state=SubmissionState.SUCCEEDED,
                presented=presented,
            )
        except BackendError as exc:
            logger.error(
                "Benchmark request failed (status=%s): %s",
                exc.status_code,
                exc.message,
            )
            outcome = self._fail(exc.message)
        except Exception as exc:
            logger.exception("Failed to present benchmark results")
            outcome = self._fail(str(exc))
        finally:
            self._status_sink.show_loading(False)
            self._status_sink.set_submit_enabled(True)
            self._set_state(SubmissionState.IDLE)

        return self._record(outcome)

    def stats(self) -> dict[str, str | int]:
        """Return submission counters and the current state."""
        return {
            "state": self.state.value,
            "available_libraries": len(self._available_libraries),
            "submitted": self._submitted,
            "succeeded": self._succeeded,
            "failed": self._failed,
            "rejected": self._rejected,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_idle(self) -> None:
        with self._state_lock:
            if self._state != SubmissionState.IDLE:
                raise RuntimeError(
                    f"Cannot submit: orchestrator is in {self._state.value} state"
                )

    def _enter_submitting(self) -> None:
        with self._state_lock:
            if self._state != SubmissionState.IDLE:
                raise RuntimeError(
                    f"Cannot submit: orchestrator is in {self._state.value} state"
                )
            self._state = SubmissionState.SUBMITTING

    def _set_state(self, state: SubmissionState) -> None:
        with self._state_lock:
            self._state = state

    def _fail(self, message: str) -> SubmissionOutcome:
        """Move to FAILED and notify the user; results stay hidden."""
        self._set_state(SubmissionState.FAILED)
        self._failed += 1
        user_message: str = message or GENERIC_FAILURE_MESSAGE
        self._status_sink.hide_results()
        self._status_sink.notify_error(user_message)
        return SubmissionOutcome(state=SubmissionState.FAILED, error=user_message)

    def _record(self, outcome: SubmissionOutcome) -> SubmissionOutcome:
        self._last_outcome = outcome
        return outcome
