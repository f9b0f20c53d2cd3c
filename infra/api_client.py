"""HTTP client for the ParseInsight benchmark backend.

Wraps a synchronous :class:`httpx.Client` and exposes the two backend
operations the orchestrator needs:

- ``GET /api/libraries`` → :meth:`BenchmarkApiClient.fetch_libraries`
- ``POST /api/benchmark`` → :meth:`BenchmarkApiClient.run_benchmark`

Error mapping:
    ======================================  =============================
    Condition                               Raised
    ======================================  =============================
    Transport failure (refused, DNS, ...)   :class:`~core.errors.NetworkError`
    Non-2xx status                          :class:`~core.errors.BackendError`
                                            with the body's ``error`` text,
                                            or ``"Benchmark failed"``
    2xx with an unreadable body             :class:`~core.errors.BackendError`
    ======================================  =============================

Request policy:
    One request per call. No retry, and no timeout override: the
    httpx default applies.

Example::

    with BenchmarkApiClient(ApiClientConfig(base_url="http://localhost:8080")) as api:
        libraries = api.fetch_libraries()
        response = api.run_benchmark(request)
"""

import logging

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from core.errors import GENERIC_FAILURE_MESSAGE, BackendError, NetworkError
from core.models import BenchmarkRequest, BenchmarkResponse, LibrariesResponse

logger: logging.Logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

LIBRARIES_PATH: str = "/api/libraries"
BENCHMARK_PATH: str = "/api/benchmark"

_JSON_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ApiClientConfig(BaseModel):
    """Configuration for :class:`BenchmarkApiClient`.

    Attributes:
        base_url: Backend root URL, scheme included. A trailing slash
            is stripped.

    Example:
        >>> ApiClientConfig(base_url="http://bench.local:8080/").base_url
        'http://bench.local:8080'
    """

    base_url: str = Field(
        default="http://localhost:8080",
        min_length=1,
        description="Backend root URL (scheme://host[:port])",
    )

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class BenchmarkApiClient:
    """Synchronous client for the benchmark backend.

    Args:
        config: Client configuration.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
            in tests. ``None`` uses the default network transport.
    """

    def __init__(
        self,
        config: ApiClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config: ApiClientConfig = config or ApiClientConfig()
        self._client: httpx.Client = httpx.Client(
            base_url=self._config.base_url,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def __enter__(self) -> "BenchmarkApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool. Idempotent."""
        self._client.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def fetch_libraries(self) -> list[str]:
        """Return selectable parser libraries, in catalog order.

        Raises:
            NetworkError: If the backend is unreachable.
            BackendError: On a non-2xx status or unreadable body.
        """
        response: httpx.Response = self._send("GET", LIBRARIES_PATH)
        try:
            catalog: LibrariesResponse = LibrariesResponse.model_validate_json(
                response.content,
            )
        except ValidationError as exc:
            raise BackendError(
                "Invalid library catalog from backend",
                status_code=response.status_code,
            ) from exc
        logger.debug("Catalog: %s", ", ".join(catalog.libraries))
        return list(catalog.libraries)

    def run_benchmark(self, request: BenchmarkRequest) -> BenchmarkResponse:
        """Submit ``request`` and return the parsed benchmark response.

        Raises:
            NetworkError: If the backend is unreachable.
            BackendError: On a non-2xx status or unreadable body.
        """
        response: httpx.Response = self._send(
            "POST",
            BENCHMARK_PATH,
            json=request.to_payload(),
        )
        try:
            return BenchmarkResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise BackendError(
                "Invalid benchmark response from backend",
                status_code=response.status_code,
            ) from exc

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(
        self,
        method: str,
        path: str,
        json: dict[str, object] | None = None,
    ) -> httpx.Response:
        """Send one request and raise on transport or status failure."""
        try:
            response: httpx.Response = self._client.request(
                method,
                path,
                json=json,
                headers=_JSON_HEADERS,
            )
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"Could not reach {self.base_url}{path}: {exc}"
            ) from exc

        logger.debug("%s %s -> %d", method, path, response.status_code)

        if not response.is_success:
            raise BackendError(
                _error_message(response),
                status_code=response.status_code,
            )
        return response


def _error_message(response: httpx.Response) -> str:
    """Extract the ``error`` field of a failure body, or the fallback."""
    try:
        body: object = response.json()
    except ValueError:
        return GENERIC_FAILURE_MESSAGE
    if isinstance(body, dict):
        message: object = body.get("error")
        if isinstance(message, str) and message:
            return message
    return GENERIC_FAILURE_MESSAGE
