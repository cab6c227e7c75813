"""REST client for the hosted database backend.

Talks to a PostgREST-style API (``/rest/v1/<table>``) authenticated with an
anonymous API key. Transient failures (transport errors, 429, 5xx) are
retried with exponential backoff; every failure that survives the retries is
raised as SimulationStoreError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from genomesim.config import SimulatorSettings, get_settings
from genomesim.storage.store import (
    InMemorySimulationStore,
    SimulationStore,
    SimulationStoreError,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class TransientBackendError(Exception):
    """A backend response worth retrying."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Backend returned HTTP {status_code}")
        self.status_code = status_code


class RestSimulationStore(SimulationStore):
    """SimulationStore backed by the hosted database's REST interface.

    Example:
        >>> store = RestSimulationStore(SimulatorSettings(backend_url="https://db.example"))
        >>> store.list_simulations("user-1")
        [...]
    """

    SIMULATIONS = "simulations"
    TRAITS = "traits"
    GENETIC_DATA = "genetic_data"

    def __init__(
        self,
        settings: SimulatorSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Settings with backend_url. Loads from environment if None.
            transport: Optional httpx transport (tests use httpx.MockTransport).

        Raises:
            SimulationStoreError: If no backend URL is configured.
        """
        self._settings = settings or get_settings()
        if not self._settings.backend_url:
            raise SimulationStoreError("BACKEND_URL is not configured")

        headers = {"Content-Type": "application/json"}
        api_key = self._settings.get_api_key()
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.Client(
            base_url=f"{self._settings.backend_url}/rest/v1",
            headers=headers,
            timeout=self._settings.backend_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RestSimulationStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Backend request failed (attempt %d/%d): %s",
            retry_state.attempt_number,
            self._settings.backend_max_retries,
            exc,
        )

    def _send(self, method: str, table: str, **kwargs: Any) -> Any:
        retryer = Retrying(
            stop=stop_after_attempt(self._settings.backend_max_retries),
            wait=wait_exponential(multiplier=self._settings.backend_retry_wait, max=10.0),
            retry=retry_if_exception_type((httpx.TransportError, TransientBackendError)),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            response = retryer(self._request_once, method, table, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("Backend request to %s timed out", table)
            raise SimulationStoreError(f"Backend request timed out: {e}") from e
        except httpx.TransportError as e:
            logger.error("Cannot reach backend at %s: %s", self._settings.backend_url, e)
            raise SimulationStoreError(f"Backend unavailable: {e}") from e
        except TransientBackendError as e:
            logger.error("Backend kept failing for %s: HTTP %d", table, e.status_code)
            raise SimulationStoreError(str(e)) from e

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Backend HTTP error on %s: %s", table, e.response.status_code)
            raise SimulationStoreError(f"HTTP error: {e.response.status_code}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise SimulationStoreError("Backend returned invalid JSON") from e

    def _request_once(self, method: str, table: str, **kwargs: Any) -> httpx.Response:
        response = self._client.request(method, f"/{table}", **kwargs)
        if response.status_code in RETRYABLE_STATUS:
            raise TransientBackendError(response.status_code)
        return response

    def _insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        data = self._send(
            "POST",
            table,
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        if not isinstance(data, list) or not data:
            raise SimulationStoreError(f"Backend returned no row for insert into {table}")
        return data[0]

    def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        data = self._send("GET", table, params={"select": "*", **params})
        if data is None:
            return []
        if not isinstance(data, list):
            raise SimulationStoreError(f"Unexpected response shape from {table}")
        return data

    def save_simulation(self, user_id: str, record: dict[str, Any]) -> dict[str, Any]:
        row = self._insert(self.SIMULATIONS, {"user_id": user_id, **record})
        logger.info("Saved simulation %s", row.get("id"), extra={"user_id": user_id})
        return row

    def list_simulations(self, user_id: str) -> list[dict[str, Any]]:
        return self._select(
            self.SIMULATIONS,
            {"user_id": f"eq.{user_id}", "order": "created_at.desc"},
        )

    def get_simulation(self, simulation_id: str) -> dict[str, Any] | None:
        rows = self._select(self.SIMULATIONS, {"id": f"eq.{simulation_id}", "limit": "1"})
        return rows[0] if rows else None

    def list_traits(self) -> list[dict[str, Any]]:
        return self._select(self.TRAITS, {"order": "name"})

    def save_genetic_profile(self, user_id: str, profile: dict[str, Any]) -> dict[str, Any]:
        return self._insert(self.GENETIC_DATA, {"user_id": user_id, **profile})

    def get_genetic_profile(self, user_id: str) -> dict[str, Any] | None:
        rows = self._select(self.GENETIC_DATA, {"user_id": f"eq.{user_id}", "limit": "1"})
        return rows[0] if rows else None


def create_store(settings: SimulatorSettings | None = None) -> SimulationStore:
    """Build the REST store when a backend is configured, else an in-memory one."""
    settings = settings or get_settings()
    if settings.backend_url:
        logger.info("Using hosted backend at %s", settings.backend_url)
        return RestSimulationStore(settings)
    logger.warning("BACKEND_URL not set; simulations are kept in memory only")
    return InMemorySimulationStore()
