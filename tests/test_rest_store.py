"""Tests for the REST store against a mocked backend."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest
from pydantic import SecretStr

from genomesim.config import SimulatorSettings
from genomesim.storage.rest import RestSimulationStore
from genomesim.storage.store import SimulationStoreError

BASE_URL = "https://db.example.test"


@pytest.fixture
def settings() -> SimulatorSettings:
    return SimulatorSettings(
        backend_url=BASE_URL + "/",
        backend_api_key=SecretStr("anon-key"),
        backend_max_retries=3,
        backend_retry_wait=0.0,
    )


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_store(settings: SimulatorSettings, requests_seen: list[httpx.Request]):
    """Build a store whose transport is served by the given handler."""
    stores: list[RestSimulationStore] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> RestSimulationStore:
        def recording(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        store = RestSimulationStore(settings, transport=httpx.MockTransport(recording))
        stores.append(store)
        return store

    yield factory
    for store in stores:
        store.close()


class TestInit:
    def test_requires_backend_url(self) -> None:
        with pytest.raises(SimulationStoreError, match="BACKEND_URL"):
            RestSimulationStore(SimulatorSettings(backend_url=None))


class TestRequests:
    """Request shapes sent to the backend."""

    def test_save_simulation(self, make_store, requests_seen) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(201, json=[{**body[0], "id": "sim-1"}])

        row = make_store(handler).save_simulation("user-1", {"accuracy_score": 98.0})

        assert row == {"user_id": "user-1", "accuracy_score": 98.0, "id": "sim-1"}
        request = requests_seen[0]
        assert request.method == "POST"
        assert request.url.path == "/rest/v1/simulations"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"
        assert request.headers["Prefer"] == "return=representation"

    def test_list_simulations(self, make_store, requests_seen) -> None:
        rows = [{"id": "b"}, {"id": "a"}]
        store = make_store(lambda request: httpx.Response(200, json=rows))

        assert store.list_simulations("user-1") == rows
        params = requests_seen[0].url.params
        assert params["user_id"] == "eq.user-1"
        assert params["order"] == "created_at.desc"
        assert params["select"] == "*"

    def test_get_simulation_missing(self, make_store) -> None:
        store = make_store(lambda request: httpx.Response(200, json=[]))
        assert store.get_simulation("nope") is None

    def test_get_simulation(self, make_store, requests_seen) -> None:
        store = make_store(lambda request: httpx.Response(200, json=[{"id": "sim-1"}]))
        assert store.get_simulation("sim-1") == {"id": "sim-1"}
        assert requests_seen[0].url.params["id"] == "eq.sim-1"

    def test_list_traits(self, make_store, requests_seen) -> None:
        rows = [{"id": "height", "name": "Height", "icon": "📏"}]
        store = make_store(lambda request: httpx.Response(200, json=rows))
        assert store.list_traits() == rows
        assert requests_seen[0].url.path == "/rest/v1/traits"
        assert requests_seen[0].url.params["order"] == "name"

    def test_genetic_profile_roundtrip_paths(self, make_store, requests_seen) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(201, json=[{"id": "g1", "user_id": "user-1"}])
            return httpx.Response(200, json=[])

        store = make_store(handler)
        saved = store.save_genetic_profile("user-1", {"processing_status": "completed"})
        assert saved["id"] == "g1"
        assert store.get_genetic_profile("user-1") is None
        assert {r.url.path for r in requests_seen} == {"/rest/v1/genetic_data"}


class TestFailures:
    """Errors are retried where transient and always surface as SimulationStoreError."""

    def test_transient_status_retried_then_succeeds(self, make_store, requests_seen) -> None:
        responses = iter([httpx.Response(503), httpx.Response(502), httpx.Response(200, json=[])])
        store = make_store(lambda request: next(responses))

        assert store.list_simulations("user-1") == []
        assert len(requests_seen) == 3

    def test_transient_status_exhausts_retries(self, make_store, requests_seen) -> None:
        store = make_store(lambda request: httpx.Response(503))

        with pytest.raises(SimulationStoreError, match="503"):
            store.list_simulations("user-1")
        assert len(requests_seen) == 3

    def test_client_error_not_retried(self, make_store, requests_seen) -> None:
        store = make_store(lambda request: httpx.Response(400, json={"message": "bad"}))

        with pytest.raises(SimulationStoreError, match="400"):
            store.save_simulation("user-1", {})
        assert len(requests_seen) == 1

    def test_connection_error(self, make_store, requests_seen) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SimulationStoreError, match="unavailable"):
            make_store(handler).list_traits()
        assert len(requests_seen) == 3

    def test_timeout(self, make_store) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(SimulationStoreError, match="timed out"):
            make_store(handler).list_simulations("user-1")

    def test_invalid_json(self, make_store) -> None:
        store = make_store(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(SimulationStoreError, match="invalid JSON"):
            store.list_simulations("user-1")

    def test_insert_without_row(self, make_store) -> None:
        store = make_store(lambda request: httpx.Response(201, json=[]))
        with pytest.raises(SimulationStoreError, match="no row"):
            store.save_simulation("user-1", {})

    def test_unexpected_shape(self, make_store) -> None:
        store = make_store(lambda request: httpx.Response(200, json={"rows": []}))
        with pytest.raises(SimulationStoreError, match="Unexpected response shape"):
            store.list_traits()
