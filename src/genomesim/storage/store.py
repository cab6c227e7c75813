"""Persistence interface for simulations and reference data.

The hosted backend is an external collaborator: the simulator treats it as
an opaque store and must keep working when it is unavailable.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)


class SimulationStoreError(Exception):
    """Raised when a store operation fails. Always recoverable for callers."""

    pass


class SimulationStore(ABC):
    """Interface every persistence backend implements.

    Rows are plain JSON-compatible dicts. Stored simulation rows carry at
    least ``id``, ``user_id`` and ``created_at`` in addition to the record
    that was saved.
    """

    @abstractmethod
    def save_simulation(self, user_id: str, record: dict[str, Any]) -> dict[str, Any]:
        """Persist one simulation record and return the stored row.

        Raises:
            SimulationStoreError: If the backend rejects or cannot be reached.
        """
        raise NotImplementedError

    @abstractmethod
    def list_simulations(self, user_id: str) -> list[dict[str, Any]]:
        """Return a user's saved simulations, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_simulation(self, simulation_id: str) -> dict[str, Any] | None:
        """Return one stored simulation row, or None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    def list_traits(self) -> list[dict[str, Any]]:
        """Return trait reference rows (id, name, icon) ordered by name."""
        raise NotImplementedError

    @abstractmethod
    def save_genetic_profile(self, user_id: str, profile: dict[str, Any]) -> dict[str, Any]:
        """Persist a user's genetic profile record and return the stored row."""
        raise NotImplementedError

    @abstractmethod
    def get_genetic_profile(self, user_id: str) -> dict[str, Any] | None:
        """Return a user's genetic profile record, or None if there is none."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any connections held by the store."""


class InMemorySimulationStore(SimulationStore):
    """Process-local store, used when no backend is configured and in tests.

    Example:
        >>> store = InMemorySimulationStore()
        >>> row = store.save_simulation("user-1", {"accuracy_score": 97.2})
        >>> store.get_simulation(row["id"])["accuracy_score"]
        97.2
    """

    def __init__(self, traits: list[dict[str, Any]] | None = None) -> None:
        self._lock = threading.Lock()
        self._simulations: list[dict[str, Any]] = []
        self._profiles: dict[str, dict[str, Any]] = {}
        self._traits = list(traits or [])

    def save_simulation(self, user_id: str, record: dict[str, Any]) -> dict[str, Any]:
        if not user_id:
            raise SimulationStoreError("user_id is required to save a simulation")
        row = {
            **copy.deepcopy(record),
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "created_at": datetime.now(UTC).isoformat(),
        }
        with self._lock:
            self._simulations.append(row)
        logger.debug("Stored simulation %s for user %s", row["id"], user_id)
        return copy.deepcopy(row)

    def list_simulations(self, user_id: str) -> list[dict[str, Any]]:
        with self._lock:
            rows = [r for r in self._simulations if r["user_id"] == user_id]
        # Insertion order breaks ties between equal timestamps
        return [copy.deepcopy(r) for r in reversed(rows)]

    def get_simulation(self, simulation_id: str) -> dict[str, Any] | None:
        with self._lock:
            for row in self._simulations:
                if row["id"] == simulation_id:
                    return copy.deepcopy(row)
        return None

    def list_traits(self) -> list[dict[str, Any]]:
        return sorted((dict(t) for t in self._traits), key=lambda t: str(t.get("name", "")))

    def save_genetic_profile(self, user_id: str, profile: dict[str, Any]) -> dict[str, Any]:
        if not user_id:
            raise SimulationStoreError("user_id is required to save a genetic profile")
        row = {
            **copy.deepcopy(profile),
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "created_at": datetime.now(UTC).isoformat(),
        }
        with self._lock:
            self._profiles[user_id] = row
        return copy.deepcopy(row)

    def get_genetic_profile(self, user_id: str) -> dict[str, Any] | None:
        with self._lock:
            row = self._profiles.get(user_id)
        return copy.deepcopy(row) if row is not None else None
