"""Simulation service: runs simulations and talks to the persistence collaborator."""

from __future__ import annotations

import copy
import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from genomesim.engine.reference import BUILTIN_TRAITS
from genomesim.engine.simulation import run_simulation
from genomesim.model.results import SimulationResultSet
from genomesim.storage.store import SimulationStore, SimulationStoreError

logger = logging.getLogger(__name__)

SIMULATION_TYPE = "advanced_offspring"
RECENT_LIMIT = 5

# Placeholder profile written when a user asks for a genetic profile.
MOCK_GENETIC_PROFILE: dict[str, Any] = {
    "raw_data": {"totalSNPs": 650000, "coverage": "30x", "quality": "High"},
    "analyzed_traits": {
        "ancestry": {"european": 65, "eastAsian": 20, "african": 10, "other": 5},
        "physicalTraits": {
            "eyeColor": {"brown": 70, "blue": 25, "green": 5},
            "height": {"predicted": "5'9\"", "confidence": 85},
            "hairColor": {"brown": 80, "black": 15, "blonde": 5},
        },
    },
    "risk_scores": {
        "diabetes": {"risk": "Low", "percentage": 8.5},
        "heartDisease": {"risk": "Moderate", "percentage": 15.2},
        "alzheimers": {"risk": "Low", "percentage": 6.8},
    },
    "processing_status": "completed",
}


class TraitOption(BaseModel):
    """A selectable trait as shown in the trait picker."""

    id: str = Field(description="Trait key")
    name: str = Field(description="Display name")
    icon: str = Field(default="", description="Display icon")


DEFAULT_TRAIT_OPTIONS: tuple[TraitOption, ...] = tuple(
    TraitOption(id=t.key, name=t.name, icon=t.icon) for t in BUILTIN_TRAITS
)


def load_trait_catalog(store: SimulationStore | None) -> list[TraitOption]:
    """Return the trait catalog, preferring the backend's reference rows.

    Any backend failure, empty answer or malformed row falls back to the
    built-in six traits.
    """
    if store is None:
        return list(DEFAULT_TRAIT_OPTIONS)
    try:
        rows = store.list_traits()
    except SimulationStoreError as e:
        logger.warning("Error loading traits, using built-in catalog: %s", e)
        return list(DEFAULT_TRAIT_OPTIONS)

    try:
        options = [TraitOption.model_validate(row) for row in rows]
    except ValueError as e:
        logger.warning("Malformed trait rows, using built-in catalog: %s", e)
        return list(DEFAULT_TRAIT_OPTIONS)
    return options or list(DEFAULT_TRAIT_OPTIONS)


def build_simulation_record(
    result: SimulationResultSet, now: datetime | None = None
) -> dict[str, Any]:
    """Shape a result set into the row the backend stores."""
    day = (now or result.created_at).strftime("%m/%d/%Y")
    return {
        "simulation_name": f"Advanced Simulation {day}",
        "selected_traits": list(result.trait_keys),
        "parent1_data": result.parent1.to_dict(),
        "parent2_data": result.parent2.to_dict(),
        "results": result.to_dict(),
        "accuracy_score": result.overall_accuracy,
        "simulation_type": SIMULATION_TYPE,
    }


@dataclass
class SimulationRun:
    """A computed result set plus what happened when saving it.

    The result is valid whether or not the save succeeded.
    """

    result: SimulationResultSet
    saved: bool = False
    record_id: str | None = None
    error: str | None = None


@dataclass
class DashboardSummary:
    """Aggregate view of a user's saved simulations."""

    total_simulations: int = 0
    average_accuracy: float | None = None
    recent: list[dict[str, Any]] = field(default_factory=list)


def summarize_simulations(rows: Sequence[dict[str, Any]]) -> DashboardSummary:
    """Count, average accuracy and the most recent rows (rows arrive newest first)."""
    if not rows:
        return DashboardSummary()
    scores = []
    for row in rows:
        try:
            scores.append(float(row.get("accuracy_score") or 0))
        except (TypeError, ValueError):
            scores.append(0.0)
    return DashboardSummary(
        total_simulations=len(rows),
        average_accuracy=round(sum(scores) / len(scores), 1),
        recent=list(rows[:RECENT_LIMIT]),
    )


class SimulationService:
    """Runs simulations and records them for signed-in users.

    Example:
        >>> service = SimulationService(InMemorySimulationStore(), seed=42)
        >>> run = service.run(["eye-color", "height"], user_id="user-1")
        >>> run.saved
        True
    """

    def __init__(self, store: SimulationStore | None = None, seed: int | None = None) -> None:
        self.store = store
        self.seed = seed

    def _rng(self, seed: int | None) -> random.Random:
        if seed is None:
            seed = self.seed
        return random.Random(seed)

    def run(
        self,
        trait_keys: Sequence[str],
        user_id: str | None = None,
        seed: int | None = None,
    ) -> SimulationRun:
        """Run one simulation and save it when a user id is given.

        A failed save is logged and reported on the returned SimulationRun;
        it never discards the computed result.
        """
        result = run_simulation(trait_keys, rng=self._rng(seed))
        run = SimulationRun(result=result)
        logger.info(
            "Simulation completed",
            extra={
                "simulation_id": result.simulation_id,
                "offspring": len(result.offspring),
                "traits": len(result.trait_keys),
            },
        )

        if not user_id:
            return run
        if self.store is None:
            run.error = "No simulation store configured"
            return run

        try:
            row = self.store.save_simulation(user_id, build_simulation_record(result))
        except SimulationStoreError as e:
            logger.error("Error saving simulation %s: %s", result.simulation_id, e)
            run.error = f"Simulation completed but could not be saved: {e}"
            return run

        run.saved = True
        run.record_id = row.get("id")
        return run

    def dashboard(self, user_id: str) -> DashboardSummary:
        """Summarize a user's saved simulations.

        Raises:
            SimulationStoreError: If no store is configured or the listing fails.
        """
        if self.store is None:
            raise SimulationStoreError("No simulation store configured")
        return summarize_simulations(self.store.list_simulations(user_id))

    def get(self, simulation_id: str) -> dict[str, Any] | None:
        if self.store is None:
            raise SimulationStoreError("No simulation store configured")
        return self.store.get_simulation(simulation_id)

    def trait_catalog(self) -> list[TraitOption]:
        return load_trait_catalog(self.store)

    def generate_genetic_profile(self, user_id: str) -> dict[str, Any]:
        """Write the placeholder genetic profile for a user and return the stored row.

        Raises:
            SimulationStoreError: If no store is configured or the save fails.
        """
        if self.store is None:
            raise SimulationStoreError("No simulation store configured")
        row = self.store.save_genetic_profile(user_id, copy.deepcopy(MOCK_GENETIC_PROFILE))
        logger.info("Genetic profile generated", extra={"user_id": user_id})
        return row

    def genetic_profile(self, user_id: str) -> dict[str, Any] | None:
        if self.store is None:
            raise SimulationStoreError("No simulation store configured")
        return self.store.get_genetic_profile(user_id)
