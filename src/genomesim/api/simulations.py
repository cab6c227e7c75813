"""API endpoints for running and browsing offspring simulations."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from genomesim.config import get_settings
from genomesim.engine.service import SimulationService
from genomesim.storage import SimulationStoreError, create_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/simulations", tags=["simulations"])

MAX_TRAITS = 20


class RunSimulationRequest(BaseModel):
    """Request body for running a simulation."""

    trait_keys: list[str] = Field(description="Trait keys to simulate, e.g. ['eye-color']")
    user_id: str | None = Field(
        default=None,
        description="Signed-in user. When set, the result is saved for the dashboard.",
    )
    seed: int | None = Field(default=None, description="Seed for a reproducible run")

    @field_validator("trait_keys")
    @classmethod
    def validate_trait_keys(cls, v: list[str]) -> list[str]:
        """Require at least one non-blank trait key."""
        keys = [k.strip() for k in v if k and k.strip()]
        if not keys:
            raise ValueError("Select at least one trait")
        if len(keys) > MAX_TRAITS:
            raise ValueError(f"At most {MAX_TRAITS} traits per simulation")
        return keys


class RunSimulationResponse(BaseModel):
    """A simulation result plus its save status."""

    result: dict[str, Any] = Field(description="The computed result set")
    saved: bool = Field(description="Whether the result was stored")
    record_id: str | None = Field(default=None, description="Stored row id")
    error: str | None = Field(default=None, description="Save error, if any")


class DashboardResponse(BaseModel):
    """Summary of a user's saved simulations."""

    user_id: str
    total_simulations: int
    average_accuracy: float | None = None
    recent: list[dict[str, Any]] = Field(default_factory=list)


_service: SimulationService | None = None


def get_service() -> SimulationService:
    """Get or create the process-wide SimulationService."""
    global _service
    if _service is None:
        settings = get_settings()
        _service = SimulationService(create_store(settings), seed=settings.simulation_seed)
    return _service


def set_service(service: SimulationService | None) -> None:
    """Replace the SimulationService (used by tests)."""
    global _service
    _service = service


def close_service() -> None:
    """Close the current service's store and forget the service."""
    global _service
    if _service is not None and _service.store is not None:
        _service.store.close()
    _service = None


@router.post(
    "",
    response_model=RunSimulationResponse,
    responses={
        200: {"description": "Simulation completed (check 'saved' for persistence)"},
        422: {"description": "Invalid trait selection"},
    },
)
async def run_simulation_endpoint(request: RunSimulationRequest) -> RunSimulationResponse:
    """Run a simulation, pausing for the configured processing delay first.

    A save failure does not fail the request: the result is returned with
    saved=False and the error message.
    """
    delay = get_settings().processing_delay
    if delay > 0:
        await asyncio.sleep(delay)

    service = get_service()
    run = service.run(request.trait_keys, user_id=request.user_id, seed=request.seed)
    return RunSimulationResponse(
        result=run.result.to_dict(),
        saved=run.saved,
        record_id=run.record_id,
        error=run.error,
    )


@router.get(
    "",
    response_model=DashboardResponse,
    responses={503: {"description": "Simulation store unavailable"}},
)
async def list_simulations(user_id: str = Query(min_length=1)) -> DashboardResponse:
    """Dashboard summary of a user's saved simulations."""
    try:
        summary = get_service().dashboard(user_id)
    except SimulationStoreError as e:
        logger.error("Error loading dashboard data for %s: %s", user_id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Error loading dashboard data",
        ) from e

    return DashboardResponse(
        user_id=user_id,
        total_simulations=summary.total_simulations,
        average_accuracy=summary.average_accuracy,
        recent=summary.recent,
    )


@router.get(
    "/{simulation_id}",
    responses={
        404: {"description": "Simulation not found"},
        503: {"description": "Simulation store unavailable"},
    },
)
async def get_simulation(simulation_id: str) -> dict[str, Any]:
    """Retrieve one saved simulation row."""
    try:
        row = get_service().get(simulation_id)
    except SimulationStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Simulation store unavailable",
        ) from e

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Simulation '{simulation_id}' not found",
        )
    return row
