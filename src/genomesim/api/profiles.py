"""API endpoints for a user's genetic profile record."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status

from genomesim.api.simulations import get_service
from genomesim.storage import SimulationStoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])


@router.post(
    "/{user_id}/genetic",
    status_code=status.HTTP_201_CREATED,
    responses={503: {"description": "Simulation store unavailable"}},
)
async def generate_genetic_profile(user_id: str) -> dict[str, Any]:
    """Generate and store the placeholder genetic profile for a user."""
    try:
        return get_service().generate_genetic_profile(user_id)
    except SimulationStoreError as e:
        logger.error("Error generating genetic profile for %s: %s", user_id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Error generating genetic profile",
        ) from e


@router.get(
    "/{user_id}/genetic",
    responses={
        404: {"description": "No genetic profile yet"},
        503: {"description": "Simulation store unavailable"},
    },
)
async def get_genetic_profile(user_id: str) -> dict[str, Any]:
    """Retrieve a user's genetic profile record."""
    try:
        profile = get_service().genetic_profile(user_id)
    except SimulationStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Simulation store unavailable",
        ) from e
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No genetic profile for user '{user_id}'",
        )
    return profile
