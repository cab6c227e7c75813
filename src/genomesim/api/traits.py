"""API endpoints for trait reference data."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from genomesim.api.simulations import get_service
from genomesim.engine.reference import POPULATION_DATA, allele_frequencies, lookup
from genomesim.engine.sampler import describe
from genomesim.engine.service import TraitOption

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/traits", tags=["traits"])


@router.get("", response_model=list[TraitOption])
async def list_traits() -> list[TraitOption]:
    """Selectable traits: backend reference rows, or the built-in six."""
    return get_service().trait_catalog()


@router.get(
    "/{trait_key}",
    responses={404: {"description": "Trait not found"}},
)
async def get_trait(trait_key: str) -> dict[str, Any]:
    """Describe one built-in trait definition."""
    trait = lookup(trait_key)
    if trait is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trait '{trait_key}' not found",
        )
    return describe(trait)


@router.get(
    "/{trait_key}/frequencies",
    responses={404: {"description": "Unknown trait or population, or trait is not categorical"}},
)
async def get_frequencies(
    trait_key: str,
    population: str = Query(default="european"),
) -> dict[str, Any]:
    """Category frequencies of a categorical trait scaled for a population."""
    frequencies = allele_frequencies(trait_key, population)
    if frequencies is None:
        logger.info("No frequencies for trait=%s population=%s", trait_key, population)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=(
                f"No frequencies for trait '{trait_key}' in population '{population}'. "
                f"Known populations: {', '.join(POPULATION_DATA)}"
            ),
        )
    return {"trait": trait_key, "population": population, "frequencies": frequencies}
