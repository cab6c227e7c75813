"""FastAPI application serving the simulator's REST API.

Provides:
- GET /health
- /api/v1/traits: trait catalog, definitions, population frequencies
- /api/v1/simulations: run simulations, dashboard summary, saved runs
- /api/v1/profiles: genetic profile records
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from genomesim import __version__
from genomesim.api.profiles import router as profiles_router
from genomesim.api.simulations import close_service
from genomesim.api.simulations import router as simulations_router
from genomesim.api.traits import router as traits_router
from genomesim.logging_config import configure_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup; close the simulation store on shutdown."""
    configure_logging()
    logger.info("genomesim %s starting", __version__)
    yield
    logger.info("genomesim shutting down")
    close_service()


app = FastAPI(
    title="genomesim",
    description="Offspring trait-outcome simulator",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(traits_router)
app.include_router(simulations_router)
app.include_router(profiles_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok", "version": __version__}
