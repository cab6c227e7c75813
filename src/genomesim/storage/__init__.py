"""Persistence collaborators: store interface, in-memory and REST backends."""

from genomesim.storage.rest import RestSimulationStore, create_store
from genomesim.storage.store import (
    InMemorySimulationStore,
    SimulationStore,
    SimulationStoreError,
)

__all__ = [
    "InMemorySimulationStore",
    "RestSimulationStore",
    "SimulationStore",
    "SimulationStoreError",
    "create_store",
]
