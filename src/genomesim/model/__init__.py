"""Domain model: trait definitions, parent descriptors, simulation results."""

from genomesim.model.parents import ParentDescriptor, coerce_number
from genomesim.model.results import (
    GenomicMeta,
    OffspringRecord,
    OutcomeResult,
    SimulationResultSet,
    unknown_outcome,
)
from genomesim.model.traits import (
    Allele,
    CategoricalTrait,
    Condition,
    ConditionTrait,
    ContinuousTrait,
    Facet,
    FacetTrait,
    InheritancePattern,
    ProbabilityBand,
    TraitDefinition,
    TraitKind,
)

__all__ = [
    "Allele",
    "CategoricalTrait",
    "Condition",
    "ConditionTrait",
    "ContinuousTrait",
    "Facet",
    "FacetTrait",
    "GenomicMeta",
    "InheritancePattern",
    "OffspringRecord",
    "OutcomeResult",
    "ParentDescriptor",
    "ProbabilityBand",
    "SimulationResultSet",
    "TraitDefinition",
    "TraitKind",
    "coerce_number",
    "unknown_outcome",
]
