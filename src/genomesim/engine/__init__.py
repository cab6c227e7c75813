"""Trait reference table, outcome sampler, simulation orchestrator and service."""

from genomesim.engine.reference import (
    BUILTIN_TRAITS,
    POPULATION_DATA,
    TraitReferenceTable,
    allele_frequencies,
    lookup,
)
from genomesim.engine.sampler import (
    OutcomeSampler,
    format_height,
    intelligence_band,
    potential_tier,
    risk_tier,
    sample,
    weighted_choice,
)
from genomesim.engine.service import (
    DashboardSummary,
    SimulationRun,
    SimulationService,
    TraitOption,
    build_simulation_record,
    load_trait_catalog,
    summarize_simulations,
)
from genomesim.engine.simulation import (
    compute_overall_accuracy,
    draw_offspring_count,
    generate_parental_genomes,
    run_simulation,
)

__all__ = [
    "BUILTIN_TRAITS",
    "POPULATION_DATA",
    "DashboardSummary",
    "OutcomeSampler",
    "SimulationRun",
    "SimulationService",
    "TraitOption",
    "TraitReferenceTable",
    "allele_frequencies",
    "build_simulation_record",
    "compute_overall_accuracy",
    "draw_offspring_count",
    "format_height",
    "generate_parental_genomes",
    "intelligence_band",
    "load_trait_catalog",
    "lookup",
    "potential_tier",
    "risk_tier",
    "run_simulation",
    "sample",
    "summarize_simulations",
    "weighted_choice",
]
