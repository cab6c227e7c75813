"""Result records produced by a simulation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from genomesim.model.parents import ParentDescriptor

DEFAULT_ALGORITHMS = ("Deep Neural Networks", "Bayesian Inference", "Polygenic Risk Scores")
DEFAULT_GENOME_DATABASES = ("1000 Genomes", "gnomAD", "UK Biobank")


@dataclass(frozen=True)
class OutcomeResult:
    """One sampled outcome for a single (offspring, trait) pair."""

    value: str
    probability: float
    markers: tuple[str, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "value": self.value,
            "probability": self.probability,
            "markers": list(self.markers),
        }
        data.update(self.extra)
        return data


def unknown_outcome() -> OutcomeResult:
    """Fallback outcome for a trait key with no definition."""
    return OutcomeResult(value="Unknown", probability=50.0)


@dataclass(frozen=True)
class GenomicMeta:
    """Cosmetic sequencing metadata attached to each offspring."""

    chromosomes: int = 46
    snp_analyzed: int = 0
    coverage_depth: str = "30x"


@dataclass
class OffspringRecord:
    """One simulated child: an outcome per requested trait."""

    id: int
    traits: dict[str, OutcomeResult] = field(default_factory=dict)
    genomic_meta: GenomicMeta = field(default_factory=GenomicMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "traits": {key: outcome.to_dict() for key, outcome in self.traits.items()},
            "genomic_data": {
                "chromosomes": self.genomic_meta.chromosomes,
                "snp_analyzed": self.genomic_meta.snp_analyzed,
                "coverage_depth": self.genomic_meta.coverage_depth,
            },
        }


@dataclass
class SimulationResultSet:
    """Everything one simulation run produced.

    Owned by the caller; handed whole to the persistence collaborator.
    """

    simulation_id: str
    offspring: list[OffspringRecord]
    trait_keys: list[str]
    overall_accuracy: float
    parent1: ParentDescriptor = field(default_factory=ParentDescriptor)
    parent2: ParentDescriptor = field(default_factory=ParentDescriptor)
    algorithms: list[str] = field(default_factory=lambda: list(DEFAULT_ALGORITHMS))
    genome_databases: list[str] = field(default_factory=lambda: list(DEFAULT_GENOME_DATABASES))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def accuracy_display(self) -> str:
        return f"{self.overall_accuracy:.1f}"

    @property
    def total_snps(self) -> int:
        return sum(child.genomic_meta.snp_analyzed for child in self.offspring)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible record."""
        return {
            "simulation_id": self.simulation_id,
            "accuracy": self.accuracy_display,
            "overall_accuracy": self.overall_accuracy,
            "offspring": [child.to_dict() for child in self.offspring],
            "selected_traits": list(self.trait_keys),
            "algorithms": list(self.algorithms),
            "genome_databases": list(self.genome_databases),
            "total_snps": self.total_snps,
            "created_at": self.created_at.isoformat(),
        }
