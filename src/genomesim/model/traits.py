"""Trait definitions: the static parameters the outcome sampler draws from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class InheritancePattern(StrEnum):
    """Inheritance pattern tags attached to trait definitions (display only)."""

    DOMINANT_RECESSIVE = "dominant_recessive"
    CODOMINANT = "codominant"
    INCOMPLETE_DOMINANCE = "incomplete_dominance"
    POLYGENIC = "polygenic"
    X_LINKED = "x_linked"


class TraitKind(StrEnum):
    """Sampling strategy a trait definition is dispatched to."""

    CATEGORICAL = "categorical"
    CONTINUOUS = "continuous"
    CONDITION = "condition"
    FACET = "facet"


@dataclass(frozen=True)
class Allele:
    """One named outcome category of a categorical trait."""

    dominance: float
    frequency: float


@dataclass(frozen=True)
class ProbabilityBand:
    """Clamp bounds for a reported probability, plus the jitter added before clamping."""

    low: float
    high: float
    jitter: float = 0.0

    def clamp(self, value: float) -> float:
        return min(self.high, max(self.low, value))


@dataclass(frozen=True)
class TraitDefinition:
    """Base fields shared by every trait definition."""

    key: str
    name: str
    icon: str = ""
    inheritance: InheritancePattern = InheritancePattern.POLYGENIC
    markers: tuple[str, ...] = ()

    @property
    def kind(self) -> TraitKind:
        raise NotImplementedError


@dataclass(frozen=True)
class CategoricalTrait(TraitDefinition):
    """Trait drawn from named categories weighted by dominance.

    Frequencies are relative weights and need not sum to 1.
    """

    alleles: dict[str, Allele] = field(default_factory=dict)
    band: ProbabilityBand = ProbabilityBand(70.0, 95.0, 20.0)
    inheritance_note: str = ""

    @property
    def kind(self) -> TraitKind:
        return TraitKind.CATEGORICAL


@dataclass(frozen=True)
class ContinuousTrait(TraitDefinition):
    """Trait predicted by a linear model over the parental average.

    Attributes:
        attribute: ParentDescriptor field averaged across both parents.
        heritability: Weight applied to the parental average.
        environmental_factor: Scales the noise term and environment modifier.
        reference_means: Population means; their average feeds the
            regression-to-mean term.
        noise_amplitude: Width of the uniform noise before scaling.
        regression_weight: Fraction of the population mean added back.
        environment_key: Environment modifier consumed by this trait, if any.
        marker_display_count: How many markers are reported with an outcome.
        display: "feet_inches" renders a height, "band" a qualitative band.
    """

    attribute: str = ""
    heritability: float = 0.0
    environmental_factor: float = 0.0
    reference_means: tuple[float, ...] = ()
    noise_amplitude: float = 0.0
    regression_weight: float = 0.0
    environment_key: str | None = None
    marker_display_count: int = 10
    display: str = "band"
    band: ProbabilityBand = ProbabilityBand(60.0, 95.0, 10.0)
    base_probability: float = 85.0

    @property
    def kind(self) -> TraitKind:
        return TraitKind.CONTINUOUS

    @property
    def population_mean(self) -> float:
        if not self.reference_means:
            return 0.0
        return sum(self.reference_means) / len(self.reference_means)


@dataclass(frozen=True)
class Condition:
    """A disease condition with its heritability and population base risk."""

    heritability: float
    base_risk: float


@dataclass(frozen=True)
class ConditionTrait(TraitDefinition):
    """Risk trait: one condition picked uniformly, scored and bucketed."""

    conditions: dict[str, Condition] = field(default_factory=dict)
    band: ProbabilityBand = ProbabilityBand(70.0, 88.0)

    @property
    def kind(self) -> TraitKind:
        return TraitKind.CONDITION


@dataclass(frozen=True)
class Facet:
    """One facet of a composite trait, with its own marker list."""

    heritability: float
    markers: tuple[str, ...] = ()


@dataclass(frozen=True)
class FacetTrait(TraitDefinition):
    """Potential trait: one facet picked uniformly, scored and bucketed."""

    facets: dict[str, Facet] = field(default_factory=dict)
    floor: float = 0.3
    band: ProbabilityBand = ProbabilityBand(60.0, 85.0)

    @property
    def kind(self) -> TraitKind:
        return TraitKind.FACET
