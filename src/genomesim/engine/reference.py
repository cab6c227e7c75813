"""Trait reference table: built-in trait definitions and population data."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from genomesim.model.traits import (
    Allele,
    CategoricalTrait,
    Condition,
    ConditionTrait,
    ContinuousTrait,
    Facet,
    FacetTrait,
    ProbabilityBand,
    TraitDefinition,
)

EYE_COLOR = CategoricalTrait(
    key="eye-color",
    name="Eye Color",
    icon="👁️",
    alleles={
        "brown": Allele(dominance=0.8, frequency=0.79),
        "blue": Allele(dominance=0.1, frequency=0.17),
        "green": Allele(dominance=0.05, frequency=0.02),
        "hazel": Allele(dominance=0.05, frequency=0.02),
    },
    markers=("HERC2", "OCA2", "TYR", "TYRP1"),
    band=ProbabilityBand(low=70.0, high=95.0, jitter=20.0),
    inheritance_note="Polygenic with major genes",
)

HEIGHT = ContinuousTrait(
    key="height",
    name="Height",
    icon="📏",
    attribute="height",
    heritability=0.8,
    environmental_factor=0.2,
    reference_means=(175.3, 161.5),  # male, female (cm)
    noise_amplitude=20.0,
    regression_weight=0.1,
    markers=tuple(f"HEIGHT_{i}" for i in range(1, 181)),
    marker_display_count=10,
    display="feet_inches",
    band=ProbabilityBand(low=60.0, high=95.0, jitter=10.0),
    base_probability=85.0,
)

HAIR_COLOR = CategoricalTrait(
    key="hair-color",
    name="Hair Color",
    icon="💇",
    alleles={
        "black": Allele(dominance=0.9, frequency=0.68),
        "brown": Allele(dominance=0.7, frequency=0.20),
        "blonde": Allele(dominance=0.1, frequency=0.08),
        "red": Allele(dominance=0.05, frequency=0.04),
    },
    markers=("MC1R", "ASIP", "TYR", "TYRP1"),
    band=ProbabilityBand(low=75.0, high=92.0, jitter=15.0),
)

INTELLIGENCE = ContinuousTrait(
    key="intelligence",
    name="Intelligence",
    icon="🧠",
    attribute="iq",
    heritability=0.5,
    environmental_factor=0.5,
    reference_means=(100.0,),
    noise_amplitude=15.0,  # standard deviation
    environment_key="education",
    markers=tuple(f"IQ_{i}" for i in range(1, 1001)),
    marker_display_count=20,
    band=ProbabilityBand(low=65.0, high=90.0, jitter=10.0),
    base_probability=80.0,
)

DISEASE_RISK = ConditionTrait(
    key="disease-risk",
    name="Disease Risk",
    icon="🏥",
    conditions={
        "diabetes": Condition(heritability=0.26, base_risk=0.11),
        "heartDisease": Condition(heritability=0.40, base_risk=0.06),
        "alzheimers": Condition(heritability=0.58, base_risk=0.12),
        "cancer": Condition(heritability=0.33, base_risk=0.38),
    },
    band=ProbabilityBand(low=70.0, high=88.0),
)

ATHLETIC = FacetTrait(
    key="athletic",
    name="Athletic Ability",
    icon="🏃",
    facets={
        "endurance": Facet(heritability=0.66, markers=("ACE", "ACTN3", "EPOR")),
        "power": Facet(heritability=0.62, markers=("ACTN3", "MSTN", "IGF1")),
        "flexibility": Facet(heritability=0.56, markers=("COL5A1", "TNC")),
    },
    floor=0.3,
    band=ProbabilityBand(low=60.0, high=85.0),
)

BUILTIN_TRAITS: tuple[TraitDefinition, ...] = (
    EYE_COLOR,
    HEIGHT,
    HAIR_COLOR,
    INTELLIGENCE,
    DISEASE_RISK,
    ATHLETIC,
)

# Share of each eye-color category within a population group.
POPULATION_DATA: dict[str, dict[str, float]] = {
    "european": {"brown": 0.20, "blue": 0.50, "green": 0.15, "hazel": 0.15},
    "eastAsian": {"brown": 0.95, "blue": 0.01, "green": 0.01, "hazel": 0.03},
    "african": {"brown": 0.90, "blue": 0.01, "green": 0.01, "hazel": 0.08},
    "southAsian": {"brown": 0.85, "blue": 0.02, "green": 0.03, "hazel": 0.10},
    "hispanic": {"brown": 0.75, "blue": 0.10, "green": 0.05, "hazel": 0.10},
    "middleEastern": {"brown": 0.80, "blue": 0.05, "green": 0.10, "hazel": 0.05},
}

# Global share of each population group.
POPULATION_FREQUENCIES: dict[str, float] = {
    "european": 0.16,
    "eastAsian": 0.24,
    "african": 0.16,
    "southAsian": 0.20,
    "hispanic": 0.18,
    "middleEastern": 0.06,
}


class TraitReferenceTable:
    """Read-only lookup of trait definitions by trait key.

    Example:
        >>> table = TraitReferenceTable()
        >>> table.lookup("height").heritability
        0.8
        >>> table.lookup("tail-length") is None
        True
    """

    def __init__(self, traits: Iterable[TraitDefinition] = BUILTIN_TRAITS) -> None:
        self._traits: dict[str, TraitDefinition] = {}
        for trait in traits:
            if trait.key in self._traits:
                raise ValueError(f"Duplicate trait key: {trait.key}")
            self._traits[trait.key] = trait

    def lookup(self, trait_key: str) -> TraitDefinition | None:
        """Return the definition for trait_key, or None if it is not known."""
        return self._traits.get(trait_key)

    def __contains__(self, trait_key: object) -> bool:
        return trait_key in self._traits

    def __iter__(self) -> Iterator[TraitDefinition]:
        return iter(self._traits.values())

    def __len__(self) -> int:
        return len(self._traits)

    @property
    def keys(self) -> list[str]:
        return list(self._traits)


DEFAULT_TABLE = TraitReferenceTable()


def lookup(trait_key: str) -> TraitDefinition | None:
    """Look up a built-in trait definition."""
    return DEFAULT_TABLE.lookup(trait_key)


def allele_frequencies(
    trait_key: str,
    population: str = "european",
    table: TraitReferenceTable | None = None,
    population_data: Mapping[str, Mapping[str, float]] = POPULATION_DATA,
) -> dict[str, float] | None:
    """Scale a categorical trait's frequencies by a population's category shares.

    Categories the population has no share for keep their base frequency.

    Returns:
        Mapping of category to scaled frequency, or None if the trait is
        unknown or not categorical, or the population is unknown.
    """
    trait = (table or DEFAULT_TABLE).lookup(trait_key)
    shares = population_data.get(population)
    if not isinstance(trait, CategoricalTrait) or shares is None:
        return None
    return {
        category: allele.frequency * shares.get(category, 1.0)
        for category, allele in trait.alleles.items()
    }
