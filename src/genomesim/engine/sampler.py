"""Outcome sampler: one trait outcome per (trait, parent pair).

Each trait kind maps to a sampling strategy. All randomness comes from the
injected random.Random so a seeded sampler is fully reproducible. The
reported probabilities are cosmetic jitter clamped into fixed bands; they
carry no statistical meaning.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from genomesim.engine.reference import DEFAULT_TABLE, TraitReferenceTable
from genomesim.model.parents import ParentDescriptor, coerce_number
from genomesim.model.results import OutcomeResult, unknown_outcome
from genomesim.model.traits import (
    CategoricalTrait,
    ConditionTrait,
    ContinuousTrait,
    FacetTrait,
    TraitDefinition,
    TraitKind,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ParentLike = ParentDescriptor | Mapping[str, Any] | None

CM_PER_INCH = 2.54


def weighted_choice(items: Sequence[T], weights: Sequence[float], rng: random.Random) -> T:
    """Pick one item by a cumulative-weight walk.

    Draws r uniformly in [0, total) and subtracts each weight in turn until
    the remainder is <= 0. Falls back to the last item when rounding leaves
    a positive remainder.

    Args:
        items: Candidates, in order.
        weights: Non-negative relative weights, one per item.
        rng: Random source.

    Returns:
        The selected item.

    Raises:
        ValueError: If items is empty or the lengths differ.
    """
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    if len(items) != len(weights):
        raise ValueError("items and weights must have the same length")

    total = sum(weights)
    remainder = rng.random() * total
    for item, weight in zip(items, weights, strict=True):
        remainder -= weight
        if remainder <= 0:
            return item
    return items[-1]


def uniform_pick(items: Sequence[T], rng: random.Random) -> T:
    """Pick one item uniformly as items[floor(U * n)]."""
    if not items:
        raise ValueError("Cannot pick from an empty sequence")
    index = min(int(rng.random() * len(items)), len(items) - 1)
    return items[index]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_height(cm: float) -> str:
    """Render a height in centimetres as feet and inches, e.g. 180 -> 5'11"."""
    total_inches = round_half_up(cm / CM_PER_INCH)
    feet = total_inches // 12
    inches = total_inches % 12
    return f"{feet}'{inches}\""


def intelligence_band(score: float) -> str:
    if score > 115:
        return "High"
    if score > 100:
        return "Above Average"
    if score > 85:
        return "Average"
    return "Below Average"


def risk_tier(risk: float) -> str:
    if risk < 0.1:
        return "Low Risk"
    if risk < 0.25:
        return "Moderate Risk"
    return "Higher Risk"


def potential_tier(potential: float) -> str:
    if potential > 0.7:
        return "High Potential"
    if potential > 0.5:
        return "Medium Potential"
    return "Low Potential"


def _as_parent(parent: ParentLike) -> ParentDescriptor:
    if isinstance(parent, ParentDescriptor):
        return parent
    if isinstance(parent, Mapping):
        return ParentDescriptor.from_mapping(parent)
    return ParentDescriptor()


def parental_average(parent1: ParentLike, parent2: ParentLike, attribute: str) -> float:
    """Average of a numeric attribute over both parents, missing values as 0."""
    return _as_parent(parent1).numeric(attribute) / 2 + _as_parent(parent2).numeric(attribute) / 2


class OutcomeSampler:
    """Produces OutcomeResults for trait keys using a strategy per trait kind.

    Stateless apart from its random source: concurrent runs should each use
    their own sampler (or at least their own rng).

    Example:
        >>> sampler = OutcomeSampler(rng=random.Random(7))
        >>> outcome = sampler.sample("eye-color", {"height": 180}, {"height": 165})
        >>> outcome.value in {"Brown", "Blue", "Green", "Hazel"}
        True
    """

    def __init__(
        self,
        table: TraitReferenceTable | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.table = table or DEFAULT_TABLE
        self.rng = rng or random.Random()
        self._strategies: dict[TraitKind, Callable[..., OutcomeResult]] = {
            TraitKind.CATEGORICAL: self._sample_categorical,
            TraitKind.CONTINUOUS: self._sample_continuous,
            TraitKind.CONDITION: self._sample_condition,
            TraitKind.FACET: self._sample_facet,
        }

    def sample(
        self,
        trait_key: str,
        parent1: ParentLike,
        parent2: ParentLike,
        environment: Mapping[str, Any] | None = None,
    ) -> OutcomeResult:
        """Sample one outcome for trait_key.

        Unknown trait keys yield the fixed "Unknown"/50 outcome.

        Args:
            trait_key: Trait identifier, e.g. "eye-color".
            parent1: First parent (descriptor or loose mapping).
            parent2: Second parent (descriptor or loose mapping).
            environment: Optional environment modifiers, e.g. {"education": 0.7}.

        Returns:
            OutcomeResult with value, probability in [0, 100], and markers.
        """
        trait = self.table.lookup(trait_key)
        if trait is None:
            logger.debug("Unknown trait key %r, using fallback outcome", trait_key)
            return unknown_outcome()

        if not isinstance(environment, Mapping):
            environment = {}
        strategy = self._strategies[trait.kind]
        return strategy(trait, parent1, parent2, environment)

    def _sample_categorical(
        self,
        trait: CategoricalTrait,
        parent1: ParentLike,
        parent2: ParentLike,
        environment: Mapping[str, Any],
    ) -> OutcomeResult:
        categories = list(trait.alleles)
        weights = [trait.alleles[c].dominance for c in categories]
        selected = weighted_choice(categories, weights, self.rng)

        frequency = trait.alleles[selected].frequency
        probability = trait.band.clamp(frequency * 100 + self.rng.random() * trait.band.jitter)

        extra: dict[str, Any] = {"genetic_basis": list(trait.markers)}
        if trait.inheritance_note:
            extra["inheritance"] = trait.inheritance_note
        return OutcomeResult(
            value=selected.capitalize(),
            probability=probability,
            markers=trait.markers,
            extra=extra,
        )

    def _sample_continuous(
        self,
        trait: ContinuousTrait,
        parent1: ParentLike,
        parent2: ParentLike,
        environment: Mapping[str, Any],
    ) -> OutcomeResult:
        genetic_component = parental_average(parent1, parent2, trait.attribute) * trait.heritability
        noise = (self.rng.random() - 0.5) * trait.noise_amplitude * trait.environmental_factor
        regression = trait.population_mean * trait.regression_weight
        modifier = 0.0
        if trait.environment_key:
            level = coerce_number(environment.get(trait.environment_key))
            modifier = level * trait.environmental_factor

        predicted = genetic_component + noise + regression + modifier
        if not math.isfinite(predicted):
            predicted = 0.0
        spread = self.rng.random() * trait.band.jitter
        probability = trait.band.clamp(trait.base_probability + spread)
        shown_markers = trait.markers[: trait.marker_display_count]

        if trait.display == "feet_inches":
            return OutcomeResult(
                value=format_height(predicted),
                probability=probability,
                markers=shown_markers,
                extra={
                    "genetic_factors": list(shown_markers),
                    "heritability": trait.heritability,
                    "predicted_cm": predicted,
                },
            )
        return OutcomeResult(
            value=intelligence_band(predicted),
            probability=probability,
            markers=shown_markers,
            extra={
                "iq_score": round_half_up(predicted),
                "genetic_factors": list(shown_markers),
            },
        )

    def _sample_condition(
        self,
        trait: ConditionTrait,
        parent1: ParentLike,
        parent2: ParentLike,
        environment: Mapping[str, Any],
    ) -> OutcomeResult:
        name = uniform_pick(list(trait.conditions), self.rng)
        condition = trait.conditions[name]

        risk = condition.base_risk * (1 + condition.heritability)
        return OutcomeResult(
            value=risk_tier(risk),
            probability=trait.band.clamp((1 - risk) * 100),
            markers=trait.markers,
            extra={"condition": name, "risk_percentage": f"{risk * 100:.1f}"},
        )

    def _sample_facet(
        self,
        trait: FacetTrait,
        parent1: ParentLike,
        parent2: ParentLike,
        environment: Mapping[str, Any],
    ) -> OutcomeResult:
        name = uniform_pick(list(trait.facets), self.rng)
        facet = trait.facets[name]

        potential = self.rng.random() * facet.heritability + trait.floor
        return OutcomeResult(
            value=potential_tier(potential),
            probability=trait.band.clamp(potential * 100),
            markers=facet.markers,
            extra={"primary_trait": name, "genetic_markers": list(facet.markers)},
        )


def sample(
    trait_key: str,
    parent1: ParentLike,
    parent2: ParentLike,
    environment: Mapping[str, Any] | None = None,
    rng: random.Random | None = None,
) -> OutcomeResult:
    """Sample one outcome from the built-in table.

    Convenience wrapper that builds a throwaway OutcomeSampler.
    """
    return OutcomeSampler(rng=rng).sample(trait_key, parent1, parent2, environment)


def describe(trait: TraitDefinition) -> dict[str, Any]:
    """Summarize a trait definition for display."""
    summary: dict[str, Any] = {
        "id": trait.key,
        "name": trait.name,
        "icon": trait.icon,
        "kind": trait.kind.value,
        "inheritance_pattern": trait.inheritance.value,
    }
    if isinstance(trait, CategoricalTrait):
        summary["outcomes"] = [c.capitalize() for c in trait.alleles]
    elif isinstance(trait, ContinuousTrait):
        summary["heritability"] = trait.heritability
    elif isinstance(trait, ConditionTrait):
        summary["conditions"] = list(trait.conditions)
    elif isinstance(trait, FacetTrait):
        summary["facets"] = list(trait.facets)
    return summary
