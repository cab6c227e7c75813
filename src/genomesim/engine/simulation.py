"""Simulation orchestrator: offspring generation over the outcome sampler."""

from __future__ import annotations

import logging
import math
import random
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from genomesim.engine.sampler import OutcomeSampler
from genomesim.model.parents import ParentDescriptor
from genomesim.model.results import GenomicMeta, OffspringRecord, SimulationResultSet

logger = logging.getLogger(__name__)

ParentPairGenerator = Callable[[random.Random], tuple[ParentDescriptor, ParentDescriptor]]

DEFAULT_OFFSPRING_RANGE = (2, 4)
DEFAULT_ENVIRONMENT: dict[str, float] = {"education": 0.7, "nutrition": 0.8, "healthcare": 0.9}

BASE_ACCURACY = 96.5
ACCURACY_PER_TRAIT = 0.3
ACCURACY_JITTER = 1.5
MAX_ACCURACY = 99.1

BASE_SNP_COUNT = 2_000_000
SNP_JITTER = 1_000_000


def generate_parental_genomes(rng: random.Random) -> tuple[ParentDescriptor, ParentDescriptor]:
    """Generate the mock parent pair used when the caller supplies none."""
    parent1 = ParentDescriptor(
        height=170 + rng.random() * 20,
        iq=90 + rng.random() * 30,
        eye_color="brown",
        population="european",
    )
    parent2 = ParentDescriptor(
        height=165 + rng.random() * 15,
        iq=95 + rng.random() * 25,
        eye_color="blue",
        population="european",
    )
    return parent1, parent2


def draw_offspring_count(
    rng: random.Random, count_range: Sequence[int] = DEFAULT_OFFSPRING_RANGE
) -> int:
    """Draw an offspring count uniformly from an inclusive integer range."""
    low, high = int(count_range[0]), int(count_range[1])
    if high < low:
        raise ValueError(f"Invalid offspring count range: {low}..{high}")
    return math.floor(rng.random() * (high - low + 1)) + low


def compute_overall_accuracy(trait_count: int, rng: random.Random) -> float:
    """Cosmetic overall accuracy: 96.5 + 0.3 per trait + jitter, capped at 99.1."""
    accuracy = BASE_ACCURACY + ACCURACY_PER_TRAIT * max(trait_count, 0)
    return min(MAX_ACCURACY, accuracy + rng.random() * ACCURACY_JITTER)


def run_simulation(
    trait_keys: Sequence[str],
    parent_pair_generator: ParentPairGenerator | None = None,
    offspring_count_range: Sequence[int] = DEFAULT_OFFSPRING_RANGE,
    rng: random.Random | None = None,
    environment: Mapping[str, Any] | None = None,
    sampler: OutcomeSampler | None = None,
    clock: Callable[[], datetime] | None = None,
) -> SimulationResultSet:
    """Simulate a set of offspring for the requested traits.

    Draw order from the random source is fixed (parents, offspring count,
    then per offspring each trait in order followed by its SNP count, then
    accuracy and id), so a seeded rng reproduces the run exactly.

    Args:
        trait_keys: Trait identifiers to sample for every offspring.
        parent_pair_generator: Callable(rng) -> (parent1, parent2). Defaults
            to generate_parental_genomes.
        offspring_count_range: Inclusive (low, high) offspring count bounds.
        rng: Random source. A fresh unseeded one is used if None.
        environment: Environment modifiers passed to the sampler.
        sampler: Sampler to use. Built around rng if None.
        clock: Timestamp source for created_at.

    Returns:
        SimulationResultSet. Persisting it is the caller's job.
    """
    if sampler is None:
        rng = rng or random.Random()
        sampler = OutcomeSampler(rng=rng)
    elif rng is None:
        rng = sampler.rng

    generator = parent_pair_generator or generate_parental_genomes
    env = dict(DEFAULT_ENVIRONMENT) if environment is None else dict(environment)
    keys = list(trait_keys)

    parent1, parent2 = generator(rng)
    count = draw_offspring_count(rng, offspring_count_range)

    offspring: list[OffspringRecord] = []
    for index in range(count):
        traits = {key: sampler.sample(key, parent1, parent2, env) for key in keys}
        meta = GenomicMeta(snp_analyzed=math.floor(rng.random() * SNP_JITTER) + BASE_SNP_COUNT)
        offspring.append(OffspringRecord(id=index + 1, traits=traits, genomic_meta=meta))

    accuracy = compute_overall_accuracy(len(keys), rng)
    simulation_id = str(uuid.UUID(int=rng.getrandbits(128), version=4))

    logger.debug(
        "Simulated %d offspring for traits %s (accuracy %.1f)", count, keys, accuracy
    )

    return SimulationResultSet(
        simulation_id=simulation_id,
        offspring=offspring,
        trait_keys=keys,
        overall_accuracy=accuracy,
        parent1=parent1,
        parent2=parent2,
        created_at=(clock or _utcnow)(),
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)
