"""Shared fixtures for genomesim tests."""

from __future__ import annotations

import random

import pytest

from genomesim.model.parents import ParentDescriptor


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value.

    getrandbits() still comes from the seeded generator, so simulation ids
    stay valid.
    """

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def fixed_random():
    """Factory for FixedRandom sources."""
    return FixedRandom


@pytest.fixture
def tall_parents() -> tuple[ParentDescriptor, ParentDescriptor]:
    return (
        ParentDescriptor(height=180.0, iq=120.0, eye_color="brown", population="european"),
        ParentDescriptor(height=180.0, iq=120.0, eye_color="blue", population="european"),
    )
