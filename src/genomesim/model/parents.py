"""ParentDescriptor: the per-run parental attributes fed to the sampler."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class ParentDescriptor:
    """Attributes of one simulated parent.

    Built fresh for every simulation run. Numeric fields are read through
    numeric() so that missing or malformed values count as zero.
    """

    height: Any = 0.0  # cm
    iq: Any = 0.0
    eye_color: str = ""
    population: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ParentDescriptor:
        """Build a descriptor from a loose mapping, ignoring unknown keys."""
        data = data or {}
        return cls(
            height=data.get("height", 0.0),
            iq=data.get("iq", 0.0),
            eye_color=str(data.get("eye_color", data.get("eyeColor", "")) or ""),
            population=str(data.get("population", "") or ""),
        )

    def numeric(self, attribute: str) -> float:
        """Return a numeric attribute, or 0.0 if it is missing or not a number."""
        return coerce_number(getattr(self, attribute, 0.0))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def coerce_number(value: Any) -> float:
    """Convert a loose value to float, defaulting to 0.0 instead of raising."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0
