"""
Immutable standards tables.

Each regulatory standard is described by one StandardsTable instance built
at import time. Construction checks the ordering invariants once; the
lookups in sizing/ rely on them and never re-verify.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from core.models import ConductorMaterial, Standard, TripCurve


@dataclass(frozen=True)
class TemperatureBracket:
    min_c: float
    max_c: float
    factors: Mapping[int, float]  # insulation rating (C) -> correction factor


@dataclass(frozen=True)
class GroupingBracket:
    max_count: int
    factors: Mapping[str, float]  # installation method -> factor


@dataclass(frozen=True)
class ConductorEntry:
    size: str
    material: ConductorMaterial
    resistance_ohm_per_1000ft: float
    ampacity: Mapping[int, float]  # insulation rating (C) -> amps


@dataclass(frozen=True)
class BreakingCapacityBracket:
    max_rating: float
    breaking_capacity_ka: float
    frame: str


@dataclass(frozen=True)
class StandardsTable:
    standard: Standard
    breaker_ratings: Tuple[float, ...]
    continuous_load_multiplier: float
    temperature_brackets: Tuple[TemperatureBracket, ...]
    insulation_classes: Tuple[int, ...]
    insulation_aliases: Mapping[int, int]
    grouping_brackets: Tuple[GroupingBracket, ...]
    grouping_per_circuit: bool
    default_installation_method: str
    installation_aliases: Mapping[str, str]
    conductors: Mapping[ConductorMaterial, Tuple[ConductorEntry, ...]]
    breaking_capacities: Tuple[BreakingCapacityBracket, ...]
    trip_curves: Mapping[str, TripCurve]
    trip_curve_by_load: Mapping[str, str]
    references: Mapping[str, str]
    standard_voltages: Tuple[float, ...]  # nominal system voltages

    def __post_init__(self):
        _check_ascending(self.breaker_ratings, f"{self.standard.value} breaker ratings")
        if self.breaker_ratings[0] <= 0:
            raise ValueError(f"{self.standard.value} breaker ratings must be positive")

        prev_max = None
        for bracket in self.temperature_brackets:
            if bracket.min_c > bracket.max_c:
                raise ValueError(f"Temperature bracket {bracket.min_c}-{bracket.max_c} is inverted")
            if prev_max is not None and bracket.min_c <= prev_max:
                raise ValueError(f"Temperature bracket {bracket.min_c}-{bracket.max_c} overlaps the previous one")
            for rating in self.insulation_classes:
                if bracket.factors.get(rating, -1.0) < 0:
                    raise ValueError(f"Missing {rating}C factor in bracket {bracket.min_c}-{bracket.max_c}")
            prev_max = bracket.max_c

        _check_ascending([b.max_count for b in self.grouping_brackets], "grouping brackets")
        methods = set(self.grouping_brackets[0].factors)
        for bracket in self.grouping_brackets:
            if set(bracket.factors) != methods:
                raise ValueError(f"Grouping bracket {bracket.max_count} has different installation methods")
            for factor in bracket.factors.values():
                if not 0 < factor <= 1:
                    raise ValueError(f"Grouping factor {factor} outside (0, 1]")
        if self.default_installation_method not in methods:
            raise ValueError(f"Default installation method {self.default_installation_method} not tabulated")

        for material, entries in self.conductors.items():
            for smaller, larger in zip(entries, entries[1:]):
                if larger.resistance_ohm_per_1000ft >= smaller.resistance_ohm_per_1000ft:
                    raise ValueError(
                        f"{material.value} conductor {larger.size} is not larger than {smaller.size}"
                    )

        _check_ascending([b.max_rating for b in self.breaking_capacities], "breaking capacity brackets")
        if self.breaking_capacities[-1].max_rating < self.breaker_ratings[-1]:
            raise ValueError("Breaking capacity brackets do not cover the largest breaker rating")

        for tag, code in self.trip_curve_by_load.items():
            if code not in self.trip_curves:
                raise ValueError(f"Load type {tag} maps to unknown trip curve {code}")

    @property
    def max_rating(self) -> float:
        return self.breaker_ratings[-1]

    def reference(self, key: str) -> str:
        return self.references.get(key, self.standard.value)

    def conductor_entries(self, material: ConductorMaterial) -> Tuple[ConductorEntry, ...]:
        return self.conductors.get(material, ())

    def find_conductor(self, material: ConductorMaterial, size: str) -> Optional[int]:
        """Index of the conductor in its material table, None if not tabulated."""
        wanted = normalize_size(size)
        for idx, entry in enumerate(self.conductor_entries(material)):
            if entry.size == wanted:
                return idx
        return None


def _check_ascending(values, label: str):
    for a, b in zip(values, values[1:]):
        if b <= a:
            raise ValueError(f"{label} must be strictly ascending ({a} followed by {b})")


def normalize_size(size) -> str:
    """'#6 AWG' -> '6', '16 mm2' -> '16', 2.5 -> '2.5', 16.0 -> '16'."""
    s = str(size).strip().upper()
    for token in ("MM²", "MM2", "AWG", "KCMIL", "#"):
        s = s.replace(token, "")
    s = s.strip()
    try:
        value = float(s)
    except ValueError:
        return s
    return f"{value:g}"


def freeze(mapping: Dict) -> Mapping:
    return MappingProxyType(dict(mapping))
