from typing import Optional, Tuple

from core.errors import InvalidInput
from core.models import UnitSystem

METERS_TO_FEET = 3.28084

POWER_UNITS = ["W", "kW", "MW", "HP", "VA", "kVA", "MVA", "A"]
LENGTH_UNITS = ["m", "ft", "yd"]


def convert_power_unit(val: float, unit: str, pf: Optional[float] = None) -> Tuple[Optional[float], Optional[float]]:
    """
    Converts a load value to (kW, amps). Exactly one of the two is set.
    Apparent power needs the power factor to become real power.
    """
    unit = unit.strip().upper()

    # 1. Real power
    if unit == "W": return (val / 1000.0, None)
    if unit == "KW": return (val, None)
    if unit == "MW": return (val * 1000.0, None)
    if unit == "HP": return (val * 0.746, None)

    # 2. Current
    if unit == "A": return (None, val)

    # 3. Apparent power
    if unit in ["VA", "KVA", "MVA"]:
        if pf is None:
            raise InvalidInput(f"Power factor is required to convert {unit} to kW.")
        scale = {"VA": 0.001, "KVA": 1.0, "MVA": 1000.0}[unit]
        return (val * scale * pf, None)

    raise InvalidInput(f"Unknown power unit '{unit}'. Expected one of {', '.join(POWER_UNITS)}.")


def convert_length_unit(val: float, unit: str) -> float:
    """Returns length in meters."""
    unit = unit.strip().lower()
    if unit in ["m", "meter", "meters", "metre", "metres"]: return val
    if unit in ["ft", "foot", "feet"]: return val * 0.3048
    if unit in ["yd", "yard", "yards"]: return val * 0.9144
    raise InvalidInput(f"Unknown length unit '{unit}'. Expected one of {', '.join(LENGTH_UNITS)}.")


def to_feet(length: float, unit_system: UnitSystem) -> float:
    """Length in the circuit's unit system -> feet."""
    if unit_system is UnitSystem.METRIC:
        return length * METERS_TO_FEET
    return length
