from dataclasses import dataclass

from core.models import Standard
from standards.registry import get_table


@dataclass(frozen=True)
class SafetyFactor:
    multiplier: float
    minimum_required: float
    reference: str


def apply_safety_factor(load_current: float, standard: Standard) -> SafetyFactor:
    """Continuous-load multiplier: 125% for NEC 210.20(A), none for IEC."""
    table = get_table(standard)
    multiplier = table.continuous_load_multiplier
    return SafetyFactor(multiplier, load_current * multiplier, table.reference("safety_factor"))
