"""
Voltage drop check with conductor upsize recommendation.

VD (V) = k * I * R * L / 1000, with R in ohm/1000 ft and L in feet.
k = 2 for single-phase (out and back), sqrt(3) for three-phase.
"""

import logging
import math
from typing import List, Tuple

from core.converters import to_feet
from core.errors import ConductorNotTabulated, InvalidInput
from core.models import (
    CalculationWarning, ComplianceTier, ConductorMaterial, UnitSystem, VoltageDropResult, WarningCode,
)
from standards.tables import StandardsTable, normalize_size

logger = logging.getLogger(__name__)


def voltage_drop(current: float, resistance_ohm_per_1000ft: float, length_ft: float,
                 voltage: float, phases: int) -> Tuple[float, float]:
    """Returns (volts, percent of the nominal voltage)."""
    k = math.sqrt(3) if phases == 3 else 2.0
    volts = k * current * resistance_ohm_per_1000ft * length_ft / 1000.0
    return volts, volts / voltage * 100.0


def classify(percent: float, compliance_limit: float = 3.0, dangerous_limit: float = 10.0) -> ComplianceTier:
    if percent <= compliance_limit:
        return ComplianceTier.COMPLIANT
    if percent <= dangerous_limit:
        return ComplianceTier.VIOLATION
    return ComplianceTier.DANGEROUS


def analyze_voltage_drop(table: StandardsTable, load_current: float, voltage: float, phases: int,
                         length: float, unit_system: UnitSystem, material: ConductorMaterial,
                         conductor_size: str, compliance_limit: float = 3.0,
                         dangerous_limit: float = 10.0) -> Tuple[VoltageDropResult, List[CalculationWarning]]:
    entries = table.conductor_entries(material)
    idx = table.find_conductor(material, conductor_size)
    if idx is None:
        raise ConductorNotTabulated(
            f"{material.value} conductor size '{conductor_size}' is not in the "
            f"{table.standard.value} resistance table."
        )
    if length is None or length < 0:
        raise InvalidInput(f"Circuit length must be zero or positive (got {length}).")

    entry = entries[idx]
    length_ft = to_feet(length, unit_system)
    volts, percent = voltage_drop(load_current, entry.resistance_ohm_per_1000ft, length_ft, voltage, phases)
    tier = classify(percent, compliance_limit, dangerous_limit)
    formula = "VD = √3 × I × R × L / 1000" if phases == 3 else "VD = 2 × I × R × L / 1000"
    reference = table.reference("voltage_drop")
    logger.debug("Voltage drop %.3f%% on %s %s over %.1f ft", percent, material.value, entry.size, length_ft)

    warnings = []
    recommended_size = None
    recommended_percent = None
    if tier is not ComplianceTier.COMPLIANT:
        code = (WarningCode.VOLTAGE_DROP_DANGEROUS if tier is ComplianceTier.DANGEROUS
                else WarningCode.VOLTAGE_DROP_VIOLATION)
        warnings.append(CalculationWarning(
            code, f"Voltage drop {percent:.2f}% exceeds the {compliance_limit:g}% limit.", reference,
        ))

        for candidate in entries[idx + 1:]:
            _, candidate_percent = voltage_drop(
                load_current, candidate.resistance_ohm_per_1000ft, length_ft, voltage, phases
            )
            if candidate_percent <= compliance_limit:
                recommended_size = candidate.size
                recommended_percent = candidate_percent
                break

        if recommended_size is None:
            warnings.append(CalculationWarning(
                WarningCode.NO_COMPLIANT_SIZE_FOUND,
                f"No tabulated {material.value} conductor keeps the drop within {compliance_limit:g}%; "
                f"use parallel conductors or shorten the run.",
                reference,
            ))

    result = VoltageDropResult(
        percent=percent,
        volts=volts,
        tier=tier,
        conductor_size=normalize_size(conductor_size),
        material=material,
        resistance_ohm_per_1000ft=entry.resistance_ohm_per_1000ft,
        length_ft=length_ft,
        formula=formula,
        voltage_at_load=voltage - volts,
        power_loss_watts=volts * load_current,
        recommended_size=recommended_size,
        recommended_percent=recommended_percent,
    )
    return result, warnings
