"""
Input advisories.

Unusual but valid inputs: the calculation still runs, the result carries a
warning for the engineer to confirm.
"""

from typing import List, Optional

from core.config import SizingSettings
from core.models import CalculationWarning, CircuitSpecification, EnvironmentalConditions, UnitSystem, WarningCode
from standards.tables import StandardsTable


def input_advisories(table: StandardsTable, spec: CircuitSpecification,
                     environment: Optional[EnvironmentalConditions] = None,
                     settings: Optional[SizingSettings] = None) -> List[CalculationWarning]:
    settings = settings or SizingSettings.default()
    warnings = []

    if spec.voltage not in table.standard_voltages:
        common = ", ".join(f"{v:g} V" for v in table.standard_voltages)
        warnings.append(CalculationWarning(
            WarningCode.NON_STANDARD_VOLTAGE,
            f"{spec.voltage:g} V is not a standard {table.standard.value} voltage. Common values: {common}.",
        ))

    if spec.power_factor is not None and spec.power_factor < settings.low_power_factor:
        warnings.append(CalculationWarning(
            WarningCode.LOW_POWER_FACTOR,
            f"Power factor {spec.power_factor:g} is very low. Consider power factor correction "
            f"(typical industrial 0.85-0.95).",
        ))

    if environment is None:
        return warnings

    ambient = environment.ambient_temp_c
    if ambient > settings.max_ambient_c:
        warnings.append(CalculationWarning(
            WarningCode.EXTREME_TEMPERATURE,
            f"Ambient {ambient:g}°C is extremely high. Special breakers and enclosures may be required.",
        ))
    elif ambient < settings.min_ambient_c:
        warnings.append(CalculationWarning(
            WarningCode.EXTREME_TEMPERATURE,
            f"Ambient {ambient:g}°C is extremely low. Check the breaker operating temperature range.",
        ))

    if environment.length is not None:
        if spec.unit_system is UnitSystem.METRIC:
            limit, unit = settings.long_circuit_m, "m"
        else:
            limit, unit = settings.long_circuit_ft, "ft"
        if environment.length > limit:
            warnings.append(CalculationWarning(
                WarningCode.LONG_CIRCUIT,
                f"Circuit length {environment.length:g} {unit} is very long. "
                f"Check voltage drop; consider a larger conductor or a higher voltage.",
            ))

    return warnings
