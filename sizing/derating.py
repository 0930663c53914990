"""
Ambient temperature and conductor grouping derating.

Temperatures snap to the bracket that contains them (no interpolation).
Cold-ambient factors above 1.0 are capped so derating never credits extra
capacity.
"""

import logging
import math
from typing import List, Optional

from core.errors import DeratingOutOfRange, InvalidInput
from core.models import CalculationWarning, DeratingFactor, EnvironmentalConditions, WarningCode
from standards.tables import StandardsTable

logger = logging.getLogger(__name__)


def resolve_insulation(table: StandardsTable, insulation) -> int:
    rating = int(getattr(insulation, "value", insulation))
    if rating in table.insulation_classes:
        return rating
    if rating in table.insulation_aliases:
        return table.insulation_aliases[rating]
    raise InvalidInput(f"Insulation rating {rating}°C is not tabulated for {table.standard.value}.")


def resolve_installation_method(table: StandardsTable, method: Optional[str]) -> str:
    methods = table.grouping_brackets[0].factors
    if len(methods) == 1:
        # Single column: grouping does not depend on how the cable is installed
        return table.default_installation_method
    if method is None or not str(method).strip():
        return table.default_installation_method

    key = str(method).strip()
    if key.upper() in methods:
        return key.upper()
    alias = table.installation_aliases.get(key.lower())
    if alias is not None:
        return alias
    raise InvalidInput(
        f"Unknown installation method '{method}'. Expected one of {', '.join(sorted(methods))}."
    )


def temperature_factor(table: StandardsTable, ambient_c: float, insulation) -> float:
    rating = resolve_insulation(table, insulation)
    for bracket in table.temperature_brackets:
        if ambient_c <= bracket.max_c:
            factor = bracket.factors[rating]
            if factor <= 0:
                raise DeratingOutOfRange(
                    f"{rating}°C insulation is not permitted at {ambient_c}°C ambient "
                    f"({table.reference('temperature')})."
                )
            return min(factor, 1.0)

    highest = table.temperature_brackets[-1].max_c
    raise DeratingOutOfRange(
        f"Ambient temperature {ambient_c}°C is above the highest tabulated bracket ({highest}°C)."
    )


def grouping_factor(table: StandardsTable, conductors: int, installation_method: Optional[str] = None,
                    conductors_per_circuit: int = 3) -> float:
    if conductors is None or conductors < 1:
        raise InvalidInput(f"Number of grouped conductors must be at least 1 (got {conductors}).")

    method = resolve_installation_method(table, installation_method)
    count = math.ceil(conductors / conductors_per_circuit) if table.grouping_per_circuit else conductors

    for bracket in table.grouping_brackets:
        if count <= bracket.max_count:
            return bracket.factors[method]
    return min(bracket.factors[method] for bracket in table.grouping_brackets)


def calculate_derating(table: StandardsTable, environment: EnvironmentalConditions,
                       conductors_per_circuit: int = 3) -> DeratingFactor:
    f_temp = temperature_factor(table, environment.ambient_temp_c, environment.insulation_rating)
    f_group = grouping_factor(
        table, environment.grouped_conductors, environment.installation_method, conductors_per_circuit
    )
    derating = DeratingFactor(
        temperature_factor=f_temp,
        grouping_factor=f_group,
        references=(table.reference("temperature"), table.reference("grouping")),
    )
    logger.debug("Derating: temp %.2f x group %.2f = %.3f", f_temp, f_group, derating.combined_factor)
    return derating


def apply_derating(minimum_required: float, derating: DeratingFactor) -> float:
    if derating.combined_factor <= 0:
        raise DeratingOutOfRange("Combined derating factor is zero.")
    return minimum_required / derating.combined_factor


def derating_warnings(derating: DeratingFactor, threshold: float) -> List[CalculationWarning]:
    if derating.combined_factor >= threshold:
        return []
    return [CalculationWarning(
        WarningCode.SIGNIFICANT_DERATING,
        f"Combined derating factor {derating.combined_factor:.3f} is below {threshold:.2f}; "
        f"consider a larger conductor or a different installation method.",
        derating.references[0] if derating.references else "",
    )]
