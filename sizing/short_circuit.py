import logging
from typing import List, Tuple

from core.errors import InvalidInput
from core.models import CalculationWarning, ShortCircuitCheck, WarningCode
from standards.tables import BreakingCapacityBracket, StandardsTable

logger = logging.getLogger(__name__)


def breaking_capacity_for(table: StandardsTable, rating: float) -> BreakingCapacityBracket:
    for bracket in table.breaking_capacities:
        if rating <= bracket.max_rating:
            return bracket
    return table.breaking_capacities[-1]


def verify_short_circuit(table: StandardsTable, rating: float,
                         fault_current_ka: float) -> Tuple[ShortCircuitCheck, List[CalculationWarning]]:
    """Compares the prospective fault current with the frame's breaking capacity."""
    if fault_current_ka is None or fault_current_ka <= 0:
        raise InvalidInput(f"Fault current must be positive (got {fault_current_ka} kA).")

    bracket = breaking_capacity_for(table, rating)
    adequate = fault_current_ka <= bracket.breaking_capacity_ka
    check = ShortCircuitCheck(fault_current_ka, bracket.breaking_capacity_ka, adequate)
    logger.debug("Fault %.1f kA vs %s %.1f kA", fault_current_ka, bracket.frame, bracket.breaking_capacity_ka)

    if adequate:
        return check, []
    warning = CalculationWarning(
        WarningCode.BREAKING_CAPACITY_EXCEEDED,
        f"Prospective fault current {fault_current_ka:g} kA exceeds the {bracket.breaking_capacity_ka:g} kA "
        f"breaking capacity of a {rating:g} A {bracket.frame}. Specify a higher interrupting rating.",
        table.reference("short_circuit"),
    )
    return check, [warning]
