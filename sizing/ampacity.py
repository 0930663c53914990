from typing import List, Optional

from core.errors import ConductorNotTabulated
from core.models import CalculationWarning, ConductorMaterial, DeratingFactor, WarningCode
from sizing.derating import resolve_insulation
from standards.tables import StandardsTable


def derated_ampacity(table: StandardsTable, material: ConductorMaterial, conductor_size: str,
                     insulation, derating: Optional[DeratingFactor] = None) -> float:
    idx = table.find_conductor(material, conductor_size)
    if idx is None:
        raise ConductorNotTabulated(
            f"{material.value} conductor size '{conductor_size}' is not in the "
            f"{table.standard.value} ampacity table."
        )
    entry = table.conductor_entries(material)[idx]
    base = entry.ampacity[resolve_insulation(table, insulation)]
    factor = derating.combined_factor if derating is not None else 1.0
    return base * factor


def check_conductor_ampacity(table: StandardsTable, rating: float, material: ConductorMaterial,
                             conductor_size: str, insulation,
                             derating: Optional[DeratingFactor] = None) -> List[CalculationWarning]:
    """The breaker must not exceed what the derated conductor can carry (In <= Iz)."""
    iz = derated_ampacity(table, material, conductor_size, insulation, derating)
    if rating <= iz:
        return []
    return [CalculationWarning(
        WarningCode.CONDUCTOR_UNDERSIZED,
        f"{material.value} {conductor_size} carries {iz:.1f} A after derating, "
        f"below the {rating:g} A breaker.",
        table.reference("ampacity"),
    )]
