from core.errors import UnknownLoadType
from core.models import TripCurve
from standards.tables import StandardsTable


def recommend_trip_curve(table: StandardsTable, load_type: str) -> TripCurve:
    """
    Trip characteristic for the kind of load.

    IEC picks a lettered curve (B/C/D/Z); NEC picks a trip mechanism.
    """
    tag = (load_type or "").strip().lower()
    code = table.trip_curve_by_load.get(tag)
    if code is None:
        known = ", ".join(sorted(table.trip_curve_by_load))
        raise UnknownLoadType(f"Unknown load type '{load_type}'. Expected one of: {known}.")
    return table.trip_curves[code]
