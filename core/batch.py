import logging
from typing import List, Optional

import pandas as pd

from core.calculator import BreakerSizingCalculator
from core.config import SizingSettings
from core.converters import convert_length_unit, convert_power_unit
from core.errors import BreakerSizingError, CalculationError, InvalidInput
from core.models import (
    CircuitSpecification, ConductorMaterial, EnvironmentalConditions, InsulationRating, Standard, UnitSystem,
)
from core.report import Record

logger = logging.getLogger(__name__)

# Upload template: one row per circuit
TEMPLATE_COLUMNS = [
    "Name", "Standard", "Voltage", "Phases", "Power", "Unit", "PF", "LoadType",
    "Length", "LengthUnit", "AmbientC", "Conductors", "Installation", "Insulation",
    "Material", "Size", "FaultkA",
]

# Installation data; a row with all of these blank is sized without derating
ENVIRONMENT_COLUMNS = [
    "Length", "LengthUnit", "AmbientC", "Conductors", "Installation", "Insulation", "Material", "Size",
]

RESULT_COLUMNS = [
    "Load (A)", "Required (A)", "Breaker (A)", "Trip Curve", "VD (%)", "Upsize To",
    "Warnings", "Status",
]


def template_dataframe() -> pd.DataFrame:
    data = {
        "Name": ["Water Heater", "Pump Motor"],
        "Standard": ["NEC", "IEC"],
        "Voltage": [240, 400],
        "Phases": [1, 3],
        "Power": [10, 15],
        "Unit": ["kW", "kW"],
        "PF": [0.9, 0.85],
        "LoadType": ["resistive", "motor"],
        "Length": [150, 40],
        "LengthUnit": ["ft", "m"],
        "AmbientC": [30, 35],
        "Conductors": [3, 6],
        "Installation": [None, "B"],
        "Insulation": [90, 90],
        "Material": ["Copper", "Copper"],
        "Size": ["6", "6"],
        "FaultkA": [None, 10],
    }
    return pd.DataFrame(data, columns=TEMPLATE_COLUMNS)


def table_row(values: dict, apply_environment: bool = True) -> dict:
    """One template row from form values. Installation data is dropped when not applied."""
    row = {column: values.get(column) for column in TEMPLATE_COLUMNS}
    if not apply_environment:
        for column in ENVIRONMENT_COLUMNS:
            row[column] = None
    return row


def _value(row, column, default=None):
    value = row.get(column, default)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return value


def row_to_inputs(row) -> tuple:
    """Builds (spec, environment or None, fault kA or None) from a template row."""
    try:
        standard = Standard(str(_value(row, "Standard", "NEC")).strip().upper())
        voltage = float(_value(row, "Voltage"))
        phases = int(_value(row, "Phases", 1))
        pf = _value(row, "PF")
        pf = float(pf) if pf is not None else None
        power_kw, amps = convert_power_unit(float(_value(row, "Power")), str(_value(row, "Unit", "kW")), pf)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Malformed circuit row: {e}") from e

    spec = CircuitSpecification(
        standard=standard,
        voltage=voltage,
        phases=phases,
        power_kw=power_kw,
        current_amps=amps,
        power_factor=pf,
        unit_system=UnitSystem.METRIC,
        load_type=str(_value(row, "LoadType", "mixed")),
        name=str(_value(row, "Name", "Circuit")),
    )

    environment = None
    if any(_value(row, c) is not None for c in ("AmbientC", "Conductors", "Length", "Size")):
        try:
            length = _value(row, "Length")
            material = _value(row, "Material")
            size = _value(row, "Size")
            environment = EnvironmentalConditions(
                ambient_temp_c=float(_value(row, "AmbientC", 30.0)),
                grouped_conductors=int(_value(row, "Conductors", 3)),
                installation_method=_value(row, "Installation"),
                insulation_rating=InsulationRating(int(_value(row, "Insulation", 90))),
                length=convert_length_unit(float(length), str(_value(row, "LengthUnit", "m")))
                if length is not None else None,
                conductor_material=ConductorMaterial(str(material).strip().capitalize()) if material else None,
                conductor_size=str(size) if size is not None else None,
            )
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Malformed installation data: {e}") from e

    fault = _value(row, "FaultkA")
    return spec, environment, float(fault) if fault is not None else None


def size_rows(df: pd.DataFrame, settings: Optional[SizingSettings] = None) -> List[Record]:
    calculator = BreakerSizingCalculator(settings)
    records = []
    for idx, row in df.iterrows():
        try:
            spec, environment, fault = row_to_inputs(row)
        except BreakerSizingError as e:
            logger.warning("Row %s rejected: %s", idx, e.detail)
            name = _value(row, "Name", f"Row {idx}")
            placeholder = CircuitSpecification(Standard.NEC, 0.0, 1, name=str(name))
            records.append((placeholder, CalculationError.from_exception(e)))
            continue
        records.append((spec, calculator.size(spec, environment, fault)))
    return records


def size_dataframe(df: pd.DataFrame, settings: Optional[SizingSettings] = None) -> pd.DataFrame:
    """Sizes every row of a circuit table. Returns the input columns plus results."""
    rows = []
    for spec, outcome in size_rows(df, settings):
        if isinstance(outcome, CalculationError):
            rows.append({"Status": f"Error: {outcome.message}"})
            continue
        vd = outcome.voltage_drop
        rows.append({
            "Load (A)": round(outcome.load_current, 1),
            "Required (A)": round(outcome.adjusted_minimum_current, 1),
            "Breaker (A)": outcome.selected_rating,
            "Trip Curve": outcome.trip_curve.display_name,
            "VD (%)": round(vd.percent, 2) if vd else None,
            "Upsize To": vd.recommended_size if vd else None,
            "Warnings": "; ".join(w.code.value for w in outcome.warnings),
            "Status": "Review" if outcome.requires_review else "OK",
        })
    results = pd.DataFrame(rows, columns=RESULT_COLUMNS, index=df.index)
    return pd.concat([df, results], axis=1)
