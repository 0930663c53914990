"""
JSON-safe dicts for circuits and results.

The persistence layer stores what these functions produce; it never
recalculates. Enums are written by value, optional blocks as None.
"""

import json
from dataclasses import asdict
from typing import Optional, Tuple, Union

from core.errors import CalculationError, InvalidInput
from core.models import (
    CalculationResult, CircuitSpecification, ConductorMaterial, EnvironmentalConditions,
    InsulationRating, Standard, UnitSystem,
)

RECORD_VERSION = 1


def specification_to_dict(spec: CircuitSpecification) -> dict:
    return {
        "name": spec.name,
        "standard": spec.standard.value,
        "voltage": spec.voltage,
        "phases": spec.phases,
        "power_kw": spec.power_kw,
        "current_amps": spec.current_amps,
        "power_factor": spec.power_factor,
        "unit_system": spec.unit_system.value,
        "load_type": spec.load_type,
    }


def specification_from_dict(data: dict) -> CircuitSpecification:
    if not isinstance(data, dict):
        raise InvalidInput(f"Circuit record must be an object (got {type(data).__name__}).")
    try:
        return CircuitSpecification(
            standard=Standard(data["standard"]),
            voltage=float(data["voltage"]),
            phases=int(data["phases"]),
            power_kw=_optional_float(data.get("power_kw")),
            current_amps=_optional_float(data.get("current_amps")),
            power_factor=_optional_float(data.get("power_factor")),
            unit_system=UnitSystem(data.get("unit_system", UnitSystem.METRIC.value)),
            load_type=data.get("load_type", "mixed"),
            name=data.get("name", "Circuit"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInput(f"Malformed circuit record: {e}") from e


def environment_to_dict(env: EnvironmentalConditions) -> dict:
    return {
        "ambient_temp_c": env.ambient_temp_c,
        "grouped_conductors": env.grouped_conductors,
        "installation_method": env.installation_method,
        "insulation_rating": env.insulation_rating.value,
        "length": env.length,
        "conductor_material": env.conductor_material.value if env.conductor_material else None,
        "conductor_size": env.conductor_size,
    }


def environment_from_dict(data: dict) -> EnvironmentalConditions:
    if not isinstance(data, dict):
        raise InvalidInput(f"Environment record must be an object (got {type(data).__name__}).")
    try:
        material = data.get("conductor_material")
        return EnvironmentalConditions(
            ambient_temp_c=float(data.get("ambient_temp_c", 30.0)),
            grouped_conductors=int(data.get("grouped_conductors", 3)),
            installation_method=data.get("installation_method"),
            insulation_rating=InsulationRating(int(data.get("insulation_rating", 90))),
            length=_optional_float(data.get("length")),
            conductor_material=ConductorMaterial(material) if material else None,
            conductor_size=data.get("conductor_size"),
        )
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Malformed environment record: {e}") from e


def result_to_dict(result: Union[CalculationResult, CalculationError]) -> dict:
    if isinstance(result, CalculationError):
        return {"ok": False, "code": result.code, "message": result.message}

    data = {
        "ok": True,
        "standard": result.standard.value,
        "load_current": result.load_current,
        "formula": result.formula,
        "power_factor": result.power_factor,
        "safety_factor": result.safety_factor,
        "minimum_required_current": result.minimum_required_current,
        "adjusted_minimum_current": result.adjusted_minimum_current,
        "selected_rating": result.selected_rating,
        "trip_curve": asdict(result.trip_curve),
        "derating": None,
        "voltage_drop": None,
        "short_circuit": None,
        "breaking_capacity_adequate": result.breaking_capacity_adequate,
        "requires_review": result.requires_review,
        "warnings": [
            {"code": w.code.value, "message": w.message, "reference": w.reference}
            for w in result.warnings
        ],
        "references": list(result.references),
    }
    if result.derating is not None:
        data["derating"] = {
            "temperature_factor": result.derating.temperature_factor,
            "grouping_factor": result.derating.grouping_factor,
            "combined_factor": result.derating.combined_factor,
            "references": list(result.derating.references),
        }
    if result.voltage_drop is not None:
        vd = asdict(result.voltage_drop)
        vd["tier"] = result.voltage_drop.tier.value
        vd["material"] = result.voltage_drop.material.value
        data["voltage_drop"] = vd
    if result.short_circuit is not None:
        data["short_circuit"] = asdict(result.short_circuit)
    return data


def dump_record(spec: CircuitSpecification, environment: Optional[EnvironmentalConditions] = None,
                result: Union[CalculationResult, CalculationError, None] = None) -> str:
    return json.dumps({
        "version": RECORD_VERSION,
        "specification": specification_to_dict(spec),
        "environment": environment_to_dict(environment) if environment is not None else None,
        "result": result_to_dict(result) if result is not None else None,
    })


def load_record(text: str) -> Tuple[CircuitSpecification, Optional[EnvironmentalConditions], Optional[dict]]:
    """Returns (spec, environment, stored result dict). The result is not rebuilt."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Record is not valid JSON: {e}") from e
    if not isinstance(data, dict) or "specification" not in data:
        raise InvalidInput("Record has no circuit specification.")

    spec = specification_from_dict(data["specification"])
    env_data = data.get("environment")
    environment = environment_from_dict(env_data) if env_data is not None else None
    return spec, environment, data.get("result")


def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)
