import logging
import math
from dataclasses import dataclass

from core.errors import InvalidInput
from core.models import CircuitSpecification

logger = logging.getLogger(__name__)

SQRT3 = math.sqrt(3)


@dataclass(frozen=True)
class LoadCurrent:
    current_amps: float
    power_factor: float
    formula: str


def validate_specification(spec: CircuitSpecification):
    if spec.voltage is None or spec.voltage <= 0:
        raise InvalidInput(f"Voltage must be positive (got {spec.voltage}).")
    if spec.phases not in (1, 3):
        raise InvalidInput(f"Phases must be 1 or 3 (got {spec.phases}).")

    has_power = spec.power_kw is not None
    has_current = spec.current_amps is not None
    if has_power == has_current:
        raise InvalidInput("Provide exactly one of power (kW) or current (A).")

    if has_power:
        if spec.power_kw <= 0:
            raise InvalidInput(f"Power must be positive (got {spec.power_kw} kW).")
        if spec.power_factor is None:
            raise InvalidInput("Power factor is required when the load is given as power.")
    elif spec.current_amps <= 0:
        raise InvalidInput(f"Current must be positive (got {spec.current_amps} A).")

    if spec.power_factor is not None and not 0 < spec.power_factor <= 1:
        raise InvalidInput(f"Power factor must be in (0, 1] (got {spec.power_factor}).")


def calculate_load_current(spec: CircuitSpecification) -> LoadCurrent:
    """
    Current drawn by the load.

    Single-phase: I = P / (V * pf)
    Three-phase:  I = P / (sqrt(3) * V * pf)

    A load given directly in amps passes through unchanged.
    """
    validate_specification(spec)

    if spec.current_amps is not None:
        pf = spec.power_factor if spec.power_factor is not None else 1.0
        logger.debug("Load given as %.3f A, no conversion", spec.current_amps)
        return LoadCurrent(spec.current_amps, pf, "I = given")

    watts = spec.power_kw * 1000.0
    pf = spec.power_factor
    if spec.phases == 1:
        current = watts / (spec.voltage * pf)
        formula = "I = P / (V × PF)"
    else:
        current = watts / (SQRT3 * spec.voltage * pf)
        formula = "I = P / (√3 × V × PF)"

    logger.debug("Load current %.3f A from %.3f kW at %s V, pf %.2f", current, spec.power_kw, spec.voltage, pf)
    return LoadCurrent(current, pf, formula)
