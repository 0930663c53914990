import logging
from typing import Callable, List, Optional, Union

from core.config import SizingSettings
from core.errors import BreakerSizingError, CalculationError
from core.models import (
    CalculationResult, CalculationWarning, CircuitSpecification, EnvironmentalConditions, WarningCode,
)
from sizing.advisories import input_advisories
from sizing.ampacity import check_conductor_ampacity
from sizing.derating import apply_derating, calculate_derating, derating_warnings
from sizing.load_current import calculate_load_current
from sizing.ratings import select_standard_rating
from sizing.safety_factor import apply_safety_factor
from sizing.short_circuit import verify_short_circuit
from sizing.trip_curve import recommend_trip_curve
from sizing.voltage_drop import analyze_voltage_drop
from standards.registry import get_table

logger = logging.getLogger(__name__)

SizingOutcome = Union[CalculationResult, CalculationError]


class BreakerSizingCalculator:
    """
    Runs the sizing stages in order:

        load current -> input advisories -> safety factor -> derating -> standard rating
        -> voltage drop -> conductor ampacity -> trip curve -> short circuit

    Load current, safety factor, derating, rating and trip curve are required:
    a failure there returns a CalculationError. Voltage drop, conductor
    ampacity and short circuit are optional checks: a failure there is
    reported as a STAGE_SKIPPED warning on an otherwise complete result.
    Without a fault current the result notes that breaking capacity was
    not verified.
    """

    def __init__(self, settings: Optional[SizingSettings] = None):
        self.settings = settings or SizingSettings.default()

    def size(self, spec: CircuitSpecification, environment: Optional[EnvironmentalConditions] = None,
             fault_current_ka: Optional[float] = None) -> SizingOutcome:
        try:
            return self._size(spec, environment, fault_current_ka)
        except BreakerSizingError as e:
            logger.info("Sizing of '%s' failed: %s (%s)", spec.name, e.detail, e.code)
            return CalculationError.from_exception(e)

    def _size(self, spec, environment, fault_current_ka) -> CalculationResult:
        table = get_table(spec.standard)
        warnings: List[CalculationWarning] = []
        references: List[str] = []

        # 1. Load current
        load = calculate_load_current(spec)
        warnings.extend(input_advisories(table, spec, environment, self.settings))

        # 2. Continuous-load multiplier
        safety = apply_safety_factor(load.current_amps, spec.standard)
        references.append(safety.reference)

        # 3. Derating
        derating = None
        adjusted = safety.minimum_required
        if environment is not None:
            derating = calculate_derating(table, environment, self.settings.conductors_per_circuit)
            adjusted = apply_derating(safety.minimum_required, derating)
            warnings.extend(derating_warnings(derating, self.settings.significant_derating_threshold))
            references.extend(derating.references)

        # 4. Standard rating
        selection = select_standard_rating(adjusted, table.breaker_ratings, table.reference("rating"))
        warnings.extend(selection.warnings)
        references.append(table.reference("rating"))

        # 5. Voltage drop (optional)
        vd_result = None
        if environment is not None and environment.has_voltage_drop_inputs:
            outcome = self._optional("voltage drop", warnings, lambda: analyze_voltage_drop(
                table, load.current_amps, spec.voltage, spec.phases,
                environment.length, spec.unit_system,
                environment.conductor_material, environment.conductor_size,
                self.settings.vd_compliance_limit_percent, self.settings.vd_dangerous_limit_percent,
            ))
            if outcome is not None:
                vd_result, vd_warnings = outcome
                warnings.extend(vd_warnings)
                references.append(table.reference("voltage_drop"))

        # 6. Conductor ampacity (optional)
        if environment is not None and environment.has_conductor:
            ampacity_warnings = self._optional("conductor ampacity", warnings, lambda: check_conductor_ampacity(
                table, selection.rating, environment.conductor_material, environment.conductor_size,
                environment.insulation_rating, derating,
            ))
            if ampacity_warnings is not None:
                warnings.extend(ampacity_warnings)
                references.append(table.reference("ampacity"))

        # 7. Trip curve
        trip_curve = recommend_trip_curve(table, spec.load_type or self.settings.default_load_type)
        references.append(trip_curve.reference)

        # 8. Short circuit (optional)
        sc_check = None
        if fault_current_ka is not None:
            outcome = self._optional("short circuit", warnings, lambda: verify_short_circuit(
                table, selection.rating, fault_current_ka,
            ))
            if outcome is not None:
                sc_check, sc_warnings = outcome
                warnings.extend(sc_warnings)
                references.append(table.reference("short_circuit"))
        else:
            warnings.append(CalculationWarning(
                WarningCode.BREAKING_CAPACITY_NOT_VERIFIED,
                "Breaking capacity not verified. Consult site-specific fault current calculations.",
                table.reference("short_circuit"),
            ))

        result = CalculationResult(
            standard=spec.standard,
            load_current=load.current_amps,
            formula=load.formula,
            power_factor=load.power_factor,
            safety_factor=safety.multiplier,
            minimum_required_current=safety.minimum_required,
            adjusted_minimum_current=adjusted,
            selected_rating=selection.rating,
            trip_curve=trip_curve,
            derating=derating,
            voltage_drop=vd_result,
            short_circuit=sc_check,
            warnings=tuple(warnings),
            references=tuple(dict.fromkeys(references)),
        )
        logger.info(
            "%s: %.2f A load -> %.2f A required -> %g A %s breaker (%d warnings)",
            spec.name, result.load_current, adjusted, result.selected_rating,
            spec.standard.value, len(result.warnings),
        )
        return result

    @staticmethod
    def _optional(stage: str, warnings: List[CalculationWarning], run: Callable):
        try:
            return run()
        except BreakerSizingError as e:
            logger.warning("Skipping %s check: %s", stage, e.detail)
            warnings.append(CalculationWarning(
                WarningCode.STAGE_SKIPPED, f"{stage.capitalize()} check skipped: {e.detail}",
            ))
            return None


_default_calculator = BreakerSizingCalculator()


def size(spec: CircuitSpecification, environment: Optional[EnvironmentalConditions] = None,
         fault_current_ka: Optional[float] = None) -> SizingOutcome:
    """Sizes one circuit with the default settings."""
    return _default_calculator.size(spec, environment, fault_current_ka)
