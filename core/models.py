from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

class Standard(Enum):
    NEC = "NEC"
    IEC = "IEC"

class UnitSystem(Enum):
    METRIC = "metric"      # lengths in metres
    IMPERIAL = "imperial"  # lengths in feet

class ConductorMaterial(Enum):
    COPPER = "Copper"
    ALUMINUM = "Aluminum"

class InsulationRating(Enum):
    TEMP_60 = 60
    TEMP_70 = 70  # IEC PVC
    TEMP_75 = 75
    TEMP_90 = 90

class ComplianceTier(Enum):
    COMPLIANT = "compliant"
    VIOLATION = "violation"
    DANGEROUS = "dangerous"

class WarningCode(Enum):
    EXCEEDS_STANDARD_RANGE = "EXCEEDS_STANDARD_RANGE"
    SIGNIFICANT_DERATING = "SIGNIFICANT_DERATING"
    VOLTAGE_DROP_VIOLATION = "VOLTAGE_DROP_VIOLATION"
    VOLTAGE_DROP_DANGEROUS = "VOLTAGE_DROP_DANGEROUS"
    NO_COMPLIANT_SIZE_FOUND = "NO_COMPLIANT_SIZE_FOUND"
    BREAKING_CAPACITY_EXCEEDED = "BREAKING_CAPACITY_EXCEEDED"
    CONDUCTOR_UNDERSIZED = "CONDUCTOR_UNDERSIZED"
    STAGE_SKIPPED = "STAGE_SKIPPED"
    BREAKING_CAPACITY_NOT_VERIFIED = "BREAKING_CAPACITY_NOT_VERIFIED"
    NON_STANDARD_VOLTAGE = "NON_STANDARD_VOLTAGE"
    LOW_POWER_FACTOR = "LOW_POWER_FACTOR"
    EXTREME_TEMPERATURE = "EXTREME_TEMPERATURE"
    LONG_CIRCUIT = "LONG_CIRCUIT"

@dataclass(frozen=True)
class CalculationWarning:
    code: WarningCode
    message: str
    reference: str = ""

@dataclass(frozen=True)
class CircuitSpecification:
    standard: Standard
    voltage: float
    phases: int  # 1 or 3
    power_kw: Optional[float] = None
    current_amps: Optional[float] = None
    power_factor: Optional[float] = None
    unit_system: UnitSystem = UnitSystem.METRIC
    load_type: str = "mixed"
    name: str = "Circuit"

@dataclass(frozen=True)
class EnvironmentalConditions:
    ambient_temp_c: float = 30.0
    grouped_conductors: int = 3
    installation_method: Optional[str] = None  # IEC only: A, B, C, E or alias
    insulation_rating: InsulationRating = InsulationRating.TEMP_90
    length: Optional[float] = None  # in the circuit's unit system
    conductor_material: Optional[ConductorMaterial] = None
    conductor_size: Optional[str] = None  # "6", "1/0", "250" (NEC) or "16" mm2 (IEC)

    @property
    def has_voltage_drop_inputs(self) -> bool:
        return (
            self.length is not None
            and self.conductor_material is not None
            and self.conductor_size is not None
        )

    @property
    def has_conductor(self) -> bool:
        return self.conductor_material is not None and self.conductor_size is not None

@dataclass(frozen=True)
class DeratingFactor:
    temperature_factor: float
    grouping_factor: float
    combined_factor: float = field(init=False)
    references: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "combined_factor", self.temperature_factor * self.grouping_factor)

@dataclass(frozen=True)
class VoltageDropResult:
    percent: float
    volts: float
    tier: ComplianceTier
    conductor_size: str
    material: ConductorMaterial
    resistance_ohm_per_1000ft: float
    length_ft: float
    formula: str
    voltage_at_load: float
    power_loss_watts: float  # VD x I
    recommended_size: Optional[str] = None
    recommended_percent: Optional[float] = None

@dataclass(frozen=True)
class TripCurve:
    code: str
    display_name: str
    instantaneous_min: float  # x In
    instantaneous_max: float  # x In
    inrush_capability: str
    reference: str

@dataclass(frozen=True)
class ShortCircuitCheck:
    fault_current_ka: float
    breaking_capacity_ka: float
    adequate: bool

@dataclass(frozen=True)
class CalculationResult:
    standard: Standard
    load_current: float
    formula: str
    power_factor: float
    safety_factor: float
    minimum_required_current: float
    adjusted_minimum_current: float
    selected_rating: float
    trip_curve: TripCurve
    derating: Optional[DeratingFactor] = None
    voltage_drop: Optional[VoltageDropResult] = None
    short_circuit: Optional[ShortCircuitCheck] = None
    warnings: Tuple[CalculationWarning, ...] = ()
    references: Tuple[str, ...] = ()

    @property
    def breaking_capacity_adequate(self) -> Optional[bool]:
        if self.short_circuit is None:
            return None
        return self.short_circuit.adequate

    @property
    def requires_review(self) -> bool:
        """True when the selected rating is only the table maximum."""
        return any(w.code is WarningCode.EXCEEDS_STANDARD_RANGE for w in self.warnings)

    @property
    def ok(self) -> bool:
        return True
