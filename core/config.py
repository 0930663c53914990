from dataclasses import dataclass


@dataclass(frozen=True)
class SizingSettings:
    """
    Thresholds used by the sizing pipeline.

    Change these here (or pass a custom instance to BreakerSizingCalculator)
    instead of editing the stage modules.
    """
    vd_compliance_limit_percent: float  # NEC 210.19(A) informational note, branch circuits
    vd_dangerous_limit_percent: float
    significant_derating_threshold: float
    conductors_per_circuit: int  # IEC grouping is tabulated per circuit
    default_load_type: str
    # Input advisories
    low_power_factor: float
    max_ambient_c: float
    min_ambient_c: float
    long_circuit_m: float
    long_circuit_ft: float

    @classmethod
    def default(cls):
        return cls(
            vd_compliance_limit_percent=3.0,
            vd_dangerous_limit_percent=10.0,
            significant_derating_threshold=0.70,
            conductors_per_circuit=3,
            default_load_type="mixed",
            low_power_factor=0.7,
            max_ambient_c=60.0,
            min_ambient_c=-20.0,
            long_circuit_m=300.0,
            long_circuit_ft=1000.0,
        )
