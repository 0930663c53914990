"""
Errors raised by the sizing stages.

Hierarchy:
    BreakerSizingError
    ├── InvalidInput            missing or out-of-range circuit data
    ├── DeratingOutOfRange      ambient temperature not permitted for the insulation
    ├── UnknownLoadType         load tag with no trip-curve mapping
    └── ConductorNotTabulated   conductor size absent from the resistance table

Inside the pipeline these are raised; at the ``size`` boundary they are
turned into a ``CalculationError`` value.
"""

from dataclasses import dataclass


class BreakerSizingError(Exception):
    code = "SIZING_ERROR"
    default_detail = "The calculation could not be completed."

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidInput(BreakerSizingError):
    code = "INVALID_INPUT"
    default_detail = "Invalid circuit data."


class DeratingOutOfRange(BreakerSizingError):
    code = "DERATING_OUT_OF_RANGE"
    default_detail = "Ambient temperature exceeds the derating table for this insulation class."


class UnknownLoadType(BreakerSizingError):
    code = "UNKNOWN_LOAD_TYPE"
    default_detail = "Unknown load type."


class ConductorNotTabulated(BreakerSizingError):
    code = "CONDUCTOR_NOT_TABULATED"
    default_detail = "Conductor size not found in the resistance table."


@dataclass(frozen=True)
class CalculationError:
    """Typed failure returned by ``size`` in place of a result."""
    code: str
    message: str

    @classmethod
    def from_exception(cls, exc: BreakerSizingError) -> "CalculationError":
        return cls(code=exc.code, message=exc.detail)

    @property
    def ok(self) -> bool:
        return False
