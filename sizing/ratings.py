import bisect
from dataclasses import dataclass
from typing import Sequence, Tuple

from core.models import CalculationWarning, WarningCode


@dataclass(frozen=True)
class RatingSelection:
    rating: float
    warnings: Tuple[CalculationWarning, ...] = ()


def select_standard_rating(required: float, ratings: Sequence[float], reference: str = "") -> RatingSelection:
    """Smallest standard rating >= required. Ratings must be ascending."""
    idx = bisect.bisect_left(ratings, required)
    if idx < len(ratings):
        return RatingSelection(ratings[idx])

    maximum = ratings[-1]
    warning = CalculationWarning(
        WarningCode.EXCEEDS_STANDARD_RANGE,
        f"Required {required:.1f} A exceeds the largest standard rating ({maximum:g} A). "
        f"Manual engineering review required.",
        reference,
    )
    return RatingSelection(maximum, (warning,))
