# income_tracker/services/projections.py
"""Income projections.

These numbers are a placeholder heuristic, not a forecast: a flat growth
factor is applied to the average monthly income. Anything smarter should be
a new ``Projector`` implementation passed to ``build_report``.
"""
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Sequence


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class Projector(ABC):
    """Turns the monthly sums of a year into forward estimates."""

    name = "projector"

    @abstractmethod
    def project(self, monthly_totals: Sequence[float]) -> Dict[str, float]:
        """
        Args:
            monthly_totals: sum of income for each month that has data.

        Returns:
            dict with nextMonth, quarter, year, confidence and basis keys.
        """


class FlatGrowthProjector(Projector):
    name = "flat-growth-heuristic"

    NEXT_MONTH_FACTOR = 1.10
    QUARTER_FACTOR = 1.05
    YEAR_FACTOR = 1.08
    # fixed figure, not derived from variance
    CONFIDENCE = 85

    def project(self, monthly_totals: Sequence[float]) -> Dict[str, float]:
        months = [float(t) for t in monthly_totals]
        average = sum(months) / len(months) if months else 0.0
        return {
            "nextMonth": round_half_up(average * self.NEXT_MONTH_FACTOR),
            "quarter": round_half_up(average * 3 * self.QUARTER_FACTOR),
            "year": round_half_up(average * 12 * self.YEAR_FACTOR),
            "confidence": self.CONFIDENCE,
            "basis": self.name,
        }


default_projector = FlatGrowthProjector()
