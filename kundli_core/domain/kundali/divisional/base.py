from abc import ABC, abstractmethod
from typing import List, Tuple

from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.kundali.divisional.schemas import DivisionalChart, VargaPlacement
from kundli_core.domain.kundali.zodiac import (
    SIGN_SPAN,
    SIGNS,
    degree_in_sign,
    segment_index,
    sign_index,
)


class BaseDivisionalCalculator(ABC):
    """
    Abstract base class for all divisional chart calculators.

    Each divisional chart (D9, D10, etc.) must:
    - Declare `chart_type`, `name` and `division`
    - Implement `varga_sign` for its classical mapping rule
    """

    chart_type: str
    name: str
    division: int
    calculation_version: str = "v1"

    @abstractmethod
    def varga_sign(self, sign: int, part: int) -> int:
        """
        Destination sign for the given part (0-based) of a natal sign.
        """
        raise NotImplementedError

    def position(self, longitude: float) -> Tuple[int, float]:
        """
        (divisional sign index, degree within that sign) for a longitude.
        """
        sign = sign_index(longitude)
        degree = degree_in_sign(longitude)

        span = SIGN_SPAN / self.division
        part = segment_index(degree, span, self.division)
        within = max(0.0, degree - part * span)

        return self.varga_sign(sign, part) % 12, min(within * self.division, 29.999999)

    def calculate(self, chart: NatalChart) -> DivisionalChart:
        """
        Calculate the divisional chart from a D1 chart.
        """
        ascendant = self._placement("Ascendant", chart.ascendant.longitude)

        placements: List[VargaPlacement] = [
            self._placement(name, planet.longitude)
            for name, planet in chart.planets.items()
        ]

        return self._build_chart(ascendant, placements)

    # ─────────────────────────────────────────────
    # Shared helpers
    # ─────────────────────────────────────────────

    def _placement(self, body: str, longitude: float) -> VargaPlacement:
        index, degree = self.position(longitude)
        return VargaPlacement(
            body=body,
            sign_index=index,
            sign=SIGNS[index],
            degree=round(degree, 4),
        )

    def _build_chart(
        self,
        ascendant: VargaPlacement,
        placements: List[VargaPlacement],
    ) -> DivisionalChart:
        """
        Helper to assemble a DivisionalChart object.
        """
        return DivisionalChart(
            chart_type=self.chart_type,
            name=self.name,
            division=self.division,
            ascendant=ascendant,
            placements=placements,
            calculation_version=self.calculation_version,
        )
