from datetime import timedelta
from typing import List, Tuple

from kundli_core.domain.dasha.base import BaseDashaSystem, Segment
from kundli_core.domain.dasha.schemas import DAYS_PER_YEAR, DashaPeriod, DashaTimeline
from kundli_core.domain.kundali.nakshatra import NakshatraCalculator
from kundli_core.domain.kundali.schemas import NatalChart


# (yogini, ruling planet, years)
YOGINIS: List[Tuple[str, str, int]] = [
    ("Mangala", "Moon", 1),
    ("Pingala", "Sun", 2),
    ("Dhanya", "Jupiter", 3),
    ("Bhramari", "Mars", 4),
    ("Bhadrika", "Mercury", 5),
    ("Ulka", "Saturn", 6),
    ("Siddha", "Venus", 7),
    ("Sankata", "Rahu", 8),
]

YOGINI_NAMES = [name for name, _, _ in YOGINIS]


class YoginiDasha(BaseDashaSystem):
    """
    36-year Yogini cycle.

    The first yogini is (nakshatra number + 3) mod 8, counted from
    Mangala, so Ardra opens with Mangala and Ashwini with Bhramari.
    """

    system = "Yogini"
    cycle_years = 36.0

    def __init__(self, nakshatras: NakshatraCalculator | None = None):
        self.nakshatras = nakshatras or NakshatraCalculator()

    def generate(self, chart: NatalChart, depth: int = 3) -> DashaTimeline:
        moon = chart.planet("Moon").longitude

        nakshatra_index, _ = self.nakshatras.calculate(moon)
        start_index = (nakshatra_index + 3) % 8
        _, _, start_years = YOGINIS[start_index]

        elapsed_years = self.nakshatras.fraction_traversed(moon) * start_years
        origin = chart.birth_utc - timedelta(days=elapsed_years * DAYS_PER_YEAR)

        segments: List[Segment] = [
            (planet, float(years), name)
            for name, planet, years in self._rotation(start_index)
        ]

        return self._timeline(
            origin,
            segments,
            depth,
            balance_years=start_years - elapsed_years,
        )

    def sub_sequence(self, parent: DashaPeriod) -> List[Segment]:
        parent_years = parent.duration_years
        return [
            (planet, parent_years * years / self.cycle_years, name)
            for name, planet, years in self._rotation(YOGINI_NAMES.index(parent.label))
        ]

    def _rotation(self, start_index: int):
        return [YOGINIS[(start_index + i) % 8] for i in range(8)]
