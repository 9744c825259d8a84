from datetime import timedelta
from typing import List

from kundli_core.domain.dasha.base import BaseDashaSystem, Segment
from kundli_core.domain.dasha.schemas import DAYS_PER_YEAR, DashaPeriod, DashaTimeline
from kundli_core.domain.kundali.nakshatra import NakshatraCalculator
from kundli_core.domain.kundali.schemas import NatalChart


# Order of Dasha Lords and their duration in years
VIMSHOTTARI_LORDS = [
    ("Ketu", 7), ("Venus", 20), ("Sun", 6), ("Moon", 10),
    ("Mars", 7), ("Rahu", 18), ("Jupiter", 16), ("Saturn", 19), ("Mercury", 17)
]

VIMSHOTTARI_YEARS = dict(VIMSHOTTARI_LORDS)
LORD_ORDER = [lord for lord, _ in VIMSHOTTARI_LORDS]


class VimshottariDasha(BaseDashaSystem):
    """
    120-year Vimshottari cycle keyed by the Moon's nakshatra.
    """

    system = "Vimshottari"
    cycle_years = 120.0

    def __init__(self, nakshatras: NakshatraCalculator | None = None):
        self.nakshatras = nakshatras or NakshatraCalculator()

    def generate(self, chart: NatalChart, depth: int = 3) -> DashaTimeline:
        moon = chart.planet("Moon").longitude

        # Ashwini (0) -> Ketu (0), Bharani (1) -> Venus (1), ...
        nakshatra_index, _ = self.nakshatras.calculate(moon)
        start_index = nakshatra_index % 9
        start_lord, start_years = VIMSHOTTARI_LORDS[start_index]

        elapsed_years = self.nakshatras.fraction_traversed(moon) * start_years
        origin = chart.birth_utc - timedelta(days=elapsed_years * DAYS_PER_YEAR)

        segments: List[Segment] = [
            (lord, float(years), None)
            for lord, years in self._rotation(start_lord)
        ]

        return self._timeline(
            origin,
            segments,
            depth,
            balance_years=start_years - elapsed_years,
        )

    def sub_sequence(self, parent: DashaPeriod) -> List[Segment]:
        # (parent years * sub-lord years) / 120
        parent_years = parent.duration_years
        return [
            (lord, parent_years * years / self.cycle_years, None)
            for lord, years in self._rotation(parent.lord)
        ]

    def _rotation(self, first_lord: str):
        start = LORD_ORDER.index(first_lord)
        return [VIMSHOTTARI_LORDS[(start + i) % 9] for i in range(9)]
