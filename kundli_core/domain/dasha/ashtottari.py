from datetime import timedelta
from typing import List

from kundli_core.domain.dasha.base import BaseDashaSystem, Segment
from kundli_core.domain.dasha.schemas import DAYS_PER_YEAR, DashaPeriod, DashaTimeline
from kundli_core.domain.kundali.nakshatra import NakshatraCalculator
from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.kundali.zodiac import NAKSHATRA_SPAN, house_distance, normalize


ASHTOTTARI_LORDS = [
    ("Sun", 6), ("Moon", 15), ("Mars", 8), ("Mercury", 17),
    ("Saturn", 10), ("Jupiter", 19), ("Rahu", 12), ("Venus", 21),
]

LORD_ORDER = [lord for lord, _ in ASHTOTTARI_LORDS]

# Nakshatra groups counted from Ardra; each group opens with its lord
NAKSHATRA_GROUPS = [
    ("Sun", [5, 6, 7, 8]),
    ("Moon", [9, 10, 11]),
    ("Mars", [12, 13, 14, 15]),
    ("Mercury", [16, 17, 18]),
    ("Saturn", [19, 20, 21]),
    ("Jupiter", [22, 23, 24]),
    ("Rahu", [25, 26, 0, 1]),
    ("Venus", [2, 3, 4]),
]

# Houses counted from the lagna lord where Rahu activates this system
ACTIVATING_HOUSES = {1, 4, 5, 7, 9, 10}


class AshtottariDasha(BaseDashaSystem):
    """
    108-year Ashtottari cycle started from the Moon's nakshatra group.

    The timeline is always produced; `applicable` reports whether the
    classical activation condition holds for the chart.
    """

    system = "Ashtottari"
    cycle_years = 108.0

    def __init__(self, nakshatras: NakshatraCalculator | None = None):
        self.nakshatras = nakshatras or NakshatraCalculator()

    def is_applicable(self, chart: NatalChart) -> bool:
        """
        Rahu in a kendra or trikona from the lagna lord, but not in lagna.
        """
        rahu = chart.planet("Rahu")
        lagna_lord = chart.planet(chart.ascendant.lord)

        if rahu.sign_index == chart.ascendant.sign_index:
            return False

        return house_distance(lagna_lord.sign_index, rahu.sign_index) in ACTIVATING_HOUSES

    def generate(self, chart: NatalChart, depth: int = 3) -> DashaTimeline:
        moon = chart.planet("Moon").longitude
        nakshatra_index, _ = self.nakshatras.calculate(moon)

        start_lord, group = next(
            (lord, members) for lord, members in NAKSHATRA_GROUPS
            if nakshatra_index in members
        )
        start_years = dict(ASHTOTTARI_LORDS)[start_lord]

        group_start = group[0] * NAKSHATRA_SPAN
        group_span = len(group) * NAKSHATRA_SPAN
        traversed = normalize(moon - group_start) / group_span
        if traversed >= 1.0:
            # Moon within an arc-second below the group's first boundary
            traversed = 0.0

        elapsed_years = traversed * start_years
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
            applicable=self.is_applicable(chart),
        )

    def sub_sequence(self, parent: DashaPeriod) -> List[Segment]:
        parent_years = parent.duration_years
        return [
            (lord, parent_years * years / self.cycle_years, None)
            for lord, years in self._rotation(parent.lord)
        ]

    def _rotation(self, first_lord: str):
        start = LORD_ORDER.index(first_lord)
        return [ASHTOTTARI_LORDS[(start + i) % 8] for i in range(8)]
