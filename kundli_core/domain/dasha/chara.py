from typing import Dict, List

from kundli_core.domain.dasha.base import BaseDashaSystem, Segment
from kundli_core.domain.dasha.schemas import DashaPeriod, DashaTimeline
from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.kundali.zodiac import CLASSICAL_PLANETS, SIGN_LORDS, SIGNS


# Savya (odd-footed) signs count zodiacally, the rest in reverse
SAVYA_SIGNS = {0, 1, 2, 6, 7, 8}

# Scorpio and Aquarius carry a second lord
CO_LORDS = {7: "Ketu", 10: "Rahu"}

KARAKA_NAMES = [
    "Atmakaraka", "Amatyakaraka", "Bhratrikaraka", "Matrikaraka",
    "Putrakaraka", "Gnatikaraka", "Darakaraka",
]


def jaimini_karakas(chart: NatalChart) -> Dict[str, str]:
    """
    Seven Chara karakas ranked by degree travelled within the sign.
    """
    ranked = sorted(
        CLASSICAL_PLANETS,
        key=lambda name: (-chart.planet(name).degree, CLASSICAL_PLANETS.index(name)),
    )
    return dict(zip(KARAKA_NAMES, ranked))


class CharaDasha(BaseDashaSystem):
    """
    Jaimini Chara dasha (K. N. Rao method).

    This class:
    - Runs signs from the lagna, direction set by the 9th house sign
    - Derives each sign's years from the distance to its lord
    - Follows the first round with a second of (12 - years) so the full
      cycle totals 144 years
    """

    system = "Chara"
    cycle_years = 144.0
    # Twelve-way splits grow fast; Antar and Pratyantar levels only
    max_depth = 3

    def generate(self, chart: NatalChart, depth: int = 3) -> DashaTimeline:
        lagna = chart.ascendant.sign_index
        ninth = (lagna + 8) % 12
        step = 1 if ninth in SAVYA_SIGNS else -1

        order = [(lagna + step * i) % 12 for i in range(12)]
        first_round = [(sign, self.sign_years(chart, sign)) for sign in order]

        segments: List[Segment] = [
            (SIGNS[sign], float(years), None) for sign, years in first_round
        ]
        segments += [
            (SIGNS[sign], float(12 - years), None)
            for sign, years in first_round
            if years < 12
        ]

        return self._timeline(
            chart.birth_utc,
            segments,
            depth,
            balance_years=float(first_round[0][1]),
        )

    def sub_sequence(self, parent: DashaPeriod) -> List[Segment]:
        """
        Twelve equal sub-periods opening from the sign after the parent and
        closing on the parent sign itself.
        """
        sign = SIGNS.index(parent.lord)
        step = 1 if sign in SAVYA_SIGNS else -1
        share = parent.duration_years / 12.0

        return [
            (SIGNS[(sign + step * i) % 12], share, None)
            for i in range(1, 13)
        ]

    # ─────────────────────────────────────────────
    # Sign years
    # ─────────────────────────────────────────────

    def sign_years(self, chart: NatalChart, sign: int) -> int:
        lord_sign = chart.planet(self.sign_lord(chart, sign)).sign_index

        if sign in SAVYA_SIGNS:
            count = (lord_sign - sign) % 12
        else:
            count = (sign - lord_sign) % 12

        # Lord in its own sign gives the full twelve years
        return count if count else 12

    def sign_lord(self, chart: NatalChart, sign: int) -> str:
        lord = SIGN_LORDS[sign]
        co_lord = CO_LORDS.get(sign)
        if co_lord is None:
            return lord

        lord_pos = chart.planet(lord)
        co_pos = chart.planet(co_lord)

        # A co-lord sitting in the sign hands rulership to the other one
        if lord_pos.sign_index == sign and co_pos.sign_index != sign:
            return co_lord
        if co_pos.sign_index == sign and lord_pos.sign_index != sign:
            return lord

        lord_company = self._company(chart, lord_pos.sign_index)
        co_company = self._company(chart, co_pos.sign_index)
        if lord_company != co_company:
            return lord if lord_company > co_company else co_lord

        return lord if lord_pos.degree >= co_pos.degree else co_lord

    def _company(self, chart: NatalChart, sign: int) -> int:
        return sum(1 for p in chart.planets.values() if p.sign_index == sign)
