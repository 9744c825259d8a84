import logging
from typing import Dict, List, Optional, Tuple

from kundli_core.domain.comparison.schemas import (
    HouseOverlay,
    SynastryAspect,
    SynastryResult,
)
from kundli_core.domain.kundali.houses import HouseCalculator
from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.kundali.zodiac import SIGNS, angular_distance, sign_index

logger = logging.getLogger(__name__)


# name → (angle, orb)
SYNASTRY_ASPECTS: Dict[str, Tuple[float, float]] = {
    "conjunction": (0.0, 8.0),
    "sextile": (60.0, 5.0),
    "square": (90.0, 7.0),
    "trine": (120.0, 7.0),
    "quincunx": (150.0, 3.0),
    "opposition": (180.0, 8.0),
}

ASPECT_NATURE = {
    "conjunction": "neutral",
    "sextile": "harmonious",
    "trine": "harmonious",
    "square": "challenging",
    "opposition": "challenging",
    "quincunx": "adjusting",
}

# Score contribution of an exact aspect of each nature
NATURE_VALUE = {
    "harmonious": 10.0,
    "challenging": -8.0,
    "neutral": 3.0,
    "adjusting": -2.0,
}

# Personal bodies weigh more in ordering and scoring
PLANET_WEIGHTS = {
    "Sun": 10.0, "Moon": 10.0, "Venus": 9.0, "Mars": 8.0,
    "Jupiter": 7.0, "Saturn": 7.0, "Mercury": 6.0,
    "Rahu": 4.0, "Ketu": 4.0,
}

NEUTRAL_SCORE = 50.0


def find_aspect(first: float, second: float) -> Optional[Tuple[str, float, float]]:
    """
    (aspect name, exact angle, orb) for two longitudes, or None.
    """
    separation = angular_distance(first, second)
    for name, (angle, max_orb) in SYNASTRY_ASPECTS.items():
        orb = abs(separation - angle)
        if orb <= max_orb:
            return name, angle, orb
    return None


class SynastryCalculator:
    """
    Compares two natal charts body by body.

    - Inter-chart aspects, ordered by the weight of the pair, then orb
    - House overlays in both directions
    - A heuristic 0..100 score that starts at 50
    """

    def __init__(self, houses: Optional[HouseCalculator] = None):
        self.houses = houses or HouseCalculator()

    def compare(
        self,
        first: NatalChart,
        second: NatalChart,
        first_name: str = "First",
        second_name: str = "Second",
    ) -> SynastryResult:
        aspects: List[SynastryAspect] = []

        for one in first.planets.values():
            for other in second.planets.values():
                found = find_aspect(one.longitude, other.longitude)
                if found is None:
                    continue

                name, angle, orb = found
                aspects.append(SynastryAspect(
                    first_body=one.name,
                    second_body=other.name,
                    aspect=name,
                    angle=angle,
                    orb=round(orb, 4),
                    nature=ASPECT_NATURE[name],
                    weight=PLANET_WEIGHTS.get(one.name, 5.0) + PLANET_WEIGHTS.get(other.name, 5.0),
                ))

        aspects.sort(key=lambda a: (-a.weight, a.orb, a.first_body, a.second_body))
        score = self.score(aspects)

        logger.debug(
            "Synastry %s / %s: %d aspects, score %.1f",
            first_name,
            second_name,
            len(aspects),
            score,
        )

        return SynastryResult(
            first_name=first_name,
            second_name=second_name,
            aspects=aspects,
            first_in_second=self.overlay(first, second),
            second_in_first=self.overlay(second, first),
            score=score,
        )

    def overlay(self, guest: NatalChart, host: NatalChart) -> List[HouseOverlay]:
        """
        Houses of host occupied by each body of guest.
        """
        cusps = [house.cusp for house in host.houses]
        return [
            HouseOverlay(
                body=planet.name,
                longitude=planet.longitude,
                sign=SIGNS[sign_index(planet.longitude)],
                house=self.houses.house_of(planet.longitude, cusps),
            )
            for planet in guest.planets.values()
        ]

    def score(self, aspects: List[SynastryAspect]) -> float:
        if not aspects:
            return NEUTRAL_SCORE

        total = NEUTRAL_SCORE
        for aspect in aspects:
            max_orb = SYNASTRY_ASPECTS[aspect.aspect][1]
            tightness = 1.0 - aspect.orb / max_orb
            total += NATURE_VALUE[aspect.nature] * tightness * aspect.weight / 10.0

        return round(min(max(total, 0.0), 100.0), 2)
