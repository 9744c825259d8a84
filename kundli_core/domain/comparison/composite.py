from typing import Dict, List, Optional

from kundli_core.domain.comparison.schemas import (
    CompositeAspect,
    CompositeChart,
    CompositePoint,
)
from kundli_core.domain.comparison.synastry import ASPECT_NATURE, SYNASTRY_ASPECTS
from kundli_core.domain.kundali.nakshatra import NakshatraCalculator
from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.kundali.zodiac import (
    SIGN_SPAN,
    SIGNS,
    angular_distance,
    degree_in_sign,
    normalize,
    sign_index,
    signed_separation,
)


# Quincunx is left out of composite aspects
COMPOSITE_ASPECTS = {
    name: value for name, value in SYNASTRY_ASPECTS.items() if name != "quincunx"
}


def midpoint(first: float, second: float) -> float:
    """
    Midpoint on the shorter arc between two longitudes.

    Exact oppositions resolve to first + 90.
    """
    return normalize(first + signed_separation(second, first) / 2.0)


class CompositeChartCalculator:
    """
    Builds a midpoint composite chart from two natal charts.
    """

    def __init__(self, nakshatras: Optional[NakshatraCalculator] = None):
        self.nakshatras = nakshatras or NakshatraCalculator()

    def calculate(
        self,
        first: NatalChart,
        second: NatalChart,
        first_name: str = "First",
        second_name: str = "Second",
    ) -> CompositeChart:
        ascendant_lon = midpoint(first.ascendant.longitude, second.ascendant.longitude)
        ascendant = self._point("Ascendant", ascendant_lon, ascendant_lon)

        planets: Dict[str, CompositePoint] = {}
        for name, planet in first.planets.items():
            other = second.planets.get(name)
            if other is None:
                continue
            longitude = midpoint(planet.longitude, other.longitude)
            planets[name] = self._point(name, longitude, ascendant_lon)

        return CompositeChart(
            first_name=first_name,
            second_name=second_name,
            ascendant=ascendant,
            planets=planets,
            aspects=self._aspects(list(planets.values())),
        )

    # ─────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────

    def _point(self, name: str, longitude: float, ascendant: float) -> CompositePoint:
        index, pada = self.nakshatras.calculate(longitude)
        sign = sign_index(longitude)
        return CompositePoint(
            name=name,
            longitude=round(longitude, 6),
            sign_index=sign,
            sign=SIGNS[sign],
            degree=round(degree_in_sign(longitude), 6),
            nakshatra=self.nakshatras.name(index),
            pada=pada,
            house=int(normalize(longitude - ascendant) // SIGN_SPAN) + 1,
        )

    def _aspects(self, points: List[CompositePoint]) -> List[CompositeAspect]:
        aspects: List[CompositeAspect] = []

        for i, one in enumerate(points):
            for other in points[i + 1:]:
                separation = angular_distance(one.longitude, other.longitude)
                for name, (angle, max_orb) in COMPOSITE_ASPECTS.items():
                    orb = abs(separation - angle)
                    if orb <= max_orb:
                        aspects.append(CompositeAspect(
                            first_body=one.name,
                            second_body=other.name,
                            aspect=name,
                            angle=angle,
                            orb=round(orb, 4),
                            nature=ASPECT_NATURE[name],
                        ))
                        break

        return sorted(aspects, key=lambda a: (a.orb, a.first_body, a.second_body))
