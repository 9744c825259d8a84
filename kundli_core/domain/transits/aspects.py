from typing import Dict, List, Optional, Tuple

from kundli_core.domain.kundali.schemas import NatalChart, PlanetPosition
from kundli_core.domain.kundali.zodiac import (
    angular_distance,
    normalize,
    signed_separation,
)
from kundli_core.domain.transits.schemas import TransitAspect


# name → (angle, orb)
MAJOR_ASPECTS: Dict[str, Tuple[float, float]] = {
    "conjunction": (0.0, 8.0),
    "sextile": (60.0, 6.0),
    "square": (90.0, 7.0),
    "trine": (120.0, 8.0),
    "opposition": (180.0, 8.0),
}

# Vedic special aspects: the body looks forward by these arcs
SPECIAL_ASPECTS: Dict[str, Dict[str, float]] = {
    "Mars": {"4th aspect": 90.0, "8th aspect": 210.0},
    "Jupiter": {"5th aspect": 120.0, "9th aspect": 240.0},
    "Saturn": {"3rd aspect": 60.0, "10th aspect": 270.0},
}
SPECIAL_ORB = 5.0


def aspect_strength(orb: float) -> str:
    if orb < 2.0:
        return "strong"
    if orb < 5.0:
        return "moderate"
    return "weak"


def is_applying(transiting: float, exact_point: float, speed: float) -> bool:
    """
    True when daily motion carries the body towards the exact point.
    """
    return signed_separation(transiting, exact_point) * speed < 0


class AspectCalculator:
    """
    Finds aspects from transiting bodies to natal points.

    Each (transiting, natal) pair yields at most one aspect; a major aspect
    takes precedence over a special one.
    """

    def find(
        self,
        positions: Dict[str, PlanetPosition],
        natal: NatalChart,
    ) -> List[TransitAspect]:
        targets = {name: p.longitude for name, p in natal.planets.items()}
        targets["Ascendant"] = natal.ascendant.longitude

        aspects: List[TransitAspect] = []
        for transiting in positions.values():
            for natal_name, natal_lon in targets.items():
                aspect = (
                    self._major(transiting, natal_name, natal_lon)
                    or self._special(transiting, natal_name, natal_lon)
                )
                if aspect:
                    aspects.append(aspect)

        return sorted(aspects, key=lambda a: (a.orb, a.transiting, a.natal))

    def _major(
        self,
        transiting: PlanetPosition,
        natal_name: str,
        natal_lon: float,
    ) -> Optional[TransitAspect]:
        separation = angular_distance(transiting.longitude, natal_lon)

        for name, (angle, max_orb) in MAJOR_ASPECTS.items():
            orb = abs(separation - angle)
            if orb > max_orb:
                continue

            exact_points = {normalize(natal_lon + angle), normalize(natal_lon - angle)}
            exact = min(
                exact_points,
                key=lambda point: angular_distance(transiting.longitude, point),
            )
            return TransitAspect(
                transiting=transiting.name,
                natal=natal_name,
                aspect=name,
                angle=angle,
                orb=round(orb, 4),
                applying=is_applying(transiting.longitude, exact, transiting.speed),
                strength=aspect_strength(orb),
            )

        return None

    def _special(
        self,
        transiting: PlanetPosition,
        natal_name: str,
        natal_lon: float,
    ) -> Optional[TransitAspect]:
        for name, arc in SPECIAL_ASPECTS.get(transiting.name, {}).items():
            exact = normalize(natal_lon - arc)
            orb = angular_distance(transiting.longitude, exact)
            if orb > SPECIAL_ORB:
                continue

            return TransitAspect(
                transiting=transiting.name,
                natal=natal_name,
                aspect=name,
                angle=arc,
                orb=round(orb, 4),
                applying=is_applying(transiting.longitude, exact, transiting.speed),
                strength=aspect_strength(orb),
            )

        return None
