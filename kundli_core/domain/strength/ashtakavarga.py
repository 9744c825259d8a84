from typing import Dict, List, Set

from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.kundali.zodiac import CLASSICAL_PLANETS, SIGNS, house_distance
from kundli_core.domain.strength.schemas import AshtakavargaData, SignStrength


LAGNA = "Ascendant"

# Benefic places (houses counted from each reference) per receiving planet.
# Row sums: Sun 48, Moon 49, Mars 39, Mercury 54, Jupiter 56, Venus 52,
# Saturn 39; Sarvashtakavarga 337.
BINDU_TABLES: Dict[str, Dict[str, Set[int]]] = {
    "Sun": {
        "Sun": {1, 2, 4, 7, 8, 9, 10, 11},
        "Moon": {3, 6, 10, 11},
        "Mars": {1, 2, 4, 7, 8, 9, 10, 11},
        "Mercury": {3, 5, 6, 9, 10, 11, 12},
        "Jupiter": {5, 6, 9, 11},
        "Venus": {6, 7, 12},
        "Saturn": {1, 2, 4, 7, 8, 9, 10, 11},
        LAGNA: {3, 4, 6, 10, 11, 12},
    },
    "Moon": {
        "Sun": {3, 6, 7, 8, 10, 11},
        "Moon": {1, 3, 6, 7, 10, 11},
        "Mars": {2, 3, 5, 6, 9, 10, 11},
        "Mercury": {1, 3, 4, 5, 7, 8, 10, 11},
        "Jupiter": {1, 4, 7, 8, 10, 11, 12},
        "Venus": {3, 4, 5, 7, 9, 10, 11},
        "Saturn": {3, 5, 6, 11},
        LAGNA: {3, 6, 10, 11},
    },
    "Mars": {
        "Sun": {3, 5, 6, 10, 11},
        "Moon": {3, 6, 11},
        "Mars": {1, 2, 4, 7, 8, 10, 11},
        "Mercury": {3, 5, 6, 11},
        "Jupiter": {6, 10, 11, 12},
        "Venus": {6, 8, 11, 12},
        "Saturn": {1, 4, 7, 8, 9, 10, 11},
        LAGNA: {1, 3, 6, 10, 11},
    },
    "Mercury": {
        "Sun": {5, 6, 9, 11, 12},
        "Moon": {2, 4, 6, 8, 10, 11},
        "Mars": {1, 2, 4, 7, 8, 9, 10, 11},
        "Mercury": {1, 3, 5, 6, 9, 10, 11, 12},
        "Jupiter": {6, 8, 11, 12},
        "Venus": {1, 2, 3, 4, 5, 8, 9, 11},
        "Saturn": {1, 2, 4, 7, 8, 9, 10, 11},
        LAGNA: {1, 2, 4, 6, 8, 10, 11},
    },
    "Jupiter": {
        "Sun": {1, 2, 3, 4, 7, 8, 9, 10, 11},
        "Moon": {2, 5, 7, 9, 11},
        "Mars": {1, 2, 4, 7, 8, 10, 11},
        "Mercury": {1, 2, 4, 5, 6, 9, 10, 11},
        "Jupiter": {1, 2, 3, 4, 7, 8, 10, 11},
        "Venus": {2, 5, 6, 9, 10, 11},
        "Saturn": {3, 5, 6, 12},
        LAGNA: {1, 2, 4, 5, 6, 7, 9, 10, 11},
    },
    "Venus": {
        "Sun": {8, 11, 12},
        "Moon": {1, 2, 3, 4, 5, 8, 9, 11, 12},
        "Mars": {3, 5, 6, 9, 11, 12},
        "Mercury": {3, 5, 6, 9, 11},
        "Jupiter": {5, 8, 9, 10, 11},
        "Venus": {1, 2, 3, 4, 5, 8, 9, 10, 11},
        "Saturn": {3, 4, 5, 8, 9, 10, 11},
        LAGNA: {1, 2, 3, 4, 5, 8, 9, 11},
    },
    "Saturn": {
        "Sun": {1, 2, 4, 7, 8, 10, 11},
        "Moon": {3, 6, 11},
        "Mars": {3, 5, 6, 10, 11, 12},
        "Mercury": {6, 8, 9, 10, 11, 12},
        "Jupiter": {5, 6, 11, 12},
        "Venus": {6, 11, 12},
        "Saturn": {3, 5, 6, 11},
        LAGNA: {1, 3, 4, 6, 10, 11},
    },
}

STRONG_SIGN_POINTS = 30
MODERATE_SIGN_POINTS = 25


def classify_sign(points: int) -> str:
    if points >= STRONG_SIGN_POINTS:
        return "strong"
    if points >= MODERATE_SIGN_POINTS:
        return "moderate"
    return "weak"


class AshtakavargaCalculator:
    """
    Computes Bhinna and Sarva Ashtakavarga from D1 sign placements.
    """

    def calculate(self, chart: NatalChart) -> AshtakavargaData:
        references = {
            name: chart.planet(name).sign_index for name in CLASSICAL_PLANETS
        }
        references[LAGNA] = chart.ascendant.sign_index

        bhinna: Dict[str, List[int]] = {
            planet: self._bhinna_row(planet, references)
            for planet in CLASSICAL_PLANETS
        }

        sarva = [
            sum(bhinna[planet][sign] for planet in CLASSICAL_PLANETS)
            for sign in range(12)
        ]

        return AshtakavargaData(
            bhinna=bhinna,
            sarva=sarva,
            planet_totals={planet: sum(row) for planet, row in bhinna.items()},
            sign_strengths=[
                SignStrength(
                    sign_index=sign,
                    sign=SIGNS[sign],
                    points=points,
                    strength=classify_sign(points),
                )
                for sign, points in enumerate(sarva)
            ],
        )

    def _bhinna_row(self, planet: str, references: Dict[str, int]) -> List[int]:
        row = [0] * 12
        for reference, places in BINDU_TABLES[planet].items():
            origin = references[reference]
            for sign in range(12):
                if house_distance(origin, sign) in places:
                    row[sign] += 1
        return row
