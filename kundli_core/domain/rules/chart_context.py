from typing import Dict, Iterable, List, Set

from kundli_core.domain.kundali.dignity import (
    DEBILITATION_SIGN,
    EXALTATION_SIGN,
    is_debilitated,
    is_exalted,
    is_own_or_exalted,
)
from kundli_core.domain.kundali.schemas import NatalChart, PlanetPosition
from kundli_core.domain.kundali.zodiac import (
    KENDRA_HOUSES,
    SIGN_LORDS,
    angular_distance,
    house_distance,
)


# Graha drishti counted in signs; every planet aspects the 7th
SPECIAL_ASPECTS: Dict[str, Set[int]] = {
    "Mars": {4, 8},
    "Jupiter": {5, 9},
    "Saturn": {3, 10},
}


class ChartContext:
    """
    Read-only view over a natal chart with the lookups rules need.

    Houses come from the chart's own house assignment; relations between
    planets are counted sign to sign.
    """

    def __init__(self, chart: NatalChart):
        self.chart = chart

    # ─────────────────────────────────────────────
    # Positions
    # ─────────────────────────────────────────────

    def planet(self, name: str) -> PlanetPosition:
        return self.chart.planet(name)

    def sign(self, name: str) -> int:
        return self.chart.planet(name).sign_index

    def house(self, name: str) -> int:
        return self.chart.planet(name).house

    @property
    def lagna_sign(self) -> int:
        return self.chart.ascendant.sign_index

    @property
    def lagna_lord(self) -> str:
        return self.chart.ascendant.lord

    def house_from(self, reference: str, name: str) -> int:
        """House of `name` counted from the sign of `reference`."""
        return house_distance(self.sign(reference), self.sign(name))

    def in_house_from(self, reference: str, houses: Iterable[int]) -> List[str]:
        """
        Classical planets (no nodes) placed in the given houses from reference.
        """
        wanted = set(houses)
        return [
            name for name in self.chart.planets
            if name not in ("Rahu", "Ketu", reference)
            and self.house_from(reference, name) in wanted
        ]

    def occupants(self, house: int) -> List[str]:
        return self.chart.occupants(house)

    # ─────────────────────────────────────────────
    # Lordship
    # ─────────────────────────────────────────────

    def lord_of(self, house: int) -> str:
        return self.chart.house_lord(house)

    def lord_of_sign(self, sign: int) -> str:
        return SIGN_LORDS[sign]

    def houses_ruled(self, name: str) -> Set[int]:
        return {
            info.number for info in self.chart.houses
            if info.lord == name
        }

    # ─────────────────────────────────────────────
    # Relationships
    # ─────────────────────────────────────────────

    def conjunct(self, a: str, b: str) -> bool:
        return self.sign(a) == self.sign(b)

    def orb(self, a: str, b: str) -> float:
        return angular_distance(
            self.planet(a).longitude,
            self.planet(b).longitude,
        )

    def aspects_sign(self, name: str, sign: int) -> bool:
        distance = house_distance(self.sign(name), sign)
        return distance == 7 or distance in SPECIAL_ASPECTS.get(name, set())

    def aspects(self, name: str, target: str) -> bool:
        return self.aspects_sign(name, self.sign(target))

    def influences(self, name: str, target: str) -> bool:
        """Conjunction or aspect."""
        return self.conjunct(name, target) or self.aspects(name, target)

    def mutual_aspect(self, a: str, b: str) -> bool:
        return self.aspects(a, b) and self.aspects(b, a)

    def in_kendra_from(self, reference: str, name: str) -> bool:
        return self.house_from(reference, name) in KENDRA_HOUSES

    # ─────────────────────────────────────────────
    # Dignity
    # ─────────────────────────────────────────────

    def own_or_exalted(self, name: str) -> bool:
        return is_own_or_exalted(name, self.sign(name))

    def exalted(self, name: str) -> bool:
        return is_exalted(name, self.sign(name))

    def debilitated(self, name: str) -> bool:
        return is_debilitated(name, self.sign(name))

    def exaltation_lord_of(self, sign: int) -> List[str]:
        """Planets exalted in sign."""
        return [p for p, s in EXALTATION_SIGN.items() if s == sign]

    def debilitated_planets(self) -> List[str]:
        return [
            name for name in DEBILITATION_SIGN
            if name not in ("Rahu", "Ketu") and self.debilitated(name)
        ]
