from typing import Dict, Iterable, List

from kundli_core.domain.kundali.schemas import HouseInfo, HouseSystem
from kundli_core.domain.kundali.zodiac import (
    SIGN_LORDS,
    SIGN_SPAN,
    SIGNS,
    normalize,
    sign_index,
)


HOUSE_NAMES = {
    1: "Tanu", 2: "Dhana", 3: "Sahaja", 4: "Sukha",
    5: "Putra", 6: "Ari", 7: "Yuvati", 8: "Randhra",
    9: "Dharma", 10: "Karma", 11: "Labha", 12: "Vyaya",
}


class HouseCalculator:
    """
    Derives house cusps and assigns bodies to houses.

    Boundary policy: a body exactly on a cusp belongs to the house that
    cusp opens (inclusive lower bound, exclusive upper bound).
    """

    def cusps(
        self,
        ascendant: float,
        system: HouseSystem,
        ephemeris_cusps: Iterable[float] = (),
    ) -> List[float]:
        """
        Sidereal starting longitude of each of the twelve houses.

        `ephemeris_cusps` are the sidereal cusps from the house routine and
        are only used by the quadrant systems.
        """
        if system == HouseSystem.WHOLE_SIGN:
            start = sign_index(ascendant) * SIGN_SPAN
            return [normalize(start + SIGN_SPAN * i) for i in range(12)]

        if system == HouseSystem.EQUAL:
            return [normalize(ascendant + SIGN_SPAN * i) for i in range(12)]

        if system == HouseSystem.BHAVA_CHALITA:
            # Ascendant sits at the middle of the first bhava
            return [normalize(ascendant - 15.0 + SIGN_SPAN * i) for i in range(12)]

        cusps = [normalize(c) for c in ephemeris_cusps]
        assert len(cusps) == 12, "quadrant house systems need twelve cusps"
        return cusps

    def house_of(self, longitude: float, cusps: List[float]) -> int:
        """
        House (1..12) whose interval contains longitude.
        """
        lon = normalize(longitude)
        offsets = [(lon - cusp) % 360.0 for cusp in cusps]
        return offsets.index(min(offsets)) + 1

    def house_sign(self, number: int, cusps: List[float], system: HouseSystem) -> int:
        cusp = cusps[number - 1]
        if system == HouseSystem.BHAVA_CHALITA:
            cusp = cusp + 15.0
        return sign_index(cusp)

    def build(
        self,
        cusps: List[float],
        system: HouseSystem,
        placements: Dict[str, int],
    ) -> List[HouseInfo]:
        """
        Assemble the twelve HouseInfo records from body → house placements.
        """
        houses: List[HouseInfo] = []

        for number in range(1, 13):
            index = self.house_sign(number, cusps, system)
            houses.append(
                HouseInfo(
                    number=number,
                    sign_index=index,
                    sign=SIGNS[index],
                    cusp=round(cusps[number - 1], 6),
                    lord=SIGN_LORDS[index],
                    occupants=[
                        body for body, house in placements.items()
                        if house == number
                    ],
                )
            )

        return houses
