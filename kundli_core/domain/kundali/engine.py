from typing import Any, Dict, List, Optional

from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.calculator import KundaliCalculator
from kundli_core.domain.kundali.dignity import dignity_of
from kundli_core.domain.kundali.houses import HouseCalculator
from kundli_core.domain.kundali.nakshatra import NakshatraCalculator
from kundli_core.domain.kundali.schemas import (
    AscendantPosition,
    CalculationSettings,
    NatalChart,
    PlanetPosition,
)
from kundli_core.domain.kundali.zodiac import (
    SIGN_LORDS,
    SIGNS,
    degree_in_sign,
    normalize,
    sign_index,
)


class ChartBuilder:
    """
    Orchestrates natal chart construction.

    This class:
    - Delegates raw astronomy to KundaliCalculator
    - Assigns houses, nakshatras and dignities
    - Returns the canonical NatalChart
    """

    def __init__(
        self,
        calculator: Optional[KundaliCalculator] = None,
        houses: Optional[HouseCalculator] = None,
        nakshatras: Optional[NakshatraCalculator] = None,
    ):
        self.calculator = calculator or KundaliCalculator()
        self.houses = houses or HouseCalculator()
        self.nakshatras = nakshatras or NakshatraCalculator()

    def generate(
        self,
        birth: BirthDetails,
        settings: CalculationSettings,
    ) -> NatalChart:
        """
        Generate the core D1 chart.

        This method is:
        - Pure
        - Deterministic
        - Side-effect free
        """

        # ─────────────────────────────────────────────
        # Step 1: Raw astronomical calculation
        # ─────────────────────────────────────────────

        raw_result = self.calculator.calculate(birth, settings)

        return self.build(raw_result, settings)

    def build(
        self,
        raw_result: Dict[str, Any],
        settings: CalculationSettings,
    ) -> NatalChart:
        """
        Assemble a NatalChart from raw sidereal data.
        """

        # ─────────────────────────────────────────────
        # Step 2: House cusps
        # ─────────────────────────────────────────────

        cusps = self.houses.cusps(
            raw_result["ascendant"],
            settings.house_system,
            raw_result.get("cusps", ()),
        )

        # ─────────────────────────────────────────────
        # Step 3: Ascendant and planet positions
        # ─────────────────────────────────────────────

        ascendant = self.ascendant_position(raw_result["ascendant"])

        planets: Dict[str, PlanetPosition] = {}
        for name, data in raw_result["planets"].items():
            planets[name] = self.planet_position(
                name,
                data["longitude"],
                data["speed"],
                cusps,
            )

        # ─────────────────────────────────────────────
        # Step 4: Assemble natal chart
        # ─────────────────────────────────────────────

        houses = self.houses.build(
            cusps,
            settings.house_system,
            {name: p.house for name, p in planets.items()},
        )

        return NatalChart(
            birth_utc=raw_result["birth_utc"],
            julian_day=raw_result["julian_day"],
            ayanamsa=settings.ayanamsa,
            ayanamsa_value=raw_result["ayanamsa"],
            house_system=settings.house_system,
            node_type=settings.node_type,
            ascendant=ascendant,
            planets=planets,
            houses=houses,
        )

    # ─────────────────────────────────────────────
    # Position helpers
    # ─────────────────────────────────────────────

    def ascendant_position(self, longitude: float) -> AscendantPosition:
        lon = normalize(longitude)
        index = sign_index(lon)
        nakshatra_index, pada = self.nakshatras.calculate(lon)

        return AscendantPosition(
            longitude=lon,
            sign_index=index,
            sign=SIGNS[index],
            degree=degree_in_sign(lon),
            nakshatra=self.nakshatras.name(nakshatra_index),
            nakshatra_index=nakshatra_index,
            nakshatra_lord=self.nakshatras.lord(nakshatra_index),
            pada=pada,
            lord=SIGN_LORDS[index],
        )

    def planet_position(
        self,
        name: str,
        longitude: float,
        speed: float,
        cusps: List[float],
    ) -> PlanetPosition:
        lon = normalize(longitude)
        index = sign_index(lon)
        degree = degree_in_sign(lon)
        nakshatra_index, pada = self.nakshatras.calculate(lon)

        return PlanetPosition(
            name=name,
            longitude=lon,
            sign_index=index,
            sign=SIGNS[index],
            degree=degree,
            house=self.houses.house_of(lon, cusps),
            nakshatra=self.nakshatras.name(nakshatra_index),
            nakshatra_index=nakshatra_index,
            nakshatra_lord=self.nakshatras.lord(nakshatra_index),
            pada=pada,
            speed=speed,
            retrograde=speed < 0,
            dignity=dignity_of(name, index, degree),
        )
