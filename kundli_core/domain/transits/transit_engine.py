from datetime import datetime
from typing import Dict, List, Optional

from kundli_core.domain.kundali.ayanamsa import AyanamsaCorrector
from kundli_core.domain.kundali.engine import ChartBuilder
from kundli_core.domain.kundali.ephemeris import EphemerisAdapter, julian_day
from kundli_core.domain.kundali.schemas import NatalChart, PlanetPosition
from kundli_core.domain.kundali.zodiac import normalize


class TransitEngine:
    """
    Calculates planetary transits for a given datetime.

    This engine:
    - Uses the natal chart's ayanamsa and node settings
    - Places every transiting body in the natal house layout
    - Returns pure domain schemas
    """

    calculation_version = "v1"

    def __init__(
        self,
        ephemeris: Optional[EphemerisAdapter] = None,
        ayanamsa: Optional[AyanamsaCorrector] = None,
        chart_builder: Optional[ChartBuilder] = None,
    ):
        self.ephemeris = ephemeris or EphemerisAdapter()
        self.ayanamsa = ayanamsa or AyanamsaCorrector()
        self.chart_builder = chart_builder or ChartBuilder()

    def calculate(
        self,
        natal: NatalChart,
        timestamp: datetime,
    ) -> Dict[str, PlanetPosition]:
        """
        Sidereal transit positions at timestamp, housed against natal.
        """
        jd = julian_day(timestamp)
        return self.calculate_at(natal, jd)

    def calculate_at(self, natal: NatalChart, jd: float) -> Dict[str, PlanetPosition]:
        offset = self.ayanamsa.offset(jd, natal.ayanamsa)
        cusps: List[float] = [house.cusp for house in natal.houses]

        return {
            name: self.chart_builder.planet_position(
                name,
                normalize(state.longitude - offset),
                state.speed,
                cusps,
            )
            for name, state in self.ephemeris.positions_at(jd, natal.node_type).items()
        }
