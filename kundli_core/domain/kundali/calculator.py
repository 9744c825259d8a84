from typing import Any, Dict, Optional

from kundli_core.domain.kundali.ayanamsa import AyanamsaCorrector
from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.ephemeris import EphemerisAdapter, julian_day
from kundli_core.domain.kundali.schemas import CalculationSettings
from kundli_core.domain.kundali.zodiac import normalize


class KundaliCalculator:
    """
    Astronomical calculator for kundli generation.

    This class:
    - Converts birth inputs into sidereal longitudes and daily motion
    - Resolves the ascendant and house cusps for the birth location
    - Returns raw, structured data (no domain objects)
    """

    def __init__(
        self,
        ephemeris: Optional[EphemerisAdapter] = None,
        ayanamsa: Optional[AyanamsaCorrector] = None,
    ):
        self.ephemeris = ephemeris or EphemerisAdapter()
        self.ayanamsa = ayanamsa or AyanamsaCorrector()

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def calculate(
        self,
        birth: BirthDetails,
        settings: CalculationSettings,
    ) -> Dict[str, Any]:
        """
        Calculate core astronomical data for a kundli.

        Returns a normalized dict consumed by ChartBuilder.
        """

        # Step 1: Birth instant
        birth_utc = birth.utc_datetime
        jd = julian_day(birth_utc)

        # Step 2: Ayanamsa, resolved once for every longitude below
        offset = self.ayanamsa.offset(jd, settings.ayanamsa)

        # Step 3: Planetary positions
        planets = {}
        for name, state in self.ephemeris.positions_at(jd, settings.node_type).items():
            planets[name] = {
                "longitude": normalize(state.longitude - offset),
                "speed": state.speed,
            }

        # Step 4: Ascendant and cusps
        cusps, ascendant, midheaven = self.ephemeris.house_cusps(
            jd,
            birth.latitude,
            birth.longitude,
            settings.house_system,
        )

        return {
            "birth_utc": birth_utc,
            "julian_day": jd,
            "ayanamsa": offset,
            "planets": planets,
            "ascendant": normalize(ascendant - offset),
            "midheaven": normalize(midheaven - offset),
            "cusps": [normalize(c - offset) for c in cusps],
        }
