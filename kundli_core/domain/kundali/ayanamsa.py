from datetime import datetime
from typing import Union

import swisseph as swe

from kundli_core.domain.kundali.ephemeris import SWE_LOCK, julian_day
from kundli_core.domain.kundali.errors import UnsupportedConfigurationError
from kundli_core.domain.kundali.schemas import AyanamsaType
from kundli_core.domain.kundali.zodiac import normalize


SIDEREAL_MODES = {
    AyanamsaType.LAHIRI: swe.SIDM_LAHIRI,
    AyanamsaType.RAMAN: swe.SIDM_RAMAN,
    AyanamsaType.KRISHNAMURTI: swe.SIDM_KRISHNAMURTI,
    AyanamsaType.FAGAN_BRADLEY: swe.SIDM_FAGAN_BRADLEY,
    AyanamsaType.YUKTESHWAR: swe.SIDM_YUKTESHWAR,
    AyanamsaType.TRUE_CHITRAPAKSHA: swe.SIDM_TRUE_CITRA,
}

Instant = Union[datetime, float]


def _as_julian_day(when: Instant) -> float:
    if isinstance(when, datetime):
        return julian_day(when)
    return float(when)


class AyanamsaCorrector:
    """
    Converts tropical longitudes to the sidereal zodiac.

    `when` may be an aware datetime or a Julian Day (UT).
    """

    def offset(self, when: Instant, system: AyanamsaType) -> float:
        """
        Ayanamsa in degrees for the given system and instant.
        """
        mode = SIDEREAL_MODES.get(system)
        if mode is None:
            raise UnsupportedConfigurationError(f"Unsupported ayanamsa: {system}")

        jd = _as_julian_day(when)
        with SWE_LOCK:
            swe.set_sid_mode(mode, 0, 0)
            return swe.get_ayanamsa_ut(jd)

    def sidereal(self, longitude: float, when: Instant, system: AyanamsaType) -> float:
        return normalize(longitude - self.offset(when, system))
