import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from kundli_core.domain.kundali.ephemeris import (
    EphemerisAdapter,
    datetime_from_julian_day,
    julian_day,
)

logger = logging.getLogger(__name__)


# Apparent altitude of the Sun's upper limb at the horizon, with refraction
SUNRISE_ALTITUDE = -0.833

SAMPLE_MINUTES = 10
BISECTION_STEPS = 30


@dataclass(frozen=True)
class SunTimes:
    """
    Sunrise and sunset of one civil day, in local time.
    """
    sunrise: datetime
    sunset: datetime
    polar: bool = False

    @property
    def daylight(self) -> timedelta:
        return self.sunset - self.sunrise


class SunCalculator:
    """
    Finds sunrise and sunset by searching the Sun's altitude.

    This class:
    - Samples the altitude across the local day
    - Refines each horizon crossing by bisection
    - Falls back to 06:00 and 18:00 where the Sun never crosses
    """

    def __init__(self, ephemeris: Optional[EphemerisAdapter] = None):
        self.ephemeris = ephemeris or EphemerisAdapter()

    def altitude(self, jd: float, latitude: float, longitude: float) -> float:
        """Geometric altitude of the Sun's centre in degrees."""
        ra, dec = self.ephemeris.sun_equatorial(jd)
        local_sidereal = self.ephemeris.sidereal_time(jd) * 15.0 + longitude
        hour_angle = math.radians(local_sidereal - ra)

        lat = math.radians(latitude)
        dec = math.radians(dec)
        sin_alt = (
            math.sin(lat) * math.sin(dec)
            + math.cos(lat) * math.cos(dec) * math.cos(hour_angle)
        )
        return math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))

    def sun_times(
        self,
        day: date,
        latitude: float,
        longitude: float,
        tz_name: str,
    ) -> SunTimes:
        tz = ZoneInfo(tz_name)
        local_midnight = datetime.combine(day, time(0, 0), tzinfo=tz)
        start_jd = julian_day(local_midnight)

        def height(jd: float) -> float:
            return self.altitude(jd, latitude, longitude) - SUNRISE_ALTITUDE

        sunrise_jd = self._crossing(height, start_jd, rising=True)
        sunset_jd = None
        if sunrise_jd is not None:
            sunset_jd = self._crossing(height, sunrise_jd, rising=False)

        if sunrise_jd is None or sunset_jd is None:
            logger.warning(
                "No sunrise/sunset on %s at latitude %.4f; using 06:00-18:00",
                day.isoformat(),
                latitude,
            )
            return SunTimes(
                sunrise=datetime.combine(day, time(6, 0), tzinfo=tz),
                sunset=datetime.combine(day, time(18, 0), tzinfo=tz),
                polar=True,
            )

        return SunTimes(
            sunrise=self._local(sunrise_jd, tz),
            sunset=self._local(sunset_jd, tz),
        )

    # ─────────────────────────────────────────────
    # Root search
    # ─────────────────────────────────────────────

    def _crossing(
        self,
        height: Callable[[float], float],
        start_jd: float,
        rising: bool,
    ) -> Optional[float]:
        step = SAMPLE_MINUTES / 1440.0
        samples = int(1440 / SAMPLE_MINUTES)

        previous_jd = start_jd
        previous = height(previous_jd)

        for index in range(1, samples + 1):
            current_jd = start_jd + index * step
            current = height(current_jd)

            if rising and previous < 0.0 <= current:
                return self._bisect(height, previous_jd, current_jd)
            if not rising and previous >= 0.0 > current:
                return self._bisect(height, previous_jd, current_jd)

            previous_jd, previous = current_jd, current

        return None

    def _bisect(
        self,
        height: Callable[[float], float],
        low: float,
        high: float,
    ) -> float:
        low_sign = height(low) < 0.0
        for _ in range(BISECTION_STEPS):
            middle = (low + high) / 2.0
            if (height(middle) < 0.0) == low_sign:
                low = middle
            else:
                high = middle
        return (low + high) / 2.0

    def _local(self, jd: float, tz: ZoneInfo) -> datetime:
        instant = datetime_from_julian_day(jd).replace(microsecond=0)
        return instant.astimezone(tz)
