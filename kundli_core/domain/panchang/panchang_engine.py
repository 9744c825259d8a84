import logging
from datetime import date, datetime, timedelta
from typing import Dict, Optional

from kundli_core.domain.kundali.ayanamsa import AyanamsaCorrector
from kundli_core.domain.kundali.ephemeris import EphemerisAdapter
from kundli_core.domain.kundali.nakshatra import NakshatraCalculator
from kundli_core.domain.kundali.schemas import CalculationSettings
from kundli_core.domain.kundali.zodiac import NAKSHATRA_SPAN, normalize, segment_index
from kundli_core.domain.panchang.hora import (
    WEEKDAY_LORDS,
    WEEKDAY_NAMES,
    build_horas,
    weekday_index,
)
from kundli_core.domain.panchang.schemas import (
    KaranaInfo,
    Panchang,
    PanchangNakshatra,
    PanchangYoga,
    TimeInterval,
    TithiInfo,
)
from kundli_core.domain.panchang.sun import SunCalculator
from kundli_core.validation.validators import (
    validate_latitude,
    validate_longitude,
    validate_timezone,
)

logger = logging.getLogger(__name__)


TITHI_NAMES = [
    "Pratipada", "Dwitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashthi", "Saptami", "Ashtami", "Navami", "Dashami",
    "Ekadashi", "Dwadashi", "Trayodashi", "Chaturdashi",
]

YOGA_NAMES = [
    "Vishkumbha", "Priti", "Ayushman", "Saubhagya", "Shobhana",
    "Atiganda", "Sukarma", "Dhriti", "Shula", "Ganda",
    "Vriddhi", "Dhruva", "Vyaghata", "Harshana", "Vajra",
    "Siddhi", "Vyatipata", "Variyan", "Parigha", "Shiva",
    "Siddha", "Sadhya", "Shubha", "Shukla", "Brahma",
    "Indra", "Vaidhriti",
]

# Seven movable karanas cycle through half-tithis 1..56
MOVABLE_KARANAS = ["Bava", "Balava", "Kaulava", "Taitila", "Gara", "Vanija", "Vishti"]
FIXED_KARANAS = {0: "Kimstughna", 57: "Shakuni", 58: "Chatushpada", 59: "Nagava"}

MOON_PHASES = [
    "New Moon", "Waxing Crescent", "First Quarter", "Waxing Gibbous",
    "Full Moon", "Waning Gibbous", "Last Quarter", "Waning Crescent",
]

# Eighth of daylight (1-based) per weekday, Sunday first
RAHU_KAAL_SEGMENTS = [8, 2, 7, 5, 6, 4, 3]
YAMAGANDA_SEGMENTS = [5, 4, 3, 2, 1, 7, 6]
GULIKA_SEGMENTS = [7, 6, 5, 4, 3, 2, 1]


def tithi_from_phase(phase: float) -> TithiInfo:
    phase = normalize(phase)
    index = segment_index(phase, 12.0, 30)

    if index == 14:
        name = "Purnima"
    elif index == 29:
        name = "Amavasya"
    else:
        name = TITHI_NAMES[index % 15]

    return TithiInfo(
        index=index,
        number=index % 15 + 1,
        name=name,
        paksha="Shukla" if index < 15 else "Krishna",
        completion=round(max(0.0, phase - index * 12.0) / 12.0, 4),
    )


def karana_from_phase(phase: float) -> KaranaInfo:
    index = segment_index(normalize(phase), 6.0, 60)
    name = FIXED_KARANAS.get(index) or MOVABLE_KARANAS[(index - 1) % 7]
    return KaranaInfo(index=index, name=name)


def yoga_from_longitudes(sun: float, moon: float) -> PanchangYoga:
    index = segment_index(normalize(sun + moon), NAKSHATRA_SPAN, 27)
    return PanchangYoga(index=index, name=YOGA_NAMES[index])


def moon_phase_name(phase: float) -> str:
    return MOON_PHASES[int(normalize(phase + 22.5) // 45.0) % 8]


def day_segment(sunrise: datetime, sunset: datetime, segment: int) -> TimeInterval:
    """The segment-th (1-based) eighth of the daylight span."""
    eighth = (sunset - sunrise) / 8
    start = sunrise + eighth * (segment - 1)
    end = sunset if segment == 8 else start + eighth
    return TimeInterval(start=start, end=end)


class PanchangEngine:
    """
    Builds the daily Panchang for a date and place.

    Every limb is taken at local sunrise.
    """

    def __init__(
        self,
        ephemeris: Optional[EphemerisAdapter] = None,
        ayanamsa: Optional[AyanamsaCorrector] = None,
        sun: Optional[SunCalculator] = None,
        nakshatras: Optional[NakshatraCalculator] = None,
    ):
        self.ephemeris = ephemeris or EphemerisAdapter()
        self.ayanamsa = ayanamsa or AyanamsaCorrector()
        self.sun = sun or SunCalculator(self.ephemeris)
        self.nakshatras = nakshatras or NakshatraCalculator()

    def generate(
        self,
        day: date,
        latitude: float,
        longitude: float,
        timezone: str,
        settings: Optional[CalculationSettings] = None,
    ) -> Panchang:
        settings = settings or CalculationSettings.default()
        latitude = validate_latitude(latitude)
        longitude = validate_longitude(longitude)
        timezone = validate_timezone(timezone)

        # Step 1: Day boundaries
        today = self.sun.sun_times(day, latitude, longitude, timezone)
        tomorrow = self.sun.sun_times(day + timedelta(days=1), latitude, longitude, timezone)

        # Step 2: Sidereal Sun and Moon at sunrise
        positions = self._sidereal_luminaries(today.sunrise, settings)
        sun, moon = positions["Sun"], positions["Moon"]
        phase = normalize(moon - sun)

        # Step 3: Limbs
        nak_index, pada = self.nakshatras.calculate(moon)
        weekday = weekday_index(day)
        day_lord = WEEKDAY_LORDS[weekday]

        logger.debug("Panchang %s: elongation %.4f, weekday %s", day, phase, WEEKDAY_NAMES[weekday])

        return Panchang(
            date=day,
            weekday=WEEKDAY_NAMES[weekday],
            weekday_lord=day_lord,
            latitude=latitude,
            longitude=longitude,
            timezone=timezone,
            sunrise=today.sunrise,
            sunset=today.sunset,
            next_sunrise=tomorrow.sunrise,
            polar_fallback=today.polar or tomorrow.polar,
            tithi=tithi_from_phase(phase),
            nakshatra=PanchangNakshatra(
                index=nak_index,
                name=self.nakshatras.name(nak_index),
                lord=self.nakshatras.lord(nak_index),
                pada=pada,
            ),
            yoga=yoga_from_longitudes(sun, moon),
            karana=karana_from_phase(phase),
            moon_phase=moon_phase_name(phase),
            rahu_kaal=day_segment(today.sunrise, today.sunset, RAHU_KAAL_SEGMENTS[weekday]),
            yamaganda=day_segment(today.sunrise, today.sunset, YAMAGANDA_SEGMENTS[weekday]),
            gulika_kaal=day_segment(today.sunrise, today.sunset, GULIKA_SEGMENTS[weekday]),
            horas=build_horas(today.sunrise, today.sunset, tomorrow.sunrise, day_lord),
        )

    def _sidereal_luminaries(
        self,
        instant: datetime,
        settings: CalculationSettings,
    ) -> Dict[str, float]:
        states = self.ephemeris.positions(instant, settings.node_type)
        offset = self.ayanamsa.offset(instant, settings.ayanamsa)
        return {
            name: normalize(states[name].longitude - offset)
            for name in ("Sun", "Moon")
        }
