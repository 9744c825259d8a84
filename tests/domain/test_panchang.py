import unittest
from unittest.mock import MagicMock
import sys
import os
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo
sys.path.append(os.getcwd())

from kundli_core.domain.kundali.ephemeris import BodyState
from kundli_core.domain.kundali.errors import InvalidBirthDetailsError
from kundli_core.domain.panchang.hora import build_horas, hora_lord, weekday_index
from kundli_core.domain.panchang.panchang_engine import (
    RAHU_KAAL_SEGMENTS,
    PanchangEngine,
    day_segment,
    karana_from_phase,
    moon_phase_name,
    tithi_from_phase,
    yoga_from_longitudes,
)
from kundli_core.domain.panchang.sun import SunCalculator, SunTimes


IST = ZoneInfo("Asia/Kolkata")


class TestLimbs(unittest.TestCase):
    def test_tithi(self):
        first = tithi_from_phase(5.0)
        self.assertEqual((first.index, first.name, first.paksha), (0, "Pratipada", "Shukla"))
        self.assertAlmostEqual(first.completion, 0.4167, places=4)

        self.assertEqual(tithi_from_phase(170.0).name, "Purnima")
        last = tithi_from_phase(355.0)
        self.assertEqual((last.name, last.paksha, last.number), ("Amavasya", "Krishna", 15))
        self.assertEqual(tithi_from_phase(190.0).name, "Pratipada")
        # 11.9995 degrees is read as the start of Dwitiya
        second = tithi_from_phase(11.9995)
        self.assertEqual((second.index, second.completion), (1, 0.0))

    def test_karana(self):
        self.assertEqual(karana_from_phase(3.0).name, "Kimstughna")
        self.assertEqual(karana_from_phase(6.0).name, "Bava")
        self.assertEqual(karana_from_phase(45.0).name, "Vishti")
        self.assertEqual(karana_from_phase(345.0).name, "Shakuni")
        self.assertEqual(karana_from_phase(359.0).name, "Nagava")
        self.assertEqual(karana_from_phase(5.9995).name, "Bava")

    def test_yoga(self):
        self.assertEqual(yoga_from_longitudes(0.0, 0.0).name, "Vishkumbha")
        self.assertEqual(yoga_from_longitudes(200.0, 173.34).name, "Priti")
        self.assertEqual(yoga_from_longitudes(200.0, 173.333).name, "Priti")

    def test_moon_phase(self):
        self.assertEqual(moon_phase_name(0.0), "New Moon")
        self.assertEqual(moon_phase_name(90.0), "First Quarter")
        self.assertEqual(moon_phase_name(181.0), "Full Moon")


class TestDaySegments(unittest.TestCase):
    def test_rahu_kaal_on_monday(self):
        day = date(2024, 1, 1)   # Monday
        sunrise = datetime.combine(day, time(7, 0), tzinfo=IST)
        sunset = datetime.combine(day, time(17, 0), tzinfo=IST)

        segment = RAHU_KAAL_SEGMENTS[weekday_index(day)]
        interval = day_segment(sunrise, sunset, segment)

        self.assertEqual(segment, 2)
        self.assertEqual(interval.start, datetime.combine(day, time(8, 15), tzinfo=IST))
        self.assertEqual(interval.end, datetime.combine(day, time(9, 30), tzinfo=IST))

    def test_last_segment_closes_at_sunset(self):
        sunrise = datetime(2024, 1, 7, 7, 0, 7, tzinfo=IST)
        sunset = datetime(2024, 1, 7, 17, 41, 3, tzinfo=IST)
        self.assertEqual(day_segment(sunrise, sunset, 8).end, sunset)

    def test_horas(self):
        sunrise = datetime(2024, 1, 7, 7, 0, tzinfo=IST)    # Sunday
        sunset = datetime(2024, 1, 7, 17, 0, tzinfo=IST)
        next_sunrise = datetime(2024, 1, 8, 7, 0, tzinfo=IST)

        horas = build_horas(sunrise, sunset, next_sunrise, "Sun")

        self.assertEqual(len(horas), 24)
        self.assertEqual(horas[0].lord, "Sun")
        self.assertEqual(horas[1].lord, "Venus")
        self.assertEqual(horas[11].end, sunset)
        self.assertEqual(horas[12].start, sunset)
        self.assertEqual(horas[23].end, next_sunrise)
        self.assertTrue(all(h.is_day for h in horas[:12]))
        # The 25th hora would open Monday with the Moon
        self.assertEqual(hora_lord("Sun", 25), "Moon")


class TestSunCalculator(unittest.TestCase):
    def _ephemeris(self, declination: float) -> MagicMock:
        ephemeris = MagicMock()
        ephemeris.sun_equatorial.return_value = (0.0, declination)
        ephemeris.sidereal_time.side_effect = (
            lambda jd: (18.697374558 + 24.06570982441908 * (jd - 2451545.0)) % 24.0
        )
        return ephemeris

    def test_equinox_day_at_equator(self):
        times = SunCalculator(self._ephemeris(0.0)).sun_times(date(2024, 3, 20), 0.0, 0.0, "UTC")

        self.assertFalse(times.polar)
        self.assertTrue(
            datetime(2024, 3, 20, 5, 40, tzinfo=timezone.utc)
            <= times.sunrise
            <= datetime(2024, 3, 20, 6, 40, tzinfo=timezone.utc)
        )
        self.assertTrue(timedelta(hours=11, minutes=50) <= times.daylight <= timedelta(hours=12, minutes=20))

    def test_polar_night_falls_back(self):
        calculator = SunCalculator(self._ephemeris(-23.4))

        with self.assertLogs("kundli_core.domain.panchang.sun", level="WARNING"):
            times = calculator.sun_times(date(2024, 12, 21), 85.0, 0.0, "UTC")

        self.assertTrue(times.polar)
        self.assertEqual(times.sunrise.hour, 6)
        self.assertEqual(times.sunset.hour, 18)


class TestPanchangEngine(unittest.TestCase):
    def setUp(self):
        self.day = date(2024, 1, 1)
        self.sun = MagicMock()
        self.sun.sun_times.side_effect = lambda day, lat, lon, tz: SunTimes(
            sunrise=datetime.combine(day, time(7, 0), tzinfo=IST),
            sunset=datetime.combine(day, time(17, 0), tzinfo=IST),
        )

        self.ephemeris = MagicMock()
        # Sidereal Sun 256, Moon 26: elongation 130 degrees
        self.ephemeris.positions.return_value = {
            "Sun": BodyState(longitude=280.0, speed=1.0),
            "Moon": BodyState(longitude=50.0, speed=13.0),
        }
        self.ayanamsa = MagicMock()
        self.ayanamsa.offset.return_value = 24.0

        self.engine = PanchangEngine(
            ephemeris=self.ephemeris,
            ayanamsa=self.ayanamsa,
            sun=self.sun,
        )

    def test_generate(self):
        panchang = self.engine.generate(self.day, 28.6139, 77.2090, "Asia/Kolkata")

        self.assertEqual(panchang.weekday, "Monday")
        self.assertEqual(panchang.weekday_lord, "Moon")
        self.assertEqual(panchang.tithi.name, "Ekadashi")
        self.assertEqual(panchang.tithi.paksha, "Shukla")
        self.assertEqual(panchang.nakshatra.name, "Bharani")
        self.assertEqual(panchang.nakshatra.pada, 4)
        self.assertEqual(panchang.rahu_kaal.start, datetime(2024, 1, 1, 8, 15, tzinfo=IST))
        self.assertEqual(len(panchang.horas), 24)
        self.assertEqual(panchang.next_sunrise, datetime(2024, 1, 2, 7, 0, tzinfo=IST))
        self.assertFalse(panchang.polar_fallback)

        # Limbs are taken at sunrise
        instant = self.ephemeris.positions.call_args[0][0]
        self.assertEqual(instant, datetime(2024, 1, 1, 7, 0, tzinfo=IST))

    def test_hora_at(self):
        panchang = self.engine.generate(self.day, 28.6139, 77.2090, "Asia/Kolkata")
        hora = panchang.hora_at(datetime(2024, 1, 1, 7, 30, tzinfo=IST))
        self.assertEqual(hora.number, 1)
        self.assertEqual(hora.lord, "Moon")

    def test_rejects_bad_location(self):
        with self.assertRaises(InvalidBirthDetailsError):
            self.engine.generate(self.day, 95.0, 77.0, "Asia/Kolkata")
        with self.assertRaises(InvalidBirthDetailsError):
            self.engine.generate(self.day, 28.0, 77.0, "Mars/Olympus")


if __name__ == "__main__":
    unittest.main()
