import unittest
from unittest.mock import patch
import sys
import os
from datetime import date, datetime, time, timedelta, timezone
sys.path.append(os.getcwd())

from kundli_core import (
    AyanamsaType,
    BirthDetails,
    CalculationSettings,
    DateOutOfEphemerisRangeError,
    HouseSystem,
    InvalidBirthDetailsError,
    KundliService,
    NodeType,
    UnsupportedConfigurationError,
    birth_details_from_persistence,
    compare_kundlis,
    generate_chart,
    generate_composite_chart,
    generate_panchang,
    generate_transits,
    kundli_to_context_text,
    kundli_to_persistence,
    match_kundlis,
    settings_from_persistence,
)
from kundli_core.domain.kundali.ayanamsa import AyanamsaCorrector
from kundli_core.domain.kundali.ephemeris import EphemerisAdapter, julian_day
from kundli_core.logging_config import configure_logging


NEW_DELHI = dict(latitude=28.6139, longitude=77.2090, timezone="Asia/Kolkata")


def delhi_birth(name="Test", birth_date=date(2000, 1, 1), birth_time=time(12, 0)):
    return BirthDetails(name=name, birth_date=birth_date, birth_time=birth_time, **NEW_DELHI)


class TestReferenceChart(unittest.TestCase):
    """
    Noon, 1 January 2000, New Delhi, Lahiri ayanamsa, Equal houses.
    """

    @classmethod
    def setUpClass(cls):
        cls.service = KundliService()
        cls.settings = CalculationSettings(
            ayanamsa=AyanamsaType.LAHIRI,
            house_system=HouseSystem.EQUAL,
        )
        cls.kundli = generate_chart(delhi_birth(), cls.settings, service=cls.service)

    def test_sun_and_ascendant(self):
        sun = self.kundli.chart.planet("Sun")
        self.assertEqual(sun.sign, "Sagittarius")
        self.assertAlmostEqual(sun.degree, 16.29, delta=0.2)

        ascendant = self.kundli.ascendant
        self.assertEqual(ascendant.sign, "Pisces")
        self.assertAlmostEqual(ascendant.degree, 13.2, delta=0.5)

        self.assertAlmostEqual(self.kundli.ayanamsa_value, 23.85, delta=0.02)

    def test_chart_shape(self):
        self.assertEqual(len(self.kundli.planets), 9)
        self.assertEqual(len(self.kundli.houses), 12)
        self.assertAlmostEqual(
            self.kundli.planets["Ketu"].longitude,
            (self.kundli.planets["Rahu"].longitude + 180.0) % 360.0,
            places=6,
        )
        self.assertTrue(self.kundli.planets["Rahu"].retrograde)
        self.assertEqual(len(self.kundli.divisional_charts.charts), 16)
        self.assertEqual(self.kundli.ashtakavarga.total, 337)
        self.assertEqual(len(self.kundli.shadbala.scores), 7)
        self.assertEqual(self.kundli.failed_rules, [])

    def test_generation_is_deterministic(self):
        again = generate_chart(delhi_birth(), self.settings, service=self.service)

        self.assertEqual(again.chart, self.kundli.chart)
        self.assertEqual(again.dashas, self.kundli.dashas)
        self.assertEqual(again.yogas, self.kundli.yogas)
        self.assertEqual(again.doshas, self.kundli.doshas)

    def test_summary(self):
        summary = self.kundli.summary(at=datetime(2010, 1, 1, tzinfo=timezone.utc))

        self.assertEqual(summary.name, "Test")
        self.assertEqual(summary.ascendant, "Pisces")
        self.assertEqual(summary.sun_sign, "Sagittarius")
        self.assertIsNotNone(summary.mahadasha)
        self.assertIsNotNone(summary.antardasha)
        self.assertEqual(summary.atmakaraka, self.kundli.karakas["Atmakaraka"])

    def test_persistence_round_trip(self):
        record = kundli_to_persistence(self.kundli)

        self.assertEqual(record["ascendant"]["sign"], "Pisces")
        self.assertEqual(birth_details_from_persistence(record), self.kundli.birth)
        self.assertEqual(settings_from_persistence(record), self.settings)

        del record["timezone"]
        with self.assertRaises(InvalidBirthDetailsError):
            birth_details_from_persistence(record)

    def test_context_text(self):
        text = kundli_to_context_text(self.kundli, at=datetime(2010, 1, 1, tzinfo=timezone.utc))

        self.assertTrue(text.startswith("KUNDLI: Test"))
        for section in ("PLANETS", "HOUSES", "NAVAMSA", "DASHA", "YOGAS", "DOSHAS", "STRENGTH"):
            self.assertIn(section, text)
        self.assertIn("Ascendant: Pisces", text)

    def test_transits(self):
        moment = datetime(2025, 6, 1, tzinfo=timezone.utc)
        data = generate_transits(self.kundli, at=moment, service=self.service)

        self.assertEqual(data.timestamp, moment)
        self.assertEqual(len(data.positions), 9)
        self.assertEqual(set(data.gochar.planets), set(data.positions))

        timeline = self.service.transit_timeline(self.kundli, moment, days=30, step_days=5)
        self.assertEqual(timeline.end, moment + timedelta(days=30))

    def test_match_and_compare(self):
        other = generate_chart(
            delhi_birth(name="Other", birth_date=date(2001, 6, 15), birth_time=time(8, 30)),
            self.settings,
            service=self.service,
        )
        result = match_kundlis(self.kundli, other, service=self.service)

        self.assertEqual(len(result.kootas), 8)
        self.assertTrue(0 <= result.total_score <= 36)
        self.assertEqual((result.first_name, result.second_name), ("Test", "Other"))

        synastry = compare_kundlis(self.kundli, other, service=self.service)
        self.assertEqual(len(synastry.first_in_second), 9)
        self.assertEqual(len(synastry.second_in_first), 9)
        self.assertTrue(0.0 <= synastry.score <= 100.0)

        composite = generate_composite_chart(self.kundli, other, service=self.service)
        self.assertEqual(len(composite.planets), 9)
        self.assertEqual(composite.ascendant.house, 1)
        self.assertEqual((composite.first_name, composite.second_name), ("Test", "Other"))


class TestPanchangAtDelhi(unittest.TestCase):
    def test_new_year_2024(self):
        panchang = generate_panchang(date(2024, 1, 1), **NEW_DELHI)

        self.assertEqual(panchang.weekday, "Monday")
        self.assertEqual(panchang.sunrise.hour, 7)
        self.assertEqual(panchang.sunset.hour, 17)
        self.assertFalse(panchang.polar_fallback)
        self.assertEqual(len(panchang.horas), 24)
        self.assertTrue(panchang.sunrise < panchang.rahu_kaal.start < panchang.sunset)


class TestConfigurationErrors(unittest.TestCase):
    def test_settings_from_names(self):
        settings = CalculationSettings.from_names(ayanamsa="lahiri", house_system="whole_sign")
        self.assertEqual(settings.house_system, HouseSystem.WHOLE_SIGN)

        with self.assertRaises(UnsupportedConfigurationError):
            CalculationSettings.from_names(ayanamsa="Sayana")
        with self.assertRaises(UnsupportedConfigurationError):
            CalculationSettings.from_names(house_system="Regiomontanus")
        with self.assertRaises(UnsupportedConfigurationError):
            CalculationSettings.from_names(dasha_depth=6)

    def test_krishnamurti_preset(self):
        preset = CalculationSettings.krishnamurti()
        self.assertEqual(preset.ayanamsa, AyanamsaType.KRISHNAMURTI)
        self.assertEqual(preset.house_system, HouseSystem.PLACIDUS)
        self.assertEqual(preset.node_type, NodeType.TRUE)

    def test_invalid_birth_details(self):
        with self.assertRaises(InvalidBirthDetailsError):
            BirthDetails("Test", date(2000, 1, 1), time(12, 0), 91.0, 77.0, "Asia/Kolkata")
        with self.assertRaises(InvalidBirthDetailsError):
            BirthDetails("", date(2000, 1, 1), time(12, 0), 28.0, 77.0, "Asia/Kolkata")
        with self.assertRaises(InvalidBirthDetailsError):
            BirthDetails("Test", date(2000, 1, 1), time(12, 0), 28.0, 77.0, "India/Delhi")
        with self.assertRaises(InvalidBirthDetailsError):
            BirthDetails("Test", date(2000, 1, 1), time(12, 0), 28.0, 77.0, "Asia/Kolkata", "Robot")
        with self.assertRaises(InvalidBirthDetailsError):
            BirthDetails.from_strings("Test", "2000-13-01", "12:00", 28.0, 77.0, "Asia/Kolkata")

    def test_birth_instant_in_utc(self):
        self.assertEqual(
            delhi_birth().utc_datetime,
            datetime(2000, 1, 1, 6, 30, tzinfo=timezone.utc),
        )


class TestAyanamsaAndRange(unittest.TestCase):
    def setUp(self):
        self.jd = julian_day(datetime(2000, 1, 1, 6, 30, tzinfo=timezone.utc))
        self.corrector = AyanamsaCorrector()

    def test_sidereal_subtracts_offset(self):
        offset = self.corrector.offset(self.jd, AyanamsaType.LAHIRI)

        self.assertAlmostEqual(offset, 23.85, delta=0.02)
        self.assertAlmostEqual(
            self.corrector.sidereal(10.0, self.jd, AyanamsaType.LAHIRI),
            360.0 + 10.0 - offset,
        )
        self.assertNotAlmostEqual(
            offset, self.corrector.offset(self.jd, AyanamsaType.RAMAN), places=2,
        )

    def test_unknown_ayanamsa(self):
        with self.assertRaises(UnsupportedConfigurationError):
            self.corrector.offset(self.jd, "Sayana")

    def test_date_outside_ephemeris_span(self):
        adapter = EphemerisAdapter(start_year=1900, end_year=2100)
        with self.assertRaises(DateOutOfEphemerisRangeError):
            adapter.positions(datetime(1850, 1, 1, tzinfo=timezone.utc))


class TestLoggingConfig(unittest.TestCase):
    @patch("kundli_core.logging_config.logging.basicConfig")
    def test_configure_logging(self, basic_config):
        configure_logging("debug")

        basic_config.assert_called_once()
        self.assertEqual(basic_config.call_args.kwargs["level"], "DEBUG")


if __name__ == "__main__":
    unittest.main()
