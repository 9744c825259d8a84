import unittest
import sys
import os
from datetime import date, datetime, time
from zoneinfo import ZoneInfo
sys.path.append(os.getcwd())

from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.divisional.divisional_builder import DivisionalBuilder
from kundli_core.domain.panchang.sun import SunTimes
from kundli_core.domain.strength.ashtakavarga import (
    BINDU_TABLES,
    AshtakavargaCalculator,
    classify_sign,
)
from kundli_core.domain.strength.shadbala import (
    NAISARGIKA_BALA,
    ShadbalaCalculator,
    strength_level,
)
from tests.chart_factory import make_chart


IST = ZoneInfo("Asia/Kolkata")


class TestAshtakavarga(unittest.TestCase):
    def setUp(self):
        self.data = AshtakavargaCalculator().calculate(make_chart())

    def test_sarva_totals_337(self):
        self.assertEqual(self.data.total, 337)

    def test_planet_totals_match_tables(self):
        expected = {
            "Sun": 48, "Moon": 49, "Mars": 39, "Mercury": 54,
            "Jupiter": 56, "Venus": 52, "Saturn": 39,
        }
        self.assertEqual(self.data.planet_totals, expected)
        for planet, table in BINDU_TABLES.items():
            self.assertEqual(sum(len(places) for places in table.values()), expected[planet])

    def test_bindus_within_range(self):
        for row in self.data.bhinna.values():
            self.assertEqual(len(row), 12)
            for value in row:
                self.assertTrue(0 <= value <= 8)
        for sign in range(12):
            self.assertEqual(
                self.data.sarva[sign],
                sum(self.data.points(p, sign) for p in self.data.bhinna),
            )

    def test_sign_classification(self):
        self.assertEqual(classify_sign(30), "strong")
        self.assertEqual(classify_sign(27), "moderate")
        self.assertEqual(classify_sign(19), "weak")
        self.assertEqual(len(self.data.strongest_signs(3)), 3)


class TestShadbala(unittest.TestCase):
    def setUp(self):
        # Jupiter on the ascendant and Sun on the 10th cusp take full Dig Bala
        self.chart = make_chart(
            ascendant=15.0,
            longitudes={"Jupiter": 15.0, "Sun": 285.0, "Mercury": 290.0},
        )
        self.birth = BirthDetails(
            name="Test",
            birth_date=date(2000, 1, 1),
            birth_time=time(12, 0),
            latitude=28.6139,
            longitude=77.2090,
            timezone="Asia/Kolkata",
        )
        self.sun_times = SunTimes(
            sunrise=datetime(2000, 1, 1, 7, 14, tzinfo=IST),
            sunset=datetime(2000, 1, 1, 17, 36, tzinfo=IST),
        )
        self.vargas = DivisionalBuilder().build(self.chart)
        self.calculator = ShadbalaCalculator()

    def test_scores_every_classical_planet(self):
        data = self.calculator.calculate(self.chart, self.birth, self.vargas, self.sun_times)

        self.assertEqual(len(data.scores), 7)
        for name, score in data.scores.items():
            self.assertEqual(score.naisargika, NAISARGIKA_BALA[name])
            parts = score.sthana + score.dig + score.kala + score.chesta + score.naisargika + score.drik
            self.assertAlmostEqual(score.total_virupas, parts, delta=0.05)
            self.assertAlmostEqual(score.total_rupas, score.total_virupas / 60.0, delta=0.01)
            self.assertEqual(score.is_sufficient, score.total_virupas >= score.required_virupas)

    def test_full_directional_strength(self):
        data = self.calculator.calculate(self.chart, self.birth, self.vargas, self.sun_times)

        self.assertAlmostEqual(data.score("Jupiter").dig, 60.0)
        self.assertAlmostEqual(data.score("Sun").dig, 60.0)

    def test_chesta_bala(self):
        data = self.calculator.calculate(self.chart, self.birth, self.vargas, self.sun_times)

        # Mercury at one degree a day moves at its mean speed
        self.assertEqual(data.score("Mercury").chesta, 30.0)

        sun = data.score("Sun")
        self.assertGreater(sun.chesta, 0.0)
        self.assertAlmostEqual(sun.components["ayana"], 2 * sun.chesta, delta=0.02)

    def test_temporal_lords_for_saturday_noon(self):
        lords = self.calculator._temporal_lords(self.birth, self.sun_times)

        self.assertTrue(lords["is_day"])
        self.assertEqual(lords["vara"], "Saturn")
        self.assertEqual(lords["abda"], "Saturn")
        self.assertEqual(lords["masa"], "Saturn")
        # Sixth hora of a Saturday
        self.assertEqual(lords["hora"], "Mercury")

    def test_birth_before_sunrise_belongs_to_previous_day(self):
        early = BirthDetails(
            name="Test",
            birth_date=date(2000, 1, 1),
            birth_time=time(5, 0),
            latitude=28.6139,
            longitude=77.2090,
            timezone="Asia/Kolkata",
        )
        lords = self.calculator._temporal_lords(early, self.sun_times)

        self.assertFalse(lords["is_day"])
        self.assertEqual(lords["vara"], "Venus")

    def test_strength_levels(self):
        self.assertEqual(strength_level(1.6), "very strong")
        self.assertEqual(strength_level(1.0), "moderate")
        self.assertEqual(strength_level(0.3), "very weak")


if __name__ == "__main__":
    unittest.main()
