import unittest
from unittest.mock import MagicMock
import sys
import os
from datetime import datetime, timedelta, timezone
sys.path.append(os.getcwd())

from kundli_core.domain.kundali.engine import ChartBuilder
from kundli_core.domain.kundali.ephemeris import BodyState, julian_day
from kundli_core.domain.kundali.errors import UnsupportedConfigurationError
from kundli_core.domain.kundali.schemas import AyanamsaType, NodeType
from kundli_core.domain.transits.aspects import AspectCalculator, aspect_strength
from kundli_core.domain.transits.gochar_calculator import GocharCalculator
from kundli_core.domain.transits.transit_builder import TransitBuilder
from kundli_core.domain.transits.transit_engine import TransitEngine
from tests.chart_factory import make_chart


BUILDER = ChartBuilder(calculator=MagicMock())


def transiting(natal, name, longitude, speed=0.1):
    cusps = [house.cusp for house in natal.houses]
    return BUILDER.planet_position(name, longitude, speed, cusps)


class TestAspects(unittest.TestCase):
    def setUp(self):
        # Natal Sun 95, Mercury 100
        self.natal = make_chart()
        self.calculator = AspectCalculator()

    def test_conjunction_orb_and_motion(self):
        positions = {"Saturn": transiting(self.natal, "Saturn", 96.0, speed=0.1)}
        aspects = self.calculator.find(positions, self.natal)

        to_sun = [a for a in aspects if a.natal == "Sun"][0]
        self.assertEqual((to_sun.natal, to_sun.aspect), ("Sun", "conjunction"))
        self.assertAlmostEqual(to_sun.orb, 1.0)
        self.assertEqual(to_sun.strength, "strong")
        self.assertFalse(to_sun.applying)

        to_mercury = [a for a in aspects if a.natal == "Mercury"][0]
        self.assertEqual(to_mercury.strength, "moderate")
        self.assertTrue(to_mercury.applying)
        self.assertEqual(to_mercury.motion, "applying")

    def test_special_aspect_of_mars(self):
        # 210 degrees behind the natal Sun: Mars's 8th-house glance
        positions = {"Mars": transiting(self.natal, "Mars", 245.0)}
        aspects = [a for a in self.calculator.find(positions, self.natal) if a.natal == "Sun"]

        self.assertEqual(len(aspects), 1)
        self.assertEqual(aspects[0].aspect, "8th aspect")
        self.assertEqual(aspects[0].angle, 210.0)

    def test_aspects_sorted_by_orb(self):
        positions = {
            "Saturn": transiting(self.natal, "Saturn", 96.0),
            "Jupiter": transiting(self.natal, "Jupiter", 277.0),
        }
        orbs = [a.orb for a in self.calculator.find(positions, self.natal)]
        self.assertEqual(orbs, sorted(orbs))

    def test_strength_bands(self):
        self.assertEqual(aspect_strength(0.5), "strong")
        self.assertEqual(aspect_strength(4.99), "moderate")
        self.assertEqual(aspect_strength(7.0), "weak")


class TestSaturnCycles(unittest.TestCase):
    def setUp(self):
        # Natal Moon in Leo
        self.natal = make_chart()
        self.gochar = GocharCalculator()

    def test_sade_sati_phases(self):
        expected = {95.0: "Rising", 125.0: "Peak", 155.0: "Setting", 185.0: None}
        for longitude, phase in expected.items():
            saturn = transiting(self.natal, "Saturn", longitude)
            self.assertEqual(self.gochar.sade_sati_phase(self.natal, saturn), phase)

    def test_dhaiya(self):
        self.assertEqual(
            self.gochar.dhaiya(self.natal, transiting(self.natal, "Saturn", 215.0)),
            "Kantaka",
        )
        self.assertEqual(
            self.gochar.dhaiya(self.natal, transiting(self.natal, "Saturn", 335.0)),
            "Ashtama",
        )
        self.assertIsNone(self.gochar.dhaiya(self.natal, transiting(self.natal, "Saturn", 125.0)))

    def test_gochar_counts_from_lagna_and_moon(self):
        positions = {"Jupiter": transiting(self.natal, "Jupiter", 125.0)}
        gochar = self.gochar.calculate(self.natal, positions)

        self.assertEqual(gochar.planets["Jupiter"].from_lagna_house, 5)
        self.assertEqual(gochar.planets["Jupiter"].from_moon_house, 1)


class TestTransitEngine(unittest.TestCase):
    def test_positions_are_sidereal_and_housed(self):
        natal = make_chart()
        ephemeris = MagicMock()
        ephemeris.positions_at.return_value = {
            "Sun": BodyState(longitude=119.0, speed=1.0),
            "Saturn": BodyState(longitude=10.0, speed=-0.02),
        }
        ayanamsa = MagicMock()
        ayanamsa.offset.return_value = 24.0

        engine = TransitEngine(ephemeris=ephemeris, ayanamsa=ayanamsa, chart_builder=BUILDER)
        positions = engine.calculate_at(natal, 2460000.5)

        self.assertAlmostEqual(positions["Sun"].longitude, 95.0)
        self.assertEqual(positions["Sun"].house, 4)
        self.assertAlmostEqual(positions["Saturn"].longitude, 346.0)
        self.assertTrue(positions["Saturn"].retrograde)
        ayanamsa.offset.assert_called_once_with(2460000.5, AyanamsaType.LAHIRI)
        ephemeris.positions_at.assert_called_once_with(2460000.5, NodeType.MEAN)


class TestTransitBuilder(unittest.TestCase):
    def setUp(self):
        self.natal = make_chart()
        self.engine = MagicMock()
        self.engine.calculation_version = "v1"
        self.builder = TransitBuilder(transit_engine=self.engine)

    def test_build(self):
        self.engine.calculate.return_value = {
            "Saturn": transiting(self.natal, "Saturn", 126.0),
            "Jupiter": transiting(self.natal, "Jupiter", 215.0),
        }
        moment = datetime(2025, 6, 1, tzinfo=timezone.utc)

        data = self.builder.build(self.natal, moment)

        self.assertEqual(data.timestamp, moment)
        self.assertEqual(data.sade_sati_phase, "Peak")
        self.assertTrue(data.in_sade_sati)
        self.assertIsNone(data.dhaiya)
        self.assertEqual(data.gochar.planets["Saturn"].from_moon_house, 1)
        self.assertIn("Saturn", [a.transiting for a in data.aspects_to("Moon")])
        self.engine.calculate.assert_called_once_with(self.natal, moment)

    def test_timeline_finds_ingress_and_station(self):
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        start_jd = julian_day(start)

        def calculate_at(natal, jd):
            offset = round(jd - start_jd)
            return {
                "Mars": transiting(natal, "Mars", 29.6 + offset * 0.5, speed=0.5),
                "Mercury": transiting(natal, "Mercury", 100.0, speed=1.0 if offset < 5 else -0.2),
            }

        self.engine.calculate_at.side_effect = calculate_at

        timeline = self.builder.timeline(self.natal, start, days=10, step_days=1)

        ingress = timeline.for_planet("Mars")
        self.assertEqual(len(ingress), 1)
        self.assertEqual((ingress[0].kind, ingress[0].from_sign, ingress[0].to_sign),
                         ("ingress", "Aries", "Taurus"))
        self.assertEqual(ingress[0].timestamp, start + timedelta(days=1))

        station = timeline.for_planet("Mercury")
        self.assertEqual([e.kind for e in station], ["station_retrograde"])
        self.assertEqual(station[0].timestamp, start + timedelta(days=5))
        self.assertEqual(timeline.end, start + timedelta(days=10))

    def test_timeline_rejects_empty_window(self):
        with self.assertRaises(UnsupportedConfigurationError):
            self.builder.timeline(self.natal, days=0, step_days=1)
        with self.assertRaises(UnsupportedConfigurationError):
            self.builder.timeline(self.natal, days=30, step_days=0)


if __name__ == "__main__":
    unittest.main()
