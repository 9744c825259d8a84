import unittest
import sys
import os
sys.path.append(os.getcwd())

from kundli_core.domain.comparison.composite import CompositeChartCalculator, midpoint
from kundli_core.domain.comparison.synastry import (
    NEUTRAL_SCORE,
    SynastryCalculator,
    find_aspect,
)
from tests.chart_factory import make_chart


def partner_chart():
    # Taurus rising; Moon opposes and Rahu mirrors the default chart
    return make_chart(
        ascendant=45.0,
        longitudes={"Sun": 96.0, "Moon": 305.0, "Rahu": 340.0},
    )


class TestSynastry(unittest.TestCase):
    def setUp(self):
        self.result = SynastryCalculator().compare(
            make_chart(), partner_chart(), first_name="Asha", second_name="Ravi",
        )

    def find(self, first_body, second_body):
        return next(
            a for a in self.result.aspects
            if (a.first_body, a.second_body) == (first_body, second_body)
        )

    def test_aspect_detection(self):
        self.assertEqual(find_aspect(95.0, 305.0)[0], "quincunx")
        self.assertEqual(find_aspect(10.0, 75.0)[0], "sextile")
        self.assertIsNone(find_aspect(0.0, 40.0))

    def test_inter_chart_aspects(self):
        suns = self.find("Sun", "Sun")
        self.assertEqual((suns.aspect, suns.nature), ("conjunction", "neutral"))
        self.assertAlmostEqual(suns.orb, 1.0)
        self.assertEqual(suns.weight, 20.0)

        self.assertEqual(self.find("Sun", "Moon").aspect, "quincunx")

    def test_heaviest_and_tightest_first(self):
        first = self.result.aspects[0]
        self.assertEqual((first.first_body, first.second_body, first.aspect),
                         ("Moon", "Moon", "opposition"))

        weights = [a.weight for a in self.result.aspects]
        self.assertEqual(weights, sorted(weights, reverse=True))
        self.assertEqual(self.result.key_aspects(3), self.result.aspects[:3])

    def test_grouping_helpers(self):
        for aspect in self.result.involving("Venus", "Mars"):
            self.assertTrue(aspect.involves("Venus") or aspect.involves("Mars"))

        grouped = self.result.aspects_by_nature()
        self.assertEqual(sum(len(v) for v in grouped.values()), len(self.result.aspects))
        self.assertIn("challenging", grouped)

    def test_house_overlays(self):
        first_in_second = {o.body: o.house for o in self.result.first_in_second}
        second_in_first = {o.body: o.house for o in self.result.second_in_first}

        self.assertEqual(len(first_in_second), 9)
        # Cancer is the 3rd sign from a Taurus lagna, the 4th from Aries
        self.assertEqual(first_in_second["Sun"], 3)
        self.assertEqual(second_in_first["Sun"], 4)

    def test_score(self):
        self.assertTrue(0.0 <= self.result.score <= 100.0)
        self.assertEqual(self.result.first_name, "Asha")
        self.assertEqual(SynastryCalculator().score([]), NEUTRAL_SCORE)


class TestCompositeChart(unittest.TestCase):
    def setUp(self):
        self.chart = CompositeChartCalculator().calculate(make_chart(), partner_chart())

    def test_midpoint_takes_shorter_arc(self):
        self.assertAlmostEqual(midpoint(350.0, 10.0), 0.0)
        self.assertAlmostEqual(midpoint(10.0, 350.0), 0.0)
        self.assertAlmostEqual(midpoint(100.0, 140.0), 120.0)
        self.assertAlmostEqual(midpoint(0.0, 180.0), 90.0)

    def test_ascendant_and_planets(self):
        ascendant = self.chart.ascendant
        self.assertAlmostEqual(ascendant.longitude, 30.0)
        self.assertEqual((ascendant.sign, ascendant.house), ("Taurus", 1))
        self.assertEqual((ascendant.nakshatra, ascendant.pada), ("Krittika", 2))

        sun = self.chart.planet("Sun")
        self.assertAlmostEqual(sun.longitude, 95.5)
        self.assertEqual((sun.sign, sun.house), ("Cancer", 3))

        # Opposed Moons meet a quarter circle past the first
        moon = self.chart.planet("Moon")
        self.assertAlmostEqual(moon.longitude, 215.0)
        self.assertEqual(moon.house, 7)

        self.assertAlmostEqual(self.chart.planet("Rahu").longitude, 0.0)
        self.assertEqual(len(self.chart.planets), 9)

    def test_planets_in_house(self):
        self.assertCountEqual(self.chart.planets_in_house(7), ["Moon", "Jupiter"])

    def test_aspects_sorted_by_orb(self):
        orbs = [a.orb for a in self.chart.aspects]
        self.assertEqual(orbs, sorted(orbs))
        self.assertEqual(orbs[0], 0.0)

        pairs = {frozenset((a.first_body, a.second_body)): a for a in self.chart.aspects}
        trine = pairs[frozenset(("Sun", "Moon"))]
        self.assertEqual(trine.aspect, "trine")
        self.assertAlmostEqual(trine.orb, 0.5)
        self.assertNotIn("quincunx", {a.aspect for a in self.chart.aspects})


if __name__ == "__main__":
    unittest.main()
