import unittest
import sys
import os
sys.path.append(os.getcwd())

from kundli_core.domain.kundali.divisional.divisional_builder import DivisionalBuilder
from kundli_core.domain.kundali.divisional.vargas import (
    SHODASAVARGA,
    D2Calculator,
    D9Calculator,
    D10Calculator,
    D30Calculator,
)
from tests.chart_factory import make_chart


class TestNavamsa(unittest.TestCase):
    def setUp(self):
        self.d9 = D9Calculator()

    def test_second_navamsa_of_aries_is_taurus(self):
        self.assertEqual(self.d9.position(3.333)[0], 1)
        self.assertEqual(self.d9.position(10.0 / 3.0)[0], 1)

    def test_start_of_libra_is_libra(self):
        self.assertEqual(self.d9.position(180.0)[0], 6)
        self.assertEqual(self.d9.position(180.0)[1], 0.0)

    def test_fixed_and_dual_sign_starts(self):
        # Taurus starts from Capricorn, Gemini from Libra
        self.assertEqual(self.d9.position(30.0)[0], 9)
        self.assertEqual(self.d9.position(60.0)[0], 6)

    def test_vargottama_degrees(self):
        # Middle navamsa of a fixed sign falls in the same sign
        self.assertEqual(self.d9.position(45.0)[0], 1)


class TestOtherVargas(unittest.TestCase):
    def test_hora(self):
        d2 = D2Calculator()
        self.assertEqual(d2.position(5.0)[0], 4)    # Aries first half -> Leo
        self.assertEqual(d2.position(40.0)[0], 3)   # Taurus first half -> Cancer

    def test_dasamsa_even_sign_starts_from_ninth(self):
        d10 = D10Calculator()
        self.assertEqual(d10.position(0.5)[0], 0)
        self.assertEqual(d10.position(30.5)[0], 9)

    def test_trimsamsa_portions(self):
        d30 = D30Calculator()
        self.assertEqual(d30.position(2.0)[0], 0)     # odd sign, Mars portion -> Aries
        self.assertEqual(d30.position(31.0)[0], 1)    # even sign, Venus portion -> Taurus

    def test_every_varga_sign_in_range(self):
        for calculator in SHODASAVARGA:
            longitude = 0.0
            while longitude < 360.0:
                sign, degree = calculator.position(longitude)
                self.assertTrue(0 <= sign <= 11, (calculator.chart_type, longitude))
                self.assertTrue(0.0 <= degree < 30.0, (calculator.chart_type, longitude))
                longitude += 0.173


class TestDivisionalBuilder(unittest.TestCase):
    def test_builds_sixteen_charts(self):
        charts = DivisionalBuilder().build(make_chart()).charts

        self.assertEqual(len(charts), 16)
        self.assertIn("D60", charts)
        d1 = charts["D1"]
        self.assertEqual(d1.sign_of("Ascendant"), 0)
        self.assertEqual(d1.sign_of("Moon"), 4)
        self.assertEqual(len(d1.placements), 9)


if __name__ == "__main__":
    unittest.main()
