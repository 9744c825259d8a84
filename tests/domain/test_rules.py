import unittest
import sys
import os
sys.path.append(os.getcwd())

from kundli_core.domain.rules.chart_context import ChartContext
from kundli_core.domain.rules.dosha_rules import DOSHA_RULES, kaal_sarp, manglik
from kundli_core.domain.rules.rule_engine import DEFAULT_RULES, RuleEngine
from kundli_core.domain.rules.schemas import RuleDescriptor, Severity, YogaStrength
from kundli_core.domain.rules.yoga_rules import YOGA_RULES
from tests.chart_factory import make_chart


def dosha(chart, key):
    for detection in RuleEngine().doshas(chart):
        if detection.key == key:
            return detection
    return None


def yoga(chart, key):
    for detection in RuleEngine().yogas(chart):
        if detection.key == key:
            return detection
    return None


class TestManglik(unittest.TestCase):
    def test_not_flagged_outside_manglik_houses(self):
        # Default Mars is in Virgo, the 6th from an Aries lagna
        self.assertIsNone(dosha(make_chart(), "manglik"))

    def test_flagged_for_mars_in_seventh(self):
        result = dosha(make_chart(longitudes={"Mars": 190.0}), "manglik")

        self.assertIsNotNone(result)
        self.assertFalse(result.cancelled)
        self.assertEqual(result.severity, Severity.MEDIUM)
        self.assertEqual(result.details["house"], 7)

    def test_flagged_in_every_manglik_house(self):
        for house in (1, 4, 7, 8, 12):
            # Libra lagna; Mars mid-sign, never own or exalted for these
            sign = (6 + house - 1) % 12
            if sign in (0, 7, 9):
                continue
            chart = make_chart(ascendant=195.0, longitudes={"Mars": sign * 30.0 + 12.0})
            ctx = ChartContext(chart)
            self.assertEqual(ctx.house("Mars"), house)
            self.assertIsNotNone(manglik(ctx), house)

    def test_severity_rises_when_also_from_moon(self):
        chart = make_chart(longitudes={"Mars": 190.0, "Moon": 5.0})
        result = dosha(chart, "manglik")

        self.assertEqual(result.severity, Severity.HIGH)
        self.assertIn("Moon", result.details["counted_from"])

    def test_suppressed_in_own_sign(self):
        result = dosha(make_chart(longitudes={"Mars": 10.0}), "manglik")

        self.assertTrue(result.cancelled)
        self.assertEqual(result.severity, Severity.CANCELLED)
        self.assertEqual(result.cancellations[0].rule, "mars_dignified")
        self.assertIn("own or exaltation sign", result.cancellation_reason)

    def test_suppressed_when_exalted(self):
        chart = make_chart(ascendant=190.0, longitudes={"Mars": 280.0})
        result = dosha(chart, "manglik")

        self.assertEqual(result.details["house"], 4)
        self.assertTrue(result.cancelled)

    def test_suppressed_by_jupiter_aspect(self):
        # Jupiter in Aquarius casts its 9th aspect on Libra
        chart = make_chart(longitudes={"Mars": 190.0, "Jupiter": 310.0})
        result = dosha(chart, "manglik")

        self.assertTrue(result.cancelled)
        self.assertIn("jupiter_influence", [c.rule for c in result.cancellations])


class TestKaalSarp(unittest.TestCase):
    def test_all_planets_hemmed(self):
        chart = make_chart(longitudes={
            "Sun": 40.0, "Moon": 50.0, "Mars": 60.0, "Mercury": 45.0,
            "Jupiter": 100.0, "Venus": 70.0, "Saturn": 150.0, "Rahu": 20.0,
        })
        result = kaal_sarp(ChartContext(chart))

        self.assertIsNotNone(result)
        self.assertEqual(result.details["variant"], "Anant")
        self.assertFalse(result.details["partial"])
        self.assertEqual(result.severity, Severity.HIGH)

    def test_absent_for_default_chart(self):
        self.assertIsNone(kaal_sarp(ChartContext(make_chart())))


class TestYogas(unittest.TestCase):
    def test_hamsa_for_exalted_jupiter_in_kendra(self):
        result = yoga(make_chart(longitudes={"Jupiter": 100.0}), "hamsa")

        self.assertIsNotNone(result)
        self.assertEqual(result.strength, YogaStrength.STRONG)

    def test_budhaditya(self):
        result = yoga(make_chart(), "budhaditya")
        self.assertEqual(result.forming_planets, ["Sun", "Mercury"])

    def test_gaja_kesari_needs_kendra_from_moon(self):
        # Jupiter in Scorpio is 4th from a Leo Moon
        self.assertIsNotNone(yoga(make_chart(), "gaja_kesari"))
        self.assertIsNone(yoga(make_chart(longitudes={"Jupiter": 100.0}), "gaja_kesari"))


class TestRuleEngine(unittest.TestCase):
    def test_catalog_keys_are_unique(self):
        keys = [rule.key for rule in DEFAULT_RULES]
        self.assertEqual(len(keys), len(set(keys)))
        self.assertEqual(len(DEFAULT_RULES), len(YOGA_RULES) + len(DOSHA_RULES))

    def test_failing_rule_is_isolated(self):
        def broken(ctx):
            raise ZeroDivisionError("boom")

        manglik_rule = next(r for r in DOSHA_RULES if r.key == "manglik")
        engine = RuleEngine(rules=[
            RuleDescriptor("broken", "yoga", "Broken", "test", broken),
            manglik_rule,
        ])

        with self.assertLogs("kundli_core.domain.rules.rule_engine", level="ERROR"):
            result = engine.evaluate(make_chart(longitudes={"Mars": 190.0}))

        self.assertEqual(result.failed_rules, ["broken"])
        self.assertEqual([d.key for d in result.doshas], ["manglik"])

    def test_evaluation_is_deterministic_and_order_insensitive(self):
        chart = make_chart(longitudes={"Mars": 190.0})
        forward = RuleEngine().evaluate(chart)
        backward = RuleEngine(rules=list(reversed(DEFAULT_RULES))).evaluate(chart)

        self.assertEqual(forward, RuleEngine().evaluate(chart))
        self.assertEqual(
            sorted(d.key for d in forward.doshas + forward.yogas),
            sorted(d.key for d in backward.doshas + backward.yogas),
        )


if __name__ == "__main__":
    unittest.main()
