import unittest
import sys
import os
from datetime import timedelta
sys.path.append(os.getcwd())

from kundli_core.domain.dasha.ashtottari import AshtottariDasha
from kundli_core.domain.dasha.chara import CharaDasha, jaimini_karakas
from kundli_core.domain.dasha.dasha_builder import DashaBuilder
from kundli_core.domain.dasha.schemas import DAYS_PER_YEAR
from kundli_core.domain.dasha.vimshottari import VimshottariDasha
from kundli_core.domain.dasha.yogini import YoginiDasha
from tests.chart_factory import make_chart


def assert_contiguous(test, periods):
    for previous, following in zip(periods, periods[1:]):
        test.assertEqual(previous.end, following.start)
    for period in periods:
        if period.sub_periods:
            test.assertEqual(period.sub_periods[0].start, period.start)
            test.assertEqual(period.sub_periods[-1].end, period.end)
            assert_contiguous(test, period.sub_periods)


class TestVimshottari(unittest.TestCase):
    def setUp(self):
        # Moon at 125 degrees: Magha, a Ketu nakshatra, 3/8 traversed
        self.chart = make_chart(longitudes={"Moon": 125.0})
        self.timeline = VimshottariDasha().generate(self.chart, depth=3)

    def test_starts_with_moon_nakshatra_lord(self):
        self.assertEqual(self.timeline.periods[0].lord, "Ketu")
        self.assertEqual(
            [p.lord for p in self.timeline.periods],
            ["Ketu", "Venus", "Sun", "Moon", "Mars", "Rahu", "Jupiter", "Saturn", "Mercury"],
        )

    def test_balance_of_first_period(self):
        traversed = (125.0 - 120.0) / (360.0 / 27)
        self.assertAlmostEqual(self.timeline.balance_years, 7 * (1 - traversed), places=6)
        self.assertLess(self.timeline.start, self.chart.birth_utc)

    def test_spans_exactly_120_years(self):
        span = self.timeline.end - self.timeline.start
        self.assertEqual(span, timedelta(days=120 * DAYS_PER_YEAR))
        self.assertEqual(self.timeline.cycle_years, 120.0)

    def test_periods_are_contiguous_at_every_level(self):
        assert_contiguous(self, self.timeline.periods)

    def test_sub_periods_open_with_parent_lord(self):
        for period in self.timeline.periods:
            self.assertEqual(period.sub_periods[0].lord, period.lord)
            self.assertEqual(len(period.sub_periods), 9)
            self.assertEqual(period.sub_periods[0].sub_periods[0].level, 3)

    def test_exactly_one_mahadasha_active(self):
        moment = self.timeline.start
        while moment < self.timeline.end:
            active = [p for p in self.timeline.periods if p.is_active(moment)]
            self.assertEqual(len(active), 1)
            moment += timedelta(days=997)

    def test_active_chain_reaches_requested_depth(self):
        moment = self.chart.birth_utc + timedelta(days=3650)
        chain = self.timeline.active_chain(moment)
        self.assertEqual([p.level for p in chain], [1, 2, 3])
        self.assertEqual(chain[0].level_name, "Mahadasha")


class TestOtherSystems(unittest.TestCase):
    def setUp(self):
        self.chart = make_chart()

    def test_yogini_cycle(self):
        timeline = YoginiDasha().generate(self.chart, depth=2)
        self.assertEqual(len(timeline.periods), 8)
        self.assertEqual(timeline.cycle_years, 36.0)
        assert_contiguous(self, timeline.periods)
        self.assertIsNotNone(timeline.periods[0].label)

    def test_ashtottari_cycle(self):
        timeline = AshtottariDasha().generate(self.chart, depth=2)
        self.assertEqual(len(timeline.periods), 8)
        self.assertEqual(timeline.cycle_years, 108.0)
        assert_contiguous(self, timeline.periods)

    def test_ashtottari_applicability(self):
        # Rahu in the lagna never activates Ashtottari
        self.assertFalse(AshtottariDasha().is_applicable(self.chart))

        # Rahu in Sagittarius is 4th from Mars in Virgo
        chart = make_chart(longitudes={"Rahu": 260.0})
        timeline = AshtottariDasha().generate(chart, depth=1)
        self.assertTrue(timeline.applicable)

    def test_chara_cycle_and_depth_cap(self):
        timeline = CharaDasha().generate(self.chart, depth=5)
        self.assertEqual(timeline.cycle_years, 144.0)
        self.assertEqual(timeline.periods[0].lord, "Aries")
        assert_contiguous(self, timeline.periods)

        deepest = timeline.periods[0].sub_periods[0].sub_periods[0]
        self.assertEqual(deepest.level, 3)
        self.assertEqual(deepest.sub_periods, [])

    def test_builder_returns_all_four(self):
        dashas = DashaBuilder().build(self.chart, depth=1)
        self.assertEqual(
            {dashas.vimshottari.system, dashas.yogini.system,
             dashas.ashtottari.system, dashas.chara.system},
            {"Vimshottari", "Yogini", "Ashtottari", "Chara"},
        )
        self.assertEqual(dashas.vimshottari.periods[0].sub_periods, [])


class TestJaiminiKarakas(unittest.TestCase):
    def test_ranked_by_degree_in_sign(self):
        chart = make_chart(longitudes={
            "Sun": 29.0, "Moon": 62.0, "Mars": 95.0, "Mercury": 134.0,
            "Jupiter": 165.0, "Venus": 196.0, "Saturn": 227.0,
        })
        karakas = jaimini_karakas(chart)

        self.assertEqual(karakas["Atmakaraka"], "Sun")
        self.assertEqual(karakas["Darakaraka"], "Moon")
        self.assertEqual(len(karakas), 7)


if __name__ == "__main__":
    unittest.main()
