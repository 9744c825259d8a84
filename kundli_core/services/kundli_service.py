import logging
from datetime import date, datetime
from typing import Optional

from kundli_core.domain.comparison.composite import CompositeChartCalculator
from kundli_core.domain.comparison.schemas import CompositeChart, SynastryResult
from kundli_core.domain.comparison.synastry import SynastryCalculator
from kundli_core.domain.dasha.chara import jaimini_karakas
from kundli_core.domain.dasha.dasha_builder import DashaBuilder
from kundli_core.domain.kundali.ayanamsa import AyanamsaCorrector
from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.calculator import KundaliCalculator
from kundli_core.domain.kundali.divisional.divisional_builder import DivisionalBuilder
from kundli_core.domain.kundali.engine import ChartBuilder
from kundli_core.domain.kundali.ephemeris import EphemerisAdapter
from kundli_core.domain.kundali.kundli import KundliData
from kundli_core.domain.kundali.schemas import CalculationSettings
from kundli_core.domain.matching.ashtakoota import AshtakootaMatcher
from kundli_core.domain.matching.schemas import MatchResult
from kundli_core.domain.panchang.panchang_engine import PanchangEngine
from kundli_core.domain.panchang.schemas import Panchang
from kundli_core.domain.panchang.sun import SunCalculator
from kundli_core.domain.rules.rule_engine import RuleEngine
from kundli_core.domain.strength.ashtakavarga import AshtakavargaCalculator
from kundli_core.domain.strength.shadbala import ShadbalaCalculator
from kundli_core.domain.transits.schemas import TransitData, TransitTimeline
from kundli_core.domain.transits.transit_builder import TransitBuilder
from kundli_core.domain.transits.transit_engine import TransitEngine

logger = logging.getLogger(__name__)


class KundliService:
    """
    Core orchestration service for kundli generation.

    One ephemeris adapter and ayanamsa corrector are shared by every
    engine the service owns. The service holds no per-request state.
    """

    def __init__(
        self,
        ephemeris: Optional[EphemerisAdapter] = None,
        ayanamsa: Optional[AyanamsaCorrector] = None,
    ):
        self.ephemeris = ephemeris or EphemerisAdapter()
        self.ayanamsa = ayanamsa or AyanamsaCorrector()

        self.chart_builder = ChartBuilder(
            calculator=KundaliCalculator(self.ephemeris, self.ayanamsa),
        )
        self.divisional_builder = DivisionalBuilder()
        self.dasha_builder = DashaBuilder()
        self.rule_engine = RuleEngine()
        self.ashtakavarga = AshtakavargaCalculator()
        self.shadbala = ShadbalaCalculator()
        self.sun = SunCalculator(self.ephemeris)

        self.panchang_engine = PanchangEngine(
            ephemeris=self.ephemeris,
            ayanamsa=self.ayanamsa,
            sun=self.sun,
        )
        self.transit_builder = TransitBuilder(
            transit_engine=TransitEngine(self.ephemeris, self.ayanamsa, self.chart_builder),
        )
        self.matcher = AshtakootaMatcher()
        self.synastry = SynastryCalculator()
        self.composite = CompositeChartCalculator()

    # ─────────────────────────────────────────────
    # Kundli
    # ─────────────────────────────────────────────

    def generate(
        self,
        birth: BirthDetails,
        settings: Optional[CalculationSettings] = None,
    ) -> KundliData:
        settings = settings or CalculationSettings.default()

        # ─────────────────────────────────────────────
        # Step 1: Natal chart (D1)
        # ─────────────────────────────────────────────

        chart = self.chart_builder.generate(birth, settings)

        # ─────────────────────────────────────────────
        # Step 2: Divisional charts
        # ─────────────────────────────────────────────

        divisional = self.divisional_builder.build(chart)

        # ─────────────────────────────────────────────
        # Step 3: Dashas and karakas
        # ─────────────────────────────────────────────

        dashas = self.dasha_builder.build(chart, settings.dasha_depth)
        karakas = jaimini_karakas(chart)

        # ─────────────────────────────────────────────
        # Step 4: Yogas and doshas
        # ─────────────────────────────────────────────

        evaluation = self.rule_engine.evaluate(chart)

        # ─────────────────────────────────────────────
        # Step 5: Strength
        # ─────────────────────────────────────────────

        sun_times = self.sun.sun_times(
            birth.birth_date,
            birth.latitude,
            birth.longitude,
            birth.timezone,
        )
        ashtakavarga = self.ashtakavarga.calculate(chart)
        shadbala = self.shadbala.calculate(chart, birth, divisional, sun_times)

        logger.debug(
            "Kundli for %s: %s lagna, %d yogas, %d doshas",
            birth.name,
            chart.ascendant.sign,
            len(evaluation.yogas),
            len(evaluation.doshas),
        )

        return KundliData(
            birth=birth,
            settings=settings,
            chart=chart,
            divisional_charts=divisional,
            dashas=dashas,
            karakas=karakas,
            yogas=evaluation.yogas,
            doshas=evaluation.doshas,
            failed_rules=evaluation.failed_rules,
            ashtakavarga=ashtakavarga,
            shadbala=shadbala,
        )

    # ─────────────────────────────────────────────
    # Time-keyed analyses
    # ─────────────────────────────────────────────

    def transits(self, kundli: KundliData, at: Optional[datetime] = None) -> TransitData:
        return self.transit_builder.build(kundli.chart, at)

    def transit_timeline(
        self,
        kundli: KundliData,
        start: Optional[datetime] = None,
        days: Optional[int] = None,
        step_days: Optional[int] = None,
    ) -> TransitTimeline:
        return self.transit_builder.timeline(kundli.chart, start, days, step_days)

    def panchang(
        self,
        day: date,
        latitude: float,
        longitude: float,
        timezone: str,
        settings: Optional[CalculationSettings] = None,
    ) -> Panchang:
        return self.panchang_engine.generate(day, latitude, longitude, timezone, settings)

    # ─────────────────────────────────────────────
    # Matching
    # ─────────────────────────────────────────────

    def match(self, first: KundliData, second: KundliData) -> MatchResult:
        """
        Ashtakoota match; `first` is scored on the groom's side.
        """
        return self.matcher.match(
            first.chart.planet("Moon"),
            second.chart.planet("Moon"),
            first_name=first.birth.name,
            second_name=second.birth.name,
        )

    # ─────────────────────────────────────────────
    # Chart comparison
    # ─────────────────────────────────────────────

    def compare(self, first: KundliData, second: KundliData) -> SynastryResult:
        return self.synastry.compare(
            first.chart,
            second.chart,
            first_name=first.birth.name,
            second_name=second.birth.name,
        )

    def composite_chart(self, first: KundliData, second: KundliData) -> CompositeChart:
        return self.composite.calculate(
            first.chart,
            second.chart,
            first_name=first.birth.name,
            second_name=second.birth.name,
        )
