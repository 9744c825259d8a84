import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from kundli_core.config import settings
from kundli_core.domain.kundali.ephemeris import julian_day
from kundli_core.domain.kundali.errors import UnsupportedConfigurationError
from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.transits.aspects import AspectCalculator
from kundli_core.domain.transits.gochar_calculator import GocharCalculator
from kundli_core.domain.transits.schemas import (
    TransitData,
    TransitEvent,
    TransitTimeline,
)
from kundli_core.domain.transits.transit_engine import TransitEngine

logger = logging.getLogger(__name__)


class TransitBuilder:
    """
    Orchestrates transit, gochar and aspect calculation
    for a given natal chart and timestamp.
    """

    def __init__(
        self,
        transit_engine: TransitEngine | None = None,
        gochar_calculator: GocharCalculator | None = None,
        aspect_calculator: AspectCalculator | None = None,
    ):
        self.transit_engine = transit_engine or TransitEngine()
        self.gochar_calculator = gochar_calculator or GocharCalculator()
        self.aspect_calculator = aspect_calculator or AspectCalculator()

    def build(
        self,
        natal: NatalChart,
        timestamp: datetime | None = None,
    ) -> TransitData:
        """
        Build transit data.

        If timestamp is None, current UTC time is used.
        """

        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        # ─────────────────────────────────────────────
        # Transit positions
        # ─────────────────────────────────────────────

        positions = self.transit_engine.calculate(natal, timestamp)

        # ─────────────────────────────────────────────
        # Gochar and Saturn cycles
        # ─────────────────────────────────────────────

        gochar = self.gochar_calculator.calculate(natal, positions)
        saturn = positions["Saturn"]

        # ─────────────────────────────────────────────
        # Aspects to natal points
        # ─────────────────────────────────────────────

        aspects = self.aspect_calculator.find(positions, natal)

        return TransitData(
            timestamp=timestamp,
            positions=positions,
            gochar=gochar,
            aspects=aspects,
            sade_sati_phase=self.gochar_calculator.sade_sati_phase(natal, saturn),
            dhaiya=self.gochar_calculator.dhaiya(natal, saturn),
            calculation_version=self.transit_engine.calculation_version,
        )

    def timeline(
        self,
        natal: NatalChart,
        start: datetime | None = None,
        days: int | None = None,
        step_days: int | None = None,
    ) -> TransitTimeline:
        """
        Sign ingresses and stations found by sampling at a fixed step.

        Event times are the first sample after the change.
        """
        if start is None:
            start = datetime.now(timezone.utc)
        days = settings.TRANSIT_TIMELINE_DAYS if days is None else days
        step_days = settings.TRANSIT_TIMELINE_STEP_DAYS if step_days is None else step_days
        if days <= 0 or step_days <= 0:
            raise UnsupportedConfigurationError("Transit timeline needs positive days and step")

        end = start + timedelta(days=days)
        start_jd = julian_day(start)

        events = []
        previous: Dict[str, Tuple[int, str, bool]] = {}

        for offset in range(0, days + 1, step_days):
            positions = self.transit_engine.calculate_at(natal, start_jd + offset)
            moment = start + timedelta(days=offset)

            for name, position in positions.items():
                state = (position.sign_index, position.sign, position.retrograde)
                before: Optional[Tuple[int, str, bool]] = previous.get(name)
                previous[name] = state
                if before is None:
                    continue

                if before[0] != state[0]:
                    events.append(TransitEvent(
                        timestamp=moment,
                        planet=name,
                        kind="ingress",
                        from_sign=before[1],
                        to_sign=state[1],
                        retrograde=state[2],
                    ))
                if before[2] != state[2]:
                    events.append(TransitEvent(
                        timestamp=moment,
                        planet=name,
                        kind="station_retrograde" if state[2] else "station_direct",
                        from_sign=before[1],
                        to_sign=state[1],
                        retrograde=state[2],
                    ))

        logger.debug("Transit timeline %s..%s: %d events", start, end, len(events))

        return TransitTimeline(
            start=start,
            end=end,
            step_days=step_days,
            events=events,
        )
