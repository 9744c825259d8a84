from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


DAYS_PER_YEAR = 365.25

LEVEL_NAMES = {
    1: "Mahadasha",
    2: "Antardasha",
    3: "Pratyantardasha",
    4: "Sookshmadasha",
    5: "Pranadasha",
}


class DashaPeriod(BaseModel):
    """
    One period of a dasha timeline with its nested sub-periods.

    Whether a period is running is always derived from an evaluation
    instant; nothing about "now" is stored.
    """
    model_config = ConfigDict(frozen=True)

    lord: str
    label: Optional[str] = None
    level: int
    start: datetime
    end: datetime
    sub_periods: List[DashaPeriod] = Field(default_factory=list)

    @property
    def level_name(self) -> str:
        return LEVEL_NAMES[self.level]

    @property
    def duration_years(self) -> float:
        return (self.end - self.start).total_seconds() / 86400.0 / DAYS_PER_YEAR

    def is_active(self, at: datetime) -> bool:
        return self.start <= at < self.end

    def active_sub_period(self, at: datetime) -> Optional[DashaPeriod]:
        for period in self.sub_periods:
            if period.is_active(at):
                return period
        return None


class DashaTimeline(BaseModel):
    """
    Complete timeline of one dasha system.
    """
    model_config = ConfigDict(frozen=True)

    system: str
    cycle_years: float
    start: datetime
    balance_years: float
    applicable: bool = True
    periods: List[DashaPeriod]

    @property
    def end(self) -> datetime:
        return self.periods[-1].end

    def active_period(self, at: datetime) -> Optional[DashaPeriod]:
        for period in self.periods:
            if period.is_active(at):
                return period
        return None

    def active_chain(self, at: datetime) -> List[DashaPeriod]:
        """
        Running periods at every level, Mahadasha first.
        """
        chain: List[DashaPeriod] = []
        period = self.active_period(at)
        while period is not None:
            chain.append(period)
            period = period.active_sub_period(at)
        return chain


class DashaSet(BaseModel):
    """
    The four dasha systems computed for a chart.
    """
    model_config = ConfigDict(frozen=True)

    vimshottari: DashaTimeline
    yogini: DashaTimeline
    ashtottari: DashaTimeline
    chara: DashaTimeline
