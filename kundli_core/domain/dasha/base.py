from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from kundli_core.domain.dasha.schemas import DAYS_PER_YEAR, DashaPeriod, DashaTimeline
from kundli_core.domain.kundali.schemas import NatalChart

# (lord, years, optional label)
Segment = Tuple[str, float, Optional[str]]


class BaseDashaSystem(ABC):
    """
    Abstract base class for dasha systems.

    Each system must:
    - Declare `system` and `cycle_years`
    - Implement `generate` to pick the starting point
    - Implement `sub_sequence` describing how a period subdivides
    """

    system: str
    cycle_years: float
    max_depth: int = 5
    calculation_version: str = "v1"

    @abstractmethod
    def generate(self, chart: NatalChart, depth: int = 3) -> DashaTimeline:
        raise NotImplementedError

    @abstractmethod
    def sub_sequence(self, parent: DashaPeriod) -> List[Segment]:
        """
        Ordered sub-periods (lord, years, label) of a parent period.
        """
        raise NotImplementedError

    # ─────────────────────────────────────────────
    # Shared period construction
    # ─────────────────────────────────────────────

    def _build_periods(
        self,
        start: datetime,
        end: datetime,
        segments: Sequence[Segment],
        level: int,
        depth: int,
    ) -> List[DashaPeriod]:
        """
        Lay segments end to end from start to end.

        Boundaries come from cumulative years so that rounding never
        opens a gap; the final boundary is pinned to `end`.
        """
        periods: List[DashaPeriod] = []
        cumulative = 0.0
        current = start

        for position, (lord, years, label) in enumerate(segments):
            cumulative += years
            if position == len(segments) - 1:
                boundary = end
            else:
                boundary = start + timedelta(days=cumulative * DAYS_PER_YEAR)

            period = DashaPeriod(
                lord=lord,
                label=label,
                level=level,
                start=current,
                end=boundary,
            )

            if level < depth:
                children = self._build_periods(
                    current,
                    boundary,
                    self.sub_sequence(period),
                    level + 1,
                    depth,
                )
                period = period.model_copy(update={"sub_periods": children})

            periods.append(period)
            current = boundary

        self._assert_contiguous(periods, start, end)
        return periods

    def _timeline(
        self,
        origin: datetime,
        segments: Sequence[Segment],
        depth: int,
        balance_years: float,
        applicable: bool = True,
    ) -> DashaTimeline:
        depth = min(depth, self.max_depth)
        total_years = sum(years for _, years, _ in segments)
        end = origin + timedelta(days=total_years * DAYS_PER_YEAR)

        periods = self._build_periods(origin, end, segments, 1, depth)

        return DashaTimeline(
            system=self.system,
            cycle_years=total_years,
            start=origin,
            balance_years=balance_years,
            applicable=applicable,
            periods=periods,
        )

    def _assert_contiguous(
        self,
        periods: List[DashaPeriod],
        start: datetime,
        end: datetime,
    ) -> None:
        assert periods, f"{self.system}: empty period list"
        assert periods[0].start == start, f"{self.system}: timeline does not open at start"
        assert periods[-1].end == end, f"{self.system}: timeline does not close at end"
        for previous, following in zip(periods, periods[1:]):
            assert previous.end == following.start, (
                f"{self.system}: gap between {previous.lord} and {following.lord}"
            )
            assert previous.start < previous.end, (
                f"{self.system}: empty period for {previous.lord}"
            )
