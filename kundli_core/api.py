"""
In-process computation API.

Each call builds its own engines unless a KundliService is passed in;
nothing is cached between calls.
"""

from datetime import date, datetime
from typing import Optional

from kundli_core.domain.comparison.schemas import CompositeChart, SynastryResult
from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.kundli import KundliData
from kundli_core.domain.kundali.schemas import CalculationSettings
from kundli_core.domain.matching.schemas import MatchResult
from kundli_core.domain.panchang.schemas import Panchang
from kundli_core.domain.transits.schemas import TransitData
from kundli_core.services.kundli_service import KundliService


def generate_chart(
    birth_details: BirthDetails,
    settings: Optional[CalculationSettings] = None,
    service: Optional[KundliService] = None,
) -> KundliData:
    return (service or KundliService()).generate(birth_details, settings)


def generate_panchang(
    day: date,
    latitude: float,
    longitude: float,
    timezone: str,
    settings: Optional[CalculationSettings] = None,
    service: Optional[KundliService] = None,
) -> Panchang:
    return (service or KundliService()).panchang(day, latitude, longitude, timezone, settings)


def generate_transits(
    kundli: KundliData,
    at: Optional[datetime] = None,
    service: Optional[KundliService] = None,
) -> TransitData:
    """
    Transits over a calculated kundli. `at` defaults to now (UTC).
    """
    return (service or KundliService()).transits(kundli, at)


def match_kundlis(
    first: KundliData,
    second: KundliData,
    service: Optional[KundliService] = None,
) -> MatchResult:
    return (service or KundliService()).match(first, second)


def compare_kundlis(
    first: KundliData,
    second: KundliData,
    service: Optional[KundliService] = None,
) -> SynastryResult:
    """
    Inter-chart aspects and house overlays between two kundlis.
    """
    return (service or KundliService()).compare(first, second)


def generate_composite_chart(
    first: KundliData,
    second: KundliData,
    service: Optional[KundliService] = None,
) -> CompositeChart:
    return (service or KundliService()).composite_chart(first, second)
