"""
kundli_core

Vedic astrology calculation core: natal charts, vargas, dashas,
yogas and doshas, strength, transits, panchang, matching and chart
comparison.
"""

from kundli_core.api import (
    compare_kundlis,
    generate_chart,
    generate_composite_chart,
    generate_panchang,
    generate_transits,
    match_kundlis,
)
from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.converters import (
    birth_details_from_persistence,
    kundli_to_context_text,
    kundli_to_persistence,
    settings_from_persistence,
)
from kundli_core.domain.kundali.errors import (
    CalculationError,
    DateOutOfEphemerisRangeError,
    InvalidBirthDetailsError,
    KundaliError,
    UnsupportedConfigurationError,
)
from kundli_core.domain.kundali.kundli import KundliData, KundliSummary
from kundli_core.domain.kundali.schemas import (
    AyanamsaType,
    CalculationSettings,
    Gender,
    HouseSystem,
    NodeType,
)
from kundli_core.services.kundli_service import KundliService

__all__ = [
    "generate_chart",
    "generate_panchang",
    "generate_transits",
    "match_kundlis",
    "compare_kundlis",
    "generate_composite_chart",
    "BirthDetails",
    "CalculationSettings",
    "AyanamsaType",
    "HouseSystem",
    "NodeType",
    "Gender",
    "KundliData",
    "KundliSummary",
    "KundliService",
    "kundli_to_persistence",
    "birth_details_from_persistence",
    "settings_from_persistence",
    "kundli_to_context_text",
    "KundaliError",
    "InvalidBirthDetailsError",
    "DateOutOfEphemerisRangeError",
    "UnsupportedConfigurationError",
    "CalculationError",
]
