"""
Synthetic natal charts for tests that should not depend on the ephemeris.
"""

from datetime import datetime, timezone
from typing import Dict, Optional
from unittest.mock import MagicMock

from kundli_core.domain.kundali.engine import ChartBuilder
from kundli_core.domain.kundali.schemas import (
    AyanamsaType,
    CalculationSettings,
    HouseSystem,
    NatalChart,
    NodeType,
)
from kundli_core.domain.kundali.zodiac import normalize


# Spread out so that no default placement forms a dosha by itself
DEFAULT_LONGITUDES = {
    "Sun": 95.0,       # Cancer
    "Moon": 125.0,     # Leo
    "Mars": 155.0,     # Virgo
    "Mercury": 100.0,  # Cancer
    "Jupiter": 215.0,  # Scorpio
    "Venus": 65.0,     # Gemini
    "Saturn": 275.0,   # Capricorn
    "Rahu": 20.0,      # Aries
}

WHOLE_SIGN = CalculationSettings(
    ayanamsa=AyanamsaType.LAHIRI,
    house_system=HouseSystem.WHOLE_SIGN,
    node_type=NodeType.MEAN,
)


def make_chart(
    ascendant: float = 15.0,
    longitudes: Optional[Dict[str, float]] = None,
    speeds: Optional[Dict[str, float]] = None,
    settings: CalculationSettings = WHOLE_SIGN,
    birth_utc: Optional[datetime] = None,
) -> NatalChart:
    """
    Build a NatalChart from sidereal longitudes. Ketu always opposes Rahu.
    """
    placements = dict(DEFAULT_LONGITUDES)
    placements.update(longitudes or {})
    placements["Ketu"] = normalize(placements["Rahu"] + 180.0)

    motion = {name: 1.0 for name in placements}
    motion["Moon"] = 13.0
    motion["Rahu"] = motion["Ketu"] = -0.053
    motion.update(speeds or {})

    raw = {
        "birth_utc": birth_utc or datetime(2000, 1, 1, 6, 30, tzinfo=timezone.utc),
        "julian_day": 2451544.770833,
        "ayanamsa": 23.85,
        "ascendant": ascendant,
        "planets": {
            name: {"longitude": lon, "speed": motion[name]}
            for name, lon in placements.items()
        },
        "cusps": [normalize(ascendant + 30.0 * i) for i in range(12)],
    }

    return ChartBuilder(calculator=MagicMock()).build(raw, settings)
