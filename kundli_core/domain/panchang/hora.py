from datetime import datetime
from typing import List

from kundli_core.domain.panchang.schemas import Hora


# Descending orbital period; each hora hands over to the next in this list
CHALDEAN_ORDER = ["Saturn", "Jupiter", "Mars", "Sun", "Venus", "Mercury", "Moon"]

# Sunday first
WEEKDAY_NAMES = [
    "Sunday", "Monday", "Tuesday", "Wednesday",
    "Thursday", "Friday", "Saturday",
]
WEEKDAY_LORDS = ["Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn"]


def weekday_index(day) -> int:
    """Sunday-first weekday index of a date or datetime."""
    return (day.weekday() + 1) % 7


def hora_lord(day_lord: str, number: int) -> str:
    """Lord of hora `number` (1-based) of a day ruled by day_lord."""
    start = CHALDEAN_ORDER.index(day_lord)
    return CHALDEAN_ORDER[(start + number - 1) % 7]


def build_horas(
    sunrise: datetime,
    sunset: datetime,
    next_sunrise: datetime,
    day_lord: str,
) -> List[Hora]:
    """
    Twelve day horas from sunrise and twelve night horas from sunset.
    """
    day_length = (sunset - sunrise) / 12
    night_length = (next_sunrise - sunset) / 12

    horas: List[Hora] = []
    for i in range(24):
        if i < 12:
            start = sunrise + day_length * i
            end = sunset if i == 11 else start + day_length
        else:
            start = sunset + night_length * (i - 12)
            end = next_sunrise if i == 23 else start + night_length

        horas.append(
            Hora(
                number=i + 1,
                lord=hora_lord(day_lord, i + 1),
                start=start,
                end=end,
                is_day=i < 12,
            )
        )

    return horas
