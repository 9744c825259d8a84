from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class TimeInterval(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


class TithiInfo(BaseModel):
    """
    Lunar day: one of 30 twelve-degree steps of Moon-Sun elongation.
    """
    model_config = ConfigDict(frozen=True)

    index: int
    number: int
    name: str
    paksha: str
    completion: float


class PanchangNakshatra(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    name: str
    lord: str
    pada: int


class PanchangYoga(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    name: str


class KaranaInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    name: str


class Hora(BaseModel):
    """
    One planetary hour.
    """
    model_config = ConfigDict(frozen=True)

    number: int
    lord: str
    start: datetime
    end: datetime
    is_day: bool


class Panchang(BaseModel):
    """
    The Vedic almanac for one civil day at one place, taken at sunrise.
    """
    model_config = ConfigDict(frozen=True)

    date: date
    weekday: str
    weekday_lord: str
    latitude: float
    longitude: float
    timezone: str
    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime
    polar_fallback: bool = False

    tithi: TithiInfo
    nakshatra: PanchangNakshatra
    yoga: PanchangYoga
    karana: KaranaInfo
    moon_phase: str

    rahu_kaal: TimeInterval
    yamaganda: TimeInterval
    gulika_kaal: TimeInterval

    horas: List[Hora]

    calculation_version: str = "v1"

    def hora_at(self, instant: datetime) -> Optional[Hora]:
        """
        Hora containing instant, for callers polling the current hour.
        """
        for hora in self.horas:
            if hora.start <= instant < hora.end:
                return hora
        return None
