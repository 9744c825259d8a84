from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from kundli_core.domain.kundali.schemas import PlanetPosition


# ─────────────────────────────────────────────
# Gochar Schemas
# ─────────────────────────────────────────────

class GocharPlanet(BaseModel):
    """
    Represents a planet's gochar (relative position).
    """
    model_config = ConfigDict(frozen=True)

    planet: str
    sign: str
    from_lagna_house: int
    from_moon_house: int


class Gochar(BaseModel):
    """
    Transit houses counted from natal Lagna and natal Moon.
    """
    planets: Dict[str, GocharPlanet]
    calculation_version: str = Field(
        default="v1",
        description="Version of gochar calculation logic"
    )


# ─────────────────────────────────────────────
# Aspect Schemas
# ─────────────────────────────────────────────

class TransitAspect(BaseModel):
    """
    An aspect from a transiting body to a natal point.
    """
    model_config = ConfigDict(frozen=True)

    transiting: str
    natal: str
    aspect: str
    angle: float
    orb: float
    applying: bool
    strength: str

    @property
    def motion(self) -> str:
        return "applying" if self.applying else "separating"


# ─────────────────────────────────────────────
# Transit Schemas
# ─────────────────────────────────────────────

class TransitData(BaseModel):
    """
    Transit positions at one instant, mapped onto a natal chart.
    """
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    positions: Dict[str, PlanetPosition]
    gochar: Gochar
    aspects: List[TransitAspect]
    sade_sati_phase: Optional[str] = None
    dhaiya: Optional[str] = None
    calculation_version: str = "v1"

    @property
    def in_sade_sati(self) -> bool:
        return self.sade_sati_phase is not None

    def aspects_to(self, natal: str) -> List[TransitAspect]:
        return [a for a in self.aspects if a.natal == natal]


class TransitEvent(BaseModel):
    """
    A sign ingress or a retrograde/direct station.
    """
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    planet: str
    kind: str
    from_sign: str
    to_sign: str
    retrograde: bool


class TransitTimeline(BaseModel):
    start: datetime
    end: datetime
    step_days: int
    events: List[TransitEvent] = Field(default_factory=list)

    def for_planet(self, planet: str) -> List[TransitEvent]:
        return [e for e in self.events if e.planet == planet]
