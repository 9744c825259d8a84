from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# Synastry Schemas
# ─────────────────────────────────────────────

class SynastryAspect(BaseModel):
    """
    An aspect between a body in the first chart and one in the second.
    """
    model_config = ConfigDict(frozen=True)

    first_body: str
    second_body: str
    aspect: str
    angle: float
    orb: float
    nature: str
    weight: float

    def involves(self, body: str) -> bool:
        return body in (self.first_body, self.second_body)


class HouseOverlay(BaseModel):
    """
    A body of one chart placed in the houses of the other.
    """
    model_config = ConfigDict(frozen=True)

    body: str
    longitude: float
    sign: str
    house: int


class SynastryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str
    second_name: str
    aspects: List[SynastryAspect]
    first_in_second: List[HouseOverlay]
    second_in_first: List[HouseOverlay]
    score: float = Field(description="Heuristic harmony score, 0..100")

    def key_aspects(self, limit: int = 5) -> List[SynastryAspect]:
        return list(self.aspects[:limit])

    def aspects_by_nature(self) -> Dict[str, List[SynastryAspect]]:
        grouped: Dict[str, List[SynastryAspect]] = {}
        for aspect in self.aspects:
            grouped.setdefault(aspect.nature, []).append(aspect)
        return grouped

    def involving(self, *bodies: str) -> List[SynastryAspect]:
        """
        Aspects touching any of the given bodies, e.g. Venus/Mars/Moon for romance.
        """
        return [a for a in self.aspects if any(a.involves(b) for b in bodies)]


# ─────────────────────────────────────────────
# Composite Schemas
# ─────────────────────────────────────────────

class CompositePoint(BaseModel):
    """
    A midpoint body (or the ascendant) of a composite chart.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    longitude: float
    sign_index: int
    sign: str
    degree: float
    nakshatra: str
    pada: int
    house: int


class CompositeAspect(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_body: str
    second_body: str
    aspect: str
    angle: float
    orb: float
    nature: str


class CompositeChart(BaseModel):
    """
    Midpoint composite of two natal charts.

    Houses are equal 30° arcs from the composite ascendant.
    """
    model_config = ConfigDict(frozen=True)

    first_name: str
    second_name: str
    ascendant: CompositePoint
    planets: Dict[str, CompositePoint]
    aspects: List[CompositeAspect]
    calculation_version: str = "v1"

    def planet(self, name: str) -> CompositePoint:
        return self.planets[name]

    def planets_in_house(self, house: int) -> List[str]:
        return [name for name, p in self.planets.items() if p.house == house]
