from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# Ashtakavarga
# ─────────────────────────────────────────────

class SignStrength(BaseModel):
    model_config = ConfigDict(frozen=True)

    sign_index: int
    sign: str
    points: int
    strength: str


class AshtakavargaData(BaseModel):
    """
    Bhinna (per-planet) bindu rows and the Sarva totals per sign.
    """
    model_config = ConfigDict(frozen=True)

    bhinna: Dict[str, List[int]]
    sarva: List[int]
    planet_totals: Dict[str, int]
    sign_strengths: List[SignStrength]

    @property
    def total(self) -> int:
        return sum(self.sarva)

    def points(self, planet: str, sign_index: int) -> int:
        return self.bhinna[planet][sign_index]

    def strongest_signs(self, count: int = 3) -> List[SignStrength]:
        return sorted(
            self.sign_strengths,
            key=lambda s: (-s.points, s.sign_index),
        )[:count]


# ─────────────────────────────────────────────
# Shadbala
# ─────────────────────────────────────────────

class ShadbalaScore(BaseModel):
    """
    Six-fold strength of one planet, in virupas (1 rupa = 60 virupas).
    """
    model_config = ConfigDict(frozen=True)

    planet: str
    sthana: float
    dig: float
    kala: float
    chesta: float
    naisargika: float
    drik: float
    total_virupas: float
    total_rupas: float
    required_virupas: float
    ratio: float
    level: str
    components: Dict[str, float] = Field(default_factory=dict)

    @property
    def is_sufficient(self) -> bool:
        return self.total_virupas >= self.required_virupas


class ShadbalaData(BaseModel):
    model_config = ConfigDict(frozen=True)

    scores: Dict[str, ShadbalaScore]

    def score(self, planet: str) -> Optional[ShadbalaScore]:
        return self.scores.get(planet)

    @property
    def strongest(self) -> str:
        return max(self.scores.values(), key=lambda s: s.ratio).planet

    @property
    def weakest(self) -> str:
        return min(self.scores.values(), key=lambda s: s.ratio).planet
