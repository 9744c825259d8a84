from typing import List
from pydantic import BaseModel, ConfigDict, Field


class MoonProfile(BaseModel):
    """
    Avakahada attributes derived from one natal Moon.
    """
    model_config = ConfigDict(frozen=True)

    sign_index: int
    sign: str
    nakshatra_index: int
    nakshatra: str
    varna: str
    vashya: str
    yoni: str
    gana: str
    nadi: str
    sign_lord: str


class KootaScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    score: float
    max_score: float
    first_value: str
    second_value: str
    area: str
    description: str


class MatchDosha(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    present: bool
    cancelled: bool = False
    description: str


class MatchResult(BaseModel):
    """
    Ashtakoota (Guna Milan) result between two charts.
    """
    first_name: str
    second_name: str
    first: MoonProfile
    second: MoonProfile
    total_score: float
    max_score: float = 36.0
    percentage: float
    verdict: str
    kootas: List[KootaScore] = Field(default_factory=list)
    doshas: List[MatchDosha] = Field(default_factory=list)

    def koota(self, name: str) -> KootaScore:
        for koota in self.kootas:
            if koota.name == name:
                return koota
        raise KeyError(name)

    @property
    def active_doshas(self) -> List[MatchDosha]:
        return [d for d in self.doshas if d.present and not d.cancelled]
