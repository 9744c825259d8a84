from datetime import datetime, timezone
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from kundli_core.domain.dasha.schemas import DashaSet
from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.divisional.schemas import DivisionalCharts
from kundli_core.domain.kundali.schemas import (
    AscendantPosition,
    CalculationSettings,
    HouseInfo,
    NatalChart,
    PlanetPosition,
)
from kundli_core.domain.rules.schemas import Dosha, Yoga
from kundli_core.domain.strength.schemas import AshtakavargaData, ShadbalaData


class KundliSummary(BaseModel):
    """
    Headline facts of a kundli at an evaluation instant.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    ascendant: str
    sun_sign: str
    moon_sign: str
    moon_nakshatra: str
    atmakaraka: Optional[str] = None
    mahadasha: Optional[str] = None
    antardasha: Optional[str] = None
    yogas: List[str] = Field(default_factory=list)
    doshas: List[str] = Field(default_factory=list)


class KundliData(BaseModel):
    """
    Complete calculated kundli for one birth.

    Everything here is derived from `birth` and `settings`; persisting
    those two is enough to rebuild the rest.
    """
    model_config = ConfigDict(frozen=True)

    birth: BirthDetails
    settings: CalculationSettings
    chart: NatalChart
    divisional_charts: DivisionalCharts
    dashas: DashaSet
    karakas: Dict[str, str]
    yogas: List[Yoga] = Field(default_factory=list)
    doshas: List[Dosha] = Field(default_factory=list)
    failed_rules: List[str] = Field(default_factory=list)
    ashtakavarga: AshtakavargaData
    shadbala: ShadbalaData
    calculation_version: str = "v1"

    @property
    def ascendant(self) -> AscendantPosition:
        return self.chart.ascendant

    @property
    def planets(self) -> Dict[str, PlanetPosition]:
        return self.chart.planets

    @property
    def houses(self) -> List[HouseInfo]:
        return self.chart.houses

    @property
    def ayanamsa_value(self) -> float:
        return self.chart.ayanamsa_value

    @property
    def active_doshas(self) -> List[Dosha]:
        return [d for d in self.doshas if not d.cancelled]

    def summary(self, at: Optional[datetime] = None) -> KundliSummary:
        at = at or datetime.now(timezone.utc)
        chain = self.dashas.vimshottari.active_chain(at)
        moon = self.chart.planet("Moon")

        return KundliSummary(
            name=self.birth.name,
            ascendant=self.ascendant.sign,
            sun_sign=self.chart.planet("Sun").sign,
            moon_sign=moon.sign,
            moon_nakshatra=moon.nakshatra,
            atmakaraka=self.karakas.get("Atmakaraka"),
            mahadasha=chain[0].lord if chain else None,
            antardasha=chain[1].lord if len(chain) > 1 else None,
            yogas=[y.name for y in self.yogas],
            doshas=[d.name for d in self.active_doshas],
        )
