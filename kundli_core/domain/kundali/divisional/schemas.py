from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field


class VargaPlacement(BaseModel):
    """
    One body's sign and degree inside a divisional chart.
    """
    model_config = ConfigDict(frozen=True)

    body: str
    sign_index: int
    sign: str
    degree: float


class DivisionalChart(BaseModel):
    """
    Represents a single divisional chart (D9, D10, etc.).
    """
    model_config = ConfigDict(frozen=True)

    chart_type: str
    name: str
    division: int
    ascendant: VargaPlacement
    placements: List[VargaPlacement]
    calculation_version: str

    def sign_of(self, body: str) -> int:
        if body == "Ascendant":
            return self.ascendant.sign_index
        for placement in self.placements:
            if placement.body == body:
                return placement.sign_index
        raise KeyError(body)


class DivisionalCharts(BaseModel):
    """
    Container for all divisional charts of a kundli.
    """

    charts: Dict[str, DivisionalChart] = Field(default_factory=dict)
    calculation_version: str = "v1"
