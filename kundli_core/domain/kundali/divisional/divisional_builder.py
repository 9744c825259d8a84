from typing import Dict, List

from kundli_core.domain.kundali.schemas import NatalChart
from kundli_core.domain.kundali.divisional.schemas import DivisionalChart, DivisionalCharts
from kundli_core.domain.kundali.divisional.base import BaseDivisionalCalculator
from kundli_core.domain.kundali.divisional.vargas import SHODASAVARGA


class DivisionalBuilder:
    """
    Orchestrates the calculation of all divisional charts
    for a given natal chart.
    """

    def __init__(
        self,
        calculators: List[BaseDivisionalCalculator] | None = None
    ):
        # Default: all sixteen Shodasavarga charts
        self.calculators = calculators or list(SHODASAVARGA)

    def build(
        self,
        chart: NatalChart
    ) -> DivisionalCharts:
        """
        Build all supported divisional charts.
        """

        charts: Dict[str, DivisionalChart] = {}

        for calculator in self.calculators:
            divisional = calculator.calculate(chart)
            charts[divisional.chart_type] = divisional

        return DivisionalCharts(
            charts=charts,
            calculation_version=self.calculators[0].calculation_version if self.calculators else "v1"
        )
