from typing import Dict, Optional

from kundli_core.domain.kundali.schemas import NatalChart, PlanetPosition
from kundli_core.domain.kundali.zodiac import house_distance
from kundli_core.domain.transits.schemas import Gochar, GocharPlanet


SADE_SATI_PHASES = {12: "Rising", 1: "Peak", 2: "Setting"}
DHAIYA_KINDS = {4: "Kantaka", 8: "Ashtama"}


class GocharCalculator:
    """
    Calculates gochar (relative transit positions)
    from Lagna and Moon.
    """

    calculation_version = "v1"

    def calculate(
        self,
        natal: NatalChart,
        positions: Dict[str, PlanetPosition],
    ) -> Gochar:
        """
        Calculate gochar for all transit planets.
        """
        lagna_sign = natal.ascendant.sign_index
        moon_sign = natal.planet("Moon").sign_index

        return Gochar(
            planets={
                name: GocharPlanet(
                    planet=name,
                    sign=position.sign,
                    # Inclusive forward count (1–12)
                    from_lagna_house=house_distance(lagna_sign, position.sign_index),
                    from_moon_house=house_distance(moon_sign, position.sign_index),
                )
                for name, position in positions.items()
            },
            calculation_version=self.calculation_version,
        )

    # ─────────────────────────────────────────────
    # Saturn cycles
    # ─────────────────────────────────────────────

    def saturn_house_from_moon(self, natal: NatalChart, saturn: PlanetPosition) -> int:
        return house_distance(natal.planet("Moon").sign_index, saturn.sign_index)

    def sade_sati_phase(self, natal: NatalChart, saturn: PlanetPosition) -> Optional[str]:
        return SADE_SATI_PHASES.get(self.saturn_house_from_moon(natal, saturn))

    def dhaiya(self, natal: NatalChart, saturn: PlanetPosition) -> Optional[str]:
        return DHAIYA_KINDS.get(self.saturn_house_from_moon(natal, saturn))
