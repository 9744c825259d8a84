from kundli_core.domain.dasha.ashtottari import AshtottariDasha
from kundli_core.domain.dasha.chara import CharaDasha
from kundli_core.domain.dasha.schemas import DashaSet
from kundli_core.domain.dasha.vimshottari import VimshottariDasha
from kundli_core.domain.dasha.yogini import YoginiDasha
from kundli_core.domain.kundali.schemas import NatalChart


class DashaBuilder:
    """
    Builds all four dasha timelines for a natal chart.
    """

    def __init__(
        self,
        vimshottari: VimshottariDasha | None = None,
        yogini: YoginiDasha | None = None,
        ashtottari: AshtottariDasha | None = None,
        chara: CharaDasha | None = None,
    ):
        self.vimshottari = vimshottari or VimshottariDasha()
        self.yogini = yogini or YoginiDasha()
        self.ashtottari = ashtottari or AshtottariDasha()
        self.chara = chara or CharaDasha()

    def build(self, chart: NatalChart, depth: int = 3) -> DashaSet:
        return DashaSet(
            vimshottari=self.vimshottari.generate(chart, depth),
            yogini=self.yogini.generate(chart, depth),
            ashtottari=self.ashtottari.generate(chart, depth),
            chara=self.chara.generate(chart, depth),
        )
