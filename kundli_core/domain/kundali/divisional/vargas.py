"""
The sixteen Shodasavarga charts of Parashara.

Each calculator encodes one classical mapping rule from (natal sign,
part index) to a destination sign. Modality is movable/fixed/dual;
parity is odd (Aries, Gemini, ...) or even (Taurus, Cancer, ...).
"""

from typing import List, Tuple

from kundli_core.domain.kundali.divisional.base import BaseDivisionalCalculator
from kundli_core.domain.kundali.zodiac import (
    DUAL_SIGNS,
    FIXED_SIGNS,
    MOVABLE_SIGNS,
    degree_in_sign,
    is_odd_sign,
    sign_index,
)

ARIES, TAURUS, GEMINI, CANCER, LEO, VIRGO = range(6)
LIBRA, SCORPIO, SAGITTARIUS, CAPRICORN, AQUARIUS, PISCES = range(6, 12)


def _by_modality(sign: int, movable: int, fixed: int, dual: int) -> int:
    if sign in MOVABLE_SIGNS:
        return movable
    if sign in FIXED_SIGNS:
        return fixed
    assert sign in DUAL_SIGNS
    return dual


class D1Calculator(BaseDivisionalCalculator):
    chart_type = "D1"
    name = "Rashi"
    division = 1

    def varga_sign(self, sign: int, part: int) -> int:
        return sign


class D2Calculator(BaseDivisionalCalculator):
    """
    Hora: odd signs give Leo then Cancer, even signs Cancer then Leo.
    """
    chart_type = "D2"
    name = "Hora"
    division = 2

    def varga_sign(self, sign: int, part: int) -> int:
        if is_odd_sign(sign):
            return LEO if part == 0 else CANCER
        return CANCER if part == 0 else LEO


class D3Calculator(BaseDivisionalCalculator):
    """
    Drekkana: the sign itself, its 5th, then its 9th.
    """
    chart_type = "D3"
    name = "Drekkana"
    division = 3

    def varga_sign(self, sign: int, part: int) -> int:
        return sign + 4 * part


class D4Calculator(BaseDivisionalCalculator):
    """
    Chaturthamsa: the sign and its 4th, 7th and 10th.
    """
    chart_type = "D4"
    name = "Chaturthamsa"
    division = 4

    def varga_sign(self, sign: int, part: int) -> int:
        return sign + 3 * part


class D7Calculator(BaseDivisionalCalculator):
    """
    Saptamsa: odd signs count from the sign, even from its 7th.
    """
    chart_type = "D7"
    name = "Saptamsa"
    division = 7

    def varga_sign(self, sign: int, part: int) -> int:
        start = sign if is_odd_sign(sign) else sign + 6
        return start + part


class D9Calculator(BaseDivisionalCalculator):
    """
    Navamsa: movable signs count from the sign, fixed from its 9th and
    dual from its 5th.
    """
    chart_type = "D9"
    name = "Navamsa"
    division = 9

    def varga_sign(self, sign: int, part: int) -> int:
        start = _by_modality(sign, sign, sign + 8, sign + 4)
        return start + part


class D10Calculator(BaseDivisionalCalculator):
    """
    Dasamsa: odd signs count from the sign, even from its 9th.
    """
    chart_type = "D10"
    name = "Dasamsa"
    division = 10

    def varga_sign(self, sign: int, part: int) -> int:
        start = sign if is_odd_sign(sign) else sign + 8
        return start + part


class D12Calculator(BaseDivisionalCalculator):
    chart_type = "D12"
    name = "Dwadasamsa"
    division = 12

    def varga_sign(self, sign: int, part: int) -> int:
        return sign + part


class D16Calculator(BaseDivisionalCalculator):
    chart_type = "D16"
    name = "Shodasamsa"
    division = 16

    def varga_sign(self, sign: int, part: int) -> int:
        return _by_modality(sign, ARIES, LEO, SAGITTARIUS) + part


class D20Calculator(BaseDivisionalCalculator):
    chart_type = "D20"
    name = "Vimsamsa"
    division = 20

    def varga_sign(self, sign: int, part: int) -> int:
        return _by_modality(sign, ARIES, SAGITTARIUS, LEO) + part


class D24Calculator(BaseDivisionalCalculator):
    chart_type = "D24"
    name = "Chaturvimsamsa"
    division = 24

    def varga_sign(self, sign: int, part: int) -> int:
        start = LEO if is_odd_sign(sign) else CANCER
        return start + part


class D27Calculator(BaseDivisionalCalculator):
    """
    Bhamsa: fire signs from Aries, earth from Cancer, air from Libra,
    water from Capricorn.
    """
    chart_type = "D27"
    name = "Bhamsa"
    division = 27

    def varga_sign(self, sign: int, part: int) -> int:
        return (sign % 4) * 3 + part


# (upper degree bound, destination sign)
TRIMSAMSA_ODD: List[Tuple[float, int]] = [
    (5.0, ARIES), (10.0, AQUARIUS), (18.0, SAGITTARIUS),
    (25.0, GEMINI), (30.0, LIBRA),
]
TRIMSAMSA_EVEN: List[Tuple[float, int]] = [
    (5.0, TAURUS), (12.0, VIRGO), (20.0, PISCES),
    (25.0, CAPRICORN), (30.0, SCORPIO),
]


class D30Calculator(BaseDivisionalCalculator):
    """
    Trimsamsa: five unequal portions ruled by Mars, Saturn, Jupiter,
    Mercury and Venus (reversed for even signs).
    """
    chart_type = "D30"
    name = "Trimsamsa"
    division = 30

    def varga_sign(self, sign: int, part: int) -> int:
        table = TRIMSAMSA_ODD if is_odd_sign(sign) else TRIMSAMSA_EVEN
        return table[min(part, len(table) - 1)][1]

    def position(self, longitude: float) -> Tuple[int, float]:
        sign = sign_index(longitude)
        degree = degree_in_sign(longitude)
        table = TRIMSAMSA_ODD if is_odd_sign(sign) else TRIMSAMSA_EVEN

        lower = 0.0
        for part, (upper, _) in enumerate(table):
            if degree < upper or part == len(table) - 1:
                within = (degree - lower) / (upper - lower)
                return self.varga_sign(sign, part), min(within * 30.0, 29.999999)
            lower = upper

        raise AssertionError("unreachable trimsamsa portion")


class D40Calculator(BaseDivisionalCalculator):
    chart_type = "D40"
    name = "Khavedamsa"
    division = 40

    def varga_sign(self, sign: int, part: int) -> int:
        start = ARIES if is_odd_sign(sign) else LIBRA
        return start + part


class D45Calculator(BaseDivisionalCalculator):
    chart_type = "D45"
    name = "Akshavedamsa"
    division = 45

    def varga_sign(self, sign: int, part: int) -> int:
        return _by_modality(sign, ARIES, LEO, SAGITTARIUS) + part


class D60Calculator(BaseDivisionalCalculator):
    chart_type = "D60"
    name = "Shashtiamsa"
    division = 60

    def varga_sign(self, sign: int, part: int) -> int:
        return sign + part


SHODASAVARGA: List[BaseDivisionalCalculator] = [
    D1Calculator(), D2Calculator(), D3Calculator(), D4Calculator(),
    D7Calculator(), D9Calculator(), D10Calculator(), D12Calculator(),
    D16Calculator(), D20Calculator(), D24Calculator(), D27Calculator(),
    D30Calculator(), D40Calculator(), D45Calculator(), D60Calculator(),
]
