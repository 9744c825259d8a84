from typing import Dict, Set, Tuple

from kundli_core.domain.kundali.schemas import Dignity
from kundli_core.domain.kundali.zodiac import SIGN_LORDS


# ─────────────────────────────────────────────
# Classical dignity tables (sign indices, Aries = 0)
# ─────────────────────────────────────────────

EXALTATION_SIGN: Dict[str, int] = {
    "Sun": 0, "Moon": 1, "Mars": 9, "Mercury": 5, "Jupiter": 3,
    "Venus": 11, "Saturn": 6, "Rahu": 1, "Ketu": 7,
}

DEBILITATION_SIGN: Dict[str, int] = {
    "Sun": 6, "Moon": 7, "Mars": 3, "Mercury": 11, "Jupiter": 9,
    "Venus": 5, "Saturn": 0, "Rahu": 7, "Ketu": 1,
}

# Exaltation limited to part of the sign; the rest is moolatrikona or own sign
EXALTATION_RANGE: Dict[str, Tuple[float, float]] = {
    "Mercury": (0.0, 15.0),
    "Moon": (0.0, 3.0),
}

# Deep exaltation point as absolute sidereal longitude
EXALTATION_POINT: Dict[str, float] = {
    "Sun": 10.0, "Moon": 33.0, "Mars": 298.0, "Mercury": 165.0,
    "Jupiter": 95.0, "Venus": 357.0, "Saturn": 200.0,
    "Rahu": 50.0, "Ketu": 230.0,
}

OWN_SIGNS: Dict[str, Set[int]] = {
    "Sun": {4},
    "Moon": {3},
    "Mars": {0, 7},
    "Mercury": {2, 5},
    "Jupiter": {8, 11},
    "Venus": {1, 6},
    "Saturn": {9, 10},
    "Rahu": {10},
    "Ketu": {7},
}

# (sign, start degree, end degree)
MOOLATRIKONA: Dict[str, Tuple[int, float, float]] = {
    "Sun": (4, 0.0, 20.0),
    "Moon": (1, 3.0, 30.0),
    "Mars": (0, 0.0, 12.0),
    "Mercury": (5, 15.0, 20.0),
    "Jupiter": (8, 0.0, 10.0),
    "Venus": (6, 0.0, 15.0),
    "Saturn": (10, 0.0, 20.0),
}

# Naisargika (natural) relationships
NATURAL_FRIENDS: Dict[str, Set[str]] = {
    "Sun": {"Moon", "Mars", "Jupiter"},
    "Moon": {"Sun", "Mercury"},
    "Mars": {"Sun", "Moon", "Jupiter"},
    "Mercury": {"Sun", "Venus"},
    "Jupiter": {"Sun", "Moon", "Mars"},
    "Venus": {"Mercury", "Saturn"},
    "Saturn": {"Mercury", "Venus"},
    "Rahu": {"Mercury", "Venus", "Saturn"},
    "Ketu": {"Mars", "Venus", "Saturn"},
}

NATURAL_ENEMIES: Dict[str, Set[str]] = {
    "Sun": {"Venus", "Saturn"},
    "Moon": set(),
    "Mars": {"Mercury"},
    "Mercury": {"Moon"},
    "Jupiter": {"Mercury", "Venus"},
    "Venus": {"Sun", "Moon"},
    "Saturn": {"Sun", "Moon", "Mars"},
    "Rahu": {"Sun", "Moon", "Mars"},
    "Ketu": {"Sun", "Moon"},
}


def relationship(planet: str, other: str) -> str:
    """
    Natural relationship of planet towards other: friend, enemy or neutral.
    """
    if other in NATURAL_FRIENDS.get(planet, set()):
        return "friend"
    if other in NATURAL_ENEMIES.get(planet, set()):
        return "enemy"
    return "neutral"


def is_exalted(planet: str, sign: int) -> bool:
    return EXALTATION_SIGN.get(planet) == sign


def is_debilitated(planet: str, sign: int) -> bool:
    return DEBILITATION_SIGN.get(planet) == sign


def is_own_sign(planet: str, sign: int) -> bool:
    return sign in OWN_SIGNS.get(planet, set())


def is_own_or_exalted(planet: str, sign: int) -> bool:
    return is_own_sign(planet, sign) or is_exalted(planet, sign)


def dignity_of(planet: str, sign: int, degree: float) -> Dignity:
    """
    Resolve a planet's dignity in a sign.

    Precedence: exalted, debilitated, moolatrikona, own sign, then the
    natural relationship with the sign lord. Mercury and the Moon are
    exalted only within the degrees of EXALTATION_RANGE.
    """
    if is_exalted(planet, sign):
        low, high = EXALTATION_RANGE.get(planet, (0.0, 30.0))
        if low <= degree < high:
            return Dignity.EXALTED
    if is_debilitated(planet, sign):
        return Dignity.DEBILITATED

    mt = MOOLATRIKONA.get(planet)
    if mt and mt[0] == sign and mt[1] <= degree < mt[2]:
        return Dignity.MOOLATRIKONA

    if is_own_sign(planet, sign):
        return Dignity.OWN_SIGN

    relation = relationship(planet, SIGN_LORDS[sign])
    if relation == "friend":
        return Dignity.FRIENDLY
    if relation == "enemy":
        return Dignity.ENEMY
    return Dignity.NEUTRAL
