"""
Kundali Milan (Ashta Koota matching).

Scores eight factors (36 points in all) between two natal Moons. The first
chart takes the groom's side of each asymmetric table and the second the
bride's.
"""

from typing import Dict, List, Tuple

from kundli_core.domain.kundali.dignity import relationship
from kundli_core.domain.kundali.nakshatra import NAKSHATRAS
from kundli_core.domain.kundali.schemas import PlanetPosition
from kundli_core.domain.kundali.zodiac import SIGN_LORDS, SIGNS, house_distance
from kundli_core.domain.matching.schemas import (
    KootaScore,
    MatchDosha,
    MatchResult,
    MoonProfile,
)


# ─────────────────────────────────────────────
# Avakahada tables
# ─────────────────────────────────────────────

VARNA_HIERARCHY = ["Shudra", "Vaishya", "Kshatriya", "Brahmin"]  # 0 = lowest

# Water signs Brahmin, fire Kshatriya, earth Vaishya, air Shudra
VARNA_BY_SIGN = [
    "Kshatriya", "Vaishya", "Shudra", "Brahmin",
    "Kshatriya", "Vaishya", "Shudra", "Brahmin",
    "Kshatriya", "Vaishya", "Shudra", "Brahmin",
]

VASHYA_BY_SIGN = [
    "Chatushpada", "Chatushpada", "Manava", "Jalchar",
    "Vanchar", "Manava", "Manava", "Keeta",
    "Manava", "Chatushpada", "Manava", "Jalchar",
]

# Second halves of Sagittarius and Capricorn change category
VASHYA_SECOND_HALF = {8: "Chatushpada", 9: "Jalchar"}

# (groom, bride) → points; missing pairs score 0
VASHYA_COMPAT: Dict[Tuple[str, str], float] = {
    ("Chatushpada", "Chatushpada"): 2, ("Chatushpada", "Manava"): 1,
    ("Chatushpada", "Jalchar"): 1, ("Chatushpada", "Vanchar"): 0.5,
    ("Chatushpada", "Keeta"): 1,
    ("Manava", "Manava"): 2, ("Manava", "Jalchar"): 0.5, ("Manava", "Keeta"): 1,
    ("Jalchar", "Chatushpada"): 1, ("Jalchar", "Manava"): 0.5,
    ("Jalchar", "Jalchar"): 2, ("Jalchar", "Vanchar"): 1, ("Jalchar", "Keeta"): 1,
    ("Vanchar", "Vanchar"): 2,
    ("Keeta", "Chatushpada"): 1, ("Keeta", "Manava"): 1,
    ("Keeta", "Jalchar"): 1, ("Keeta", "Keeta"): 2,
}

YONI_BY_NAKSHATRA = [
    "Horse", "Elephant", "Sheep", "Serpent", "Serpent", "Dog",
    "Cat", "Sheep", "Cat", "Rat", "Rat",
    "Cow", "Buffalo", "Tiger", "Buffalo", "Tiger",
    "Deer", "Deer", "Dog", "Monkey", "Mongoose",
    "Monkey", "Lion", "Horse", "Lion",
    "Cow", "Elephant",
]

# Yoni animal pairs - sworn enemies
YONI_ENEMIES = {
    ("Horse", "Buffalo"), ("Elephant", "Lion"), ("Sheep", "Monkey"),
    ("Serpent", "Mongoose"), ("Dog", "Deer"), ("Cat", "Rat"),
    ("Tiger", "Cow"),
}
YONI_SAME = 4
YONI_NEUTRAL = 2
YONI_ENEMY = 0

GANA_BY_NAKSHATRA = [
    "Deva", "Manushya", "Rakshasa", "Manushya", "Deva", "Manushya",
    "Deva", "Deva", "Rakshasa", "Rakshasa", "Manushya",
    "Manushya", "Deva", "Rakshasa", "Deva", "Rakshasa",
    "Deva", "Rakshasa", "Rakshasa", "Manushya", "Manushya",
    "Deva", "Rakshasa", "Rakshasa", "Manushya",
    "Manushya", "Deva",
]

# (groom, bride) → points
GANA_SCORES: Dict[Tuple[str, str], float] = {
    ("Deva", "Deva"): 6, ("Deva", "Manushya"): 6, ("Deva", "Rakshasa"): 1,
    ("Manushya", "Deva"): 5, ("Manushya", "Manushya"): 6, ("Manushya", "Rakshasa"): 0,
    ("Rakshasa", "Deva"): 1, ("Rakshasa", "Manushya"): 0, ("Rakshasa", "Rakshasa"): 6,
}

# Nadi repeats Adi, Madhya, Antya, Antya, Madhya, Adi every six nakshatras
NADI_CYCLE = ["Adi", "Madhya", "Antya", "Antya", "Madhya", "Adi"]

# Graha Maitri by the pair of natural relationships
MAITRI_SCORES = {
    ("friend", "friend"): 5,
    ("friend", "neutral"): 4, ("neutral", "friend"): 4,
    ("neutral", "neutral"): 3,
    ("friend", "enemy"): 1, ("enemy", "friend"): 1,
    ("neutral", "enemy"): 0.5, ("enemy", "neutral"): 0.5,
    ("enemy", "enemy"): 0,
}

# Bhakoot bad combinations (house distances)
BHAKOOT_BAD = [(2, 12), (5, 9), (6, 8)]

# Taras 3, 5 and 7 (Vipat, Pratyari, Naidhana) are inauspicious
INAUSPICIOUS_TARAS = {3, 5, 7}


def moon_profile(moon: PlanetPosition) -> MoonProfile:
    sign = moon.sign_index
    nakshatra = moon.nakshatra_index

    vashya = VASHYA_BY_SIGN[sign]
    if sign in VASHYA_SECOND_HALF and moon.degree >= 15.0:
        vashya = VASHYA_SECOND_HALF[sign]

    return MoonProfile(
        sign_index=sign,
        sign=SIGNS[sign],
        nakshatra_index=nakshatra,
        nakshatra=NAKSHATRAS[nakshatra],
        varna=VARNA_BY_SIGN[sign],
        vashya=vashya,
        yoni=YONI_BY_NAKSHATRA[nakshatra],
        gana=GANA_BY_NAKSHATRA[nakshatra],
        nadi=NADI_CYCLE[nakshatra % 6],
        sign_lord=SIGN_LORDS[sign],
    )


class AshtakootaMatcher:
    """
    Calculates Ashta Koota matching between two natal Moons.
    """

    def match(
        self,
        first_moon: PlanetPosition,
        second_moon: PlanetPosition,
        first_name: str = "First",
        second_name: str = "Second",
    ) -> MatchResult:
        first = moon_profile(first_moon)
        second = moon_profile(second_moon)

        kootas = [
            self._varna(first, second),
            self._vashya(first, second),
            self._tara(first, second),
            self._yoni(first, second),
            self._graha_maitri(first, second),
            self._gana(first, second),
            self._bhakoot(first, second),
            self._nadi(first, second),
        ]

        total = sum(k.score for k in kootas)

        return MatchResult(
            first_name=first_name,
            second_name=second_name,
            first=first,
            second=second,
            total_score=total,
            percentage=round(total / 36.0 * 100, 1),
            verdict=self._verdict(total),
            kootas=kootas,
            doshas=self._doshas(first, second, {k.name: k.score for k in kootas}),
        )

    # ─────────────────────────────────────────────
    # Per-Factor Calculations
    # ─────────────────────────────────────────────

    def _varna(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        """Varna: groom's Varna at or above the bride's scores 1."""
        ok = VARNA_HIERARCHY.index(first.varna) >= VARNA_HIERARCHY.index(second.varna)
        return KootaScore(
            name="Varna", score=1 if ok else 0, max_score=1,
            first_value=first.varna, second_value=second.varna,
            area="Work & Status",
            description=(
                f"{first.varna} is {'equal or higher' if ok else 'lower'} "
                f"than {second.varna}."
            ),
        )

    def _vashya(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        score = VASHYA_COMPAT.get((first.vashya, second.vashya), 0)
        return KootaScore(
            name="Vashya", score=score, max_score=2,
            first_value=first.vashya, second_value=second.vashya,
            area="Dominance & Control",
            description=f"{first.vashya} with {second.vashya}.",
        )

    def _tara(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        """Tara: nakshatra count taken both ways, 1.5 points per good direction."""
        forward = (first.nakshatra_index - second.nakshatra_index) % 27 % 9 + 1
        backward = (second.nakshatra_index - first.nakshatra_index) % 27 % 9 + 1

        score = sum(1.5 for tara in (forward, backward) if tara not in INAUSPICIOUS_TARAS)
        return KootaScore(
            name="Tara", score=score, max_score=3,
            first_value=first.nakshatra, second_value=second.nakshatra,
            area="Destiny & Health",
            description=f"Taras {forward} and {backward}.",
        )

    def _yoni(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        if first.yoni == second.yoni:
            score, text = YONI_SAME, f"Same Yoni ({first.yoni})."
        elif (first.yoni, second.yoni) in YONI_ENEMIES or (second.yoni, first.yoni) in YONI_ENEMIES:
            score, text = YONI_ENEMY, f"{first.yoni} and {second.yoni} are enemies."
        else:
            score, text = YONI_NEUTRAL, f"{first.yoni} and {second.yoni} are neutral."

        return KootaScore(
            name="Yoni", score=score, max_score=4,
            first_value=first.yoni, second_value=second.yoni,
            area="Physical & Intimacy",
            description=text,
        )

    def _graha_maitri(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        """Graha Maitri: friendship between Moon sign lords."""
        a, b = first.sign_lord, second.sign_lord
        if a == b:
            score, text = 5, f"Same lord ({a})."
        else:
            pair = (relationship(a, b), relationship(b, a))
            score = MAITRI_SCORES[pair]
            text = f"{a} regards {b} as {pair[0]}; {b} regards {a} as {pair[1]}."

        return KootaScore(
            name="Graha Maitri", score=score, max_score=5,
            first_value=a, second_value=b,
            area="Mental Compatibility",
            description=text,
        )

    def _gana(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        return KootaScore(
            name="Gana", score=GANA_SCORES[(first.gana, second.gana)], max_score=6,
            first_value=first.gana, second_value=second.gana,
            area="Temperament & Nature",
            description=f"{first.gana} with {second.gana}.",
        )

    def _bhakoot(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        """Bhakoot: Moon sign position check."""
        dist1 = house_distance(second.sign_index, first.sign_index)
        dist2 = house_distance(first.sign_index, second.sign_index)

        bad = any((dist1, dist2) in (pair, pair[::-1]) for pair in BHAKOOT_BAD)
        return KootaScore(
            name="Bhakoot", score=0 if bad else 7, max_score=7,
            first_value=first.sign, second_value=second.sign,
            area="Love & Prosperity",
            description=(
                f"Distance {dist1}/{dist2} "
                f"{'indicates Bhakoot Dosha' if bad else 'is favourable'}."
            ),
        )

    def _nadi(self, first: MoonProfile, second: MoonProfile) -> KootaScore:
        same = first.nadi == second.nadi
        return KootaScore(
            name="Nadi", score=0 if same else 8, max_score=8,
            first_value=first.nadi, second_value=second.nadi,
            area="Health & Progeny",
            description=(
                f"Same Nadi ({first.nadi})." if same
                else f"Different Nadis ({first.nadi} and {second.nadi})."
            ),
        )

    # ─────────────────────────────────────────────
    # Doshas and verdict
    # ─────────────────────────────────────────────

    def _doshas(
        self,
        first: MoonProfile,
        second: MoonProfile,
        scores: Dict[str, float],
    ) -> List[MatchDosha]:
        same_sign = first.sign_index == second.sign_index
        same_nakshatra = first.nakshatra_index == second.nakshatra_index

        nadi_present = scores["Nadi"] == 0
        nadi_cancelled = nadi_present and (same_sign != same_nakshatra)

        bhakoot_present = scores["Bhakoot"] == 0
        lords_friendly = (
            first.sign_lord == second.sign_lord
            or relationship(first.sign_lord, second.sign_lord) == "friend"
            and relationship(second.sign_lord, first.sign_lord) == "friend"
        )
        bhakoot_cancelled = bhakoot_present and lords_friendly

        gana_present = scores["Gana"] <= 1

        return [
            MatchDosha(
                name="Nadi Dosha",
                present=nadi_present,
                cancelled=nadi_cancelled,
                description=(
                    "Both Moons share a Nadi."
                    + (" Cancelled: same sign with different nakshatras, or the reverse."
                       if nadi_cancelled else "")
                ) if nadi_present else "No Nadi Dosha.",
            ),
            MatchDosha(
                name="Bhakoot Dosha",
                present=bhakoot_present,
                cancelled=bhakoot_cancelled,
                description=(
                    "Moon signs fall 2/12, 5/9 or 6/8 apart."
                    + (" Cancelled: Moon sign lords are the same or friends."
                       if bhakoot_cancelled else "")
                ) if bhakoot_present else "No Bhakoot Dosha.",
            ),
            MatchDosha(
                name="Gana Dosha",
                present=gana_present,
                description=(
                    f"{first.gana} and {second.gana} temperaments clash."
                    if gana_present else "No Gana Dosha."
                ),
            ),
        ]

    def _verdict(self, total: float) -> str:
        if total >= 25:
            return "Excellent Match"
        if total >= 18:
            return "Good Match"
        if total >= 12:
            return "Average Match"
        return "Below Average"
