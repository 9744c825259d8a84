from itertools import combinations
from typing import List, Optional

from kundli_core.domain.kundali.dignity import OWN_SIGNS
from kundli_core.domain.kundali.zodiac import (
    CLASSICAL_PLANETS,
    DUSTHANA_HOUSES,
    KENDRA_HOUSES,
    TRIKONA_HOUSES,
)
from kundli_core.domain.rules.chart_context import ChartContext
from kundli_core.domain.rules.schemas import (
    Nature,
    RuleDescriptor,
    Yoga,
    YogaStrength,
)


NATURAL_BENEFICS = ("Jupiter", "Venus", "Mercury")
NATURAL_MALEFICS = ("Sun", "Mars", "Saturn", "Rahu", "Ketu")


def _strength(ctx: ChartContext, *planets: str) -> YogaStrength:
    """
    Strong when every forming planet is dignified, weak when any is
    debilitated or in a dusthana.
    """
    if any(ctx.debilitated(p) or ctx.house(p) in DUSTHANA_HOUSES for p in planets):
        return YogaStrength.WEAK
    if all(ctx.own_or_exalted(p) for p in planets):
        return YogaStrength.STRONG
    return YogaStrength.MODERATE


# ─────────────────────────────────────────────
# Pancha Mahapurusha Yogas
# ─────────────────────────────────────────────

def _mahapurusha(planet: str, key: str, name: str, description: str):
    def rule(ctx: ChartContext) -> Optional[Yoga]:
        if ctx.house(planet) not in KENDRA_HOUSES or not ctx.own_or_exalted(planet):
            return None

        return Yoga(
            key=key,
            name=f"{name} Yoga",
            sanskrit_name=name,
            category="mahapurusha",
            forming_planets=[planet],
            description=(
                f"{planet} in {ctx.planet(planet).sign} occupies kendra house "
                f"{ctx.house(planet)}. {description}"
            ),
            strength=YogaStrength.STRONG if ctx.exalted(planet) else YogaStrength.MODERATE,
        )

    rule.__name__ = key
    return rule


ruchaka = _mahapurusha("Mars", "ruchaka", "Ruchaka", "Courage and command.")
bhadra = _mahapurusha("Mercury", "bhadra", "Bhadra", "Intellect and eloquence.")
hamsa = _mahapurusha("Jupiter", "hamsa", "Hamsa", "Wisdom and righteousness.")
malavya = _mahapurusha("Venus", "malavya", "Malavya", "Comfort and refinement.")
sasa = _mahapurusha("Saturn", "sasa", "Sasa", "Authority and endurance.")


# ─────────────────────────────────────────────
# Lunar and Solar Yogas
# ─────────────────────────────────────────────

def gaja_kesari(ctx: ChartContext) -> Optional[Yoga]:
    """Jupiter in a kendra from the Moon."""
    if not ctx.in_kendra_from("Moon", "Jupiter"):
        return None

    if ctx.debilitated("Jupiter") or ctx.planet("Jupiter").retrograde:
        strength = YogaStrength.WEAK
    elif ctx.own_or_exalted("Jupiter"):
        strength = YogaStrength.STRONG
    else:
        strength = YogaStrength.MODERATE

    return Yoga(
        key="gaja_kesari",
        name="Gaja Kesari Yoga",
        sanskrit_name="Gajakesari",
        category="lunar",
        forming_planets=["Jupiter", "Moon"],
        description=(
            f"Jupiter is in house {ctx.house_from('Moon', 'Jupiter')} from the Moon."
        ),
        strength=strength,
    )


def budhaditya(ctx: ChartContext) -> Optional[Yoga]:
    """Sun and Mercury in the same sign."""
    if not ctx.conjunct("Sun", "Mercury"):
        return None

    if ctx.house("Sun") in DUSTHANA_HOUSES or ctx.orb("Sun", "Mercury") < 3.0:
        strength = YogaStrength.WEAK
    elif ctx.own_or_exalted("Mercury"):
        strength = YogaStrength.STRONG
    else:
        strength = YogaStrength.MODERATE

    return Yoga(
        key="budhaditya",
        name="Budhaditya Yoga",
        sanskrit_name="Budha-Aditya",
        category="solar",
        forming_planets=["Sun", "Mercury"],
        description=f"Sun and Mercury conjoin in {ctx.planet('Sun').sign}.",
        strength=strength,
    )


def _lunar_flank(ctx: ChartContext) -> Optional[Yoga]:
    second = [p for p in ctx.in_house_from("Moon", (2,)) if p != "Sun"]
    twelfth = [p for p in ctx.in_house_from("Moon", (12,)) if p != "Sun"]

    if second and twelfth:
        key, name, planets = "durudhara", "Durudhara", second + twelfth
        text = "Planets occupy both the 2nd and 12th from the Moon."
    elif second:
        key, name, planets = "sunapha", "Sunapha", second
        text = "Planets occupy the 2nd from the Moon."
    elif twelfth:
        key, name, planets = "anapha", "Anapha", twelfth
        text = "Planets occupy the 12th from the Moon."
    else:
        return None

    return Yoga(
        key=key,
        name=f"{name} Yoga",
        sanskrit_name=name,
        category="lunar",
        forming_planets=["Moon"] + planets,
        description=text,
        strength=YogaStrength.STRONG if len(planets) >= 3 else YogaStrength.MODERATE,
    )


def sunapha(ctx: ChartContext) -> Optional[Yoga]:
    yoga = _lunar_flank(ctx)
    return yoga if yoga and yoga.key == "sunapha" else None


def anapha(ctx: ChartContext) -> Optional[Yoga]:
    yoga = _lunar_flank(ctx)
    return yoga if yoga and yoga.key == "anapha" else None


def durudhara(ctx: ChartContext) -> Optional[Yoga]:
    yoga = _lunar_flank(ctx)
    return yoga if yoga and yoga.key == "durudhara" else None


def adhi(ctx: ChartContext) -> Optional[Yoga]:
    """Benefics in the 6th, 7th or 8th from the Moon."""
    placed = [
        p for p in NATURAL_BENEFICS
        if ctx.house_from("Moon", p) in (6, 7, 8)
    ]
    if not placed:
        return None

    strength = {
        3: YogaStrength.STRONG,
        2: YogaStrength.MODERATE,
    }.get(len(placed), YogaStrength.WEAK)

    return Yoga(
        key="adhi",
        name="Adhi Yoga",
        sanskrit_name="Adhi",
        category="lunar",
        forming_planets=["Moon"] + placed,
        description=f"{', '.join(placed)} in the 6th to 8th from the Moon.",
        strength=strength,
    )


def chandra_mangal(ctx: ChartContext) -> Optional[Yoga]:
    """Moon and Mars conjoined or in mutual aspect."""
    if ctx.conjunct("Moon", "Mars"):
        relation = "conjoin"
    elif ctx.house_from("Moon", "Mars") == 7:
        relation = "oppose each other"
    else:
        return None

    return Yoga(
        key="chandra_mangal",
        name="Chandra Mangal Yoga",
        sanskrit_name="Chandra-Mangala",
        category="wealth",
        nature=Nature.MIXED,
        forming_planets=["Moon", "Mars"],
        description=f"Moon and Mars {relation}.",
        strength=_strength(ctx, "Moon", "Mars"),
    )


def _solar_flank(ctx: ChartContext) -> Optional[Yoga]:
    def flank(house: int) -> List[str]:
        return [
            p for p in ctx.in_house_from("Sun", (house,))
            if p != "Moon"
        ]

    second, twelfth = flank(2), flank(12)
    if second and twelfth:
        key, name, planets = "ubhayachari", "Ubhayachari", second + twelfth
    elif second:
        key, name, planets = "vesi", "Vesi", second
    elif twelfth:
        key, name, planets = "vosi", "Vosi", twelfth
    else:
        return None

    return Yoga(
        key=key,
        name=f"{name} Yoga",
        sanskrit_name=name,
        category="solar",
        forming_planets=["Sun"] + planets,
        description=f"{', '.join(planets)} flank the Sun.",
        strength=YogaStrength.MODERATE,
    )


def vesi(ctx: ChartContext) -> Optional[Yoga]:
    yoga = _solar_flank(ctx)
    return yoga if yoga and yoga.key == "vesi" else None


def vosi(ctx: ChartContext) -> Optional[Yoga]:
    yoga = _solar_flank(ctx)
    return yoga if yoga and yoga.key == "vosi" else None


def ubhayachari(ctx: ChartContext) -> Optional[Yoga]:
    yoga = _solar_flank(ctx)
    return yoga if yoga and yoga.key == "ubhayachari" else None


# ─────────────────────────────────────────────
# Raja and Dhana Yogas
# ─────────────────────────────────────────────

def raja(ctx: ChartContext) -> Optional[Yoga]:
    """
    Kendra lord associated with a trikona lord, or a single planet ruling
    both (yogakaraka).
    """
    combos: List[str] = []
    forming: List[str] = []

    for planet in CLASSICAL_PLANETS:
        ruled = ctx.houses_ruled(planet)
        if ruled & {4, 7, 10} and ruled & {5, 9}:
            combos.append(f"{planet} is yogakaraka (rules houses {sorted(ruled)})")
            forming.append(planet)

    kendra_lords = {ctx.lord_of(h) for h in KENDRA_HOUSES}
    trikona_lords = {ctx.lord_of(h) for h in TRIKONA_HOUSES}
    seen = set()
    for k in sorted(kendra_lords):
        for t in sorted(trikona_lords):
            pair = tuple(sorted((k, t)))
            if k == t or pair in seen:
                continue
            seen.add(pair)
            if ctx.conjunct(k, t):
                combos.append(f"{k} conjoins {t}")
            elif ctx.mutual_aspect(k, t):
                combos.append(f"{k} and {t} aspect each other")
            else:
                continue
            forming.extend(p for p in pair if p not in forming)

    if not combos:
        return None

    strength = YogaStrength.STRONG if len(combos) >= 2 else _strength(ctx, *forming)

    return Yoga(
        key="raja",
        name="Raja Yoga",
        sanskrit_name="Raja",
        category="power",
        forming_planets=forming,
        description="; ".join(combos) + ".",
        strength=strength,
    )


def dhana(ctx: ChartContext) -> Optional[Yoga]:
    """Association between the lords of wealth houses 2, 5, 9 and 11."""
    second, eleventh = ctx.lord_of(2), ctx.lord_of(11)
    combos: List[str] = []

    if second != eleventh and ctx.conjunct(second, eleventh):
        combos.append(f"2nd lord {second} conjoins 11th lord {eleventh}")
    if ctx.house(second) == 11:
        combos.append(f"2nd lord {second} occupies the 11th house")
    if ctx.house(eleventh) == 2:
        combos.append(f"11th lord {eleventh} occupies the 2nd house")

    for trine in (5, 9):
        trine_lord = ctx.lord_of(trine)
        for wealth_lord in (second, eleventh):
            if trine_lord != wealth_lord and ctx.conjunct(trine_lord, wealth_lord):
                combos.append(f"{trine}th lord {trine_lord} conjoins {wealth_lord}")

    if not combos:
        return None

    forming = sorted({second, eleventh, ctx.lord_of(5), ctx.lord_of(9)})

    return Yoga(
        key="dhana",
        name="Dhana Yoga",
        sanskrit_name="Dhana",
        category="wealth",
        forming_planets=forming,
        description="; ".join(dict.fromkeys(combos)) + ".",
        strength=YogaStrength.STRONG if len(combos) >= 2 else YogaStrength.MODERATE,
    )


def lakshmi(ctx: ChartContext) -> Optional[Yoga]:
    """9th lord dignified in a kendra or trikona."""
    ninth = ctx.lord_of(9)
    if ctx.house(ninth) not in KENDRA_HOUSES | TRIKONA_HOUSES:
        return None
    if not ctx.own_or_exalted(ninth) or ctx.debilitated(ctx.lagna_lord):
        return None

    return Yoga(
        key="lakshmi",
        name="Lakshmi Yoga",
        sanskrit_name="Lakshmi",
        category="wealth",
        forming_planets=[ninth, "Venus"] if ninth != "Venus" else ["Venus"],
        description=(
            f"9th lord {ninth} is dignified in house {ctx.house(ninth)}."
        ),
        strength=YogaStrength.STRONG if ctx.own_or_exalted("Venus") else YogaStrength.MODERATE,
    )


def viparita_raja(ctx: ChartContext) -> Optional[Yoga]:
    """Lords of the 6th, 8th or 12th placed in a dusthana."""
    names = {6: "Harsha", 8: "Sarala", 12: "Vimala"}
    formed = []
    for house in (6, 8, 12):
        lord = ctx.lord_of(house)
        if ctx.house(lord) in DUSTHANA_HOUSES:
            formed.append((names[house], lord))

    if not formed:
        return None

    return Yoga(
        key="viparita_raja",
        name="Viparita Raja Yoga",
        sanskrit_name="Viparita Raja",
        category="power",
        forming_planets=list(dict.fromkeys(lord for _, lord in formed)),
        description="; ".join(
            f"{kind} ({lord} in house {ctx.house(lord)})" for kind, lord in formed
        ) + ".",
        strength=YogaStrength.STRONG if len(formed) >= 2 else YogaStrength.MODERATE,
    )


def neecha_bhanga(ctx: ChartContext) -> Optional[Yoga]:
    """
    A debilitated planet whose fall is cancelled by its dispositor or the
    planet exalted in that sign standing in a kendra.
    """
    combos: List[str] = []
    forming: List[str] = []

    for planet in ctx.debilitated_planets():
        sign = ctx.sign(planet)
        rescuers = [ctx.lord_of_sign(sign)] + ctx.exaltation_lord_of(sign)
        for rescuer in rescuers:
            if rescuer == planet or rescuer in ("Rahu", "Ketu"):
                continue
            from_lagna = ctx.house(rescuer) in KENDRA_HOUSES
            from_moon = ctx.in_kendra_from("Moon", rescuer)
            if from_lagna or from_moon:
                reference = "the lagna" if from_lagna else "the Moon"
                combos.append(f"{planet}'s fall cancelled by {rescuer} in a kendra from {reference}")
                forming.extend(p for p in (planet, rescuer) if p not in forming)
                break

    if not combos:
        return None

    return Yoga(
        key="neecha_bhanga",
        name="Neecha Bhanga Raja Yoga",
        sanskrit_name="Neecha Bhanga",
        category="power",
        forming_planets=forming,
        description="; ".join(combos) + ".",
        strength=YogaStrength.MODERATE,
    )


def parivartana(ctx: ChartContext) -> Optional[Yoga]:
    """Two planets occupying each other's signs."""
    exchanges = []
    for a, b in combinations(CLASSICAL_PLANETS, 2):
        if ctx.sign(a) in OWN_SIGNS[b] and ctx.sign(b) in OWN_SIGNS[a]:
            exchanges.append((a, b))

    if not exchanges:
        return None

    parts = []
    for a, b in exchanges:
        houses = {ctx.house(a), ctx.house(b)}
        if houses & DUSTHANA_HOUSES:
            kind = "Dainya"
        elif 3 in houses:
            kind = "Khala"
        else:
            kind = "Maha"
        parts.append(f"{kind} exchange between {a} and {b}")

    return Yoga(
        key="parivartana",
        name="Parivartana Yoga",
        sanskrit_name="Parivartana",
        category="exchange",
        nature=Nature.MIXED if any(p.startswith("Dainya") for p in parts) else Nature.BENEFIC,
        forming_planets=list(dict.fromkeys(p for pair in exchanges for p in pair)),
        description="; ".join(parts) + ".",
        strength=YogaStrength.STRONG if all(p.startswith("Maha") for p in parts) else YogaStrength.MODERATE,
    )


# ─────────────────────────────────────────────
# Other Yogas
# ─────────────────────────────────────────────

def shubh_kartari(ctx: ChartContext) -> Optional[Yoga]:
    """Lagna hemmed between benefics in the 2nd and 12th houses."""
    second = ctx.occupants(2)
    twelfth = ctx.occupants(12)
    flanks = second + twelfth

    if not second or not twelfth:
        return None
    if any(p in NATURAL_MALEFICS for p in flanks):
        return None
    if not all(p in NATURAL_BENEFICS for p in flanks):
        return None

    return Yoga(
        key="shubh_kartari",
        name="Shubh Kartari Yoga",
        sanskrit_name="Shubha Kartari",
        category="protection",
        forming_planets=flanks,
        description="Benefics occupy both the 2nd and 12th houses.",
        strength=YogaStrength.STRONG if len(flanks) >= 3 else YogaStrength.MODERATE,
    )


def amala(ctx: ChartContext) -> Optional[Yoga]:
    """Natural benefic in the 10th from the lagna or the Moon."""
    placed = [p for p in NATURAL_BENEFICS if ctx.house(p) == 10]
    reference = "lagna"
    if not placed:
        placed = [p for p in NATURAL_BENEFICS if ctx.house_from("Moon", p) == 10]
        reference = "Moon"
    if not placed:
        return None

    return Yoga(
        key="amala",
        name="Amala Yoga",
        sanskrit_name="Amala",
        category="reputation",
        forming_planets=placed,
        description=f"{', '.join(placed)} in the 10th from the {reference}.",
        strength=_strength(ctx, *placed),
    )


def parvata(ctx: ChartContext) -> Optional[Yoga]:
    """Jupiter or Venus in a kendra with the 6th and 8th houses empty."""
    placed = [p for p in ("Jupiter", "Venus") if ctx.house(p) in KENDRA_HOUSES]
    if not placed or ctx.occupants(6) or ctx.occupants(8):
        return None

    return Yoga(
        key="parvata",
        name="Parvata Yoga",
        sanskrit_name="Parvata",
        category="prosperity",
        forming_planets=placed,
        description=f"{', '.join(placed)} in a kendra with the 6th and 8th unoccupied.",
        strength=_strength(ctx, *placed),
    )


def kahala(ctx: ChartContext) -> Optional[Yoga]:
    """4th and 9th lords in mutual kendras with a sound lagna lord."""
    fourth, ninth = ctx.lord_of(4), ctx.lord_of(9)
    if fourth == ninth or not ctx.in_kendra_from(fourth, ninth):
        return None
    if ctx.debilitated(ctx.lagna_lord):
        return None

    return Yoga(
        key="kahala",
        name="Kahala Yoga",
        sanskrit_name="Kahala",
        category="courage",
        forming_planets=[fourth, ninth],
        description=f"4th lord {fourth} and 9th lord {ninth} are in mutual kendras.",
        strength=_strength(ctx, fourth, ninth),
    )


def chamara(ctx: ChartContext) -> Optional[Yoga]:
    """Exalted lagna lord in a kendra aspected by Jupiter."""
    lord = ctx.lagna_lord
    if not ctx.exalted(lord) or ctx.house(lord) not in KENDRA_HOUSES:
        return None
    if lord != "Jupiter" and not ctx.aspects("Jupiter", lord):
        return None

    return Yoga(
        key="chamara",
        name="Chamara Yoga",
        sanskrit_name="Chamara",
        category="reputation",
        forming_planets=[lord, "Jupiter"] if lord != "Jupiter" else ["Jupiter"],
        description=f"Lagna lord {lord} is exalted in house {ctx.house(lord)}.",
        strength=YogaStrength.STRONG,
    )


YOGA_RULES = [
    RuleDescriptor("ruchaka", "yoga", "Ruchaka Yoga", "mahapurusha", ruchaka),
    RuleDescriptor("bhadra", "yoga", "Bhadra Yoga", "mahapurusha", bhadra),
    RuleDescriptor("hamsa", "yoga", "Hamsa Yoga", "mahapurusha", hamsa),
    RuleDescriptor("malavya", "yoga", "Malavya Yoga", "mahapurusha", malavya),
    RuleDescriptor("sasa", "yoga", "Sasa Yoga", "mahapurusha", sasa),
    RuleDescriptor("gaja_kesari", "yoga", "Gaja Kesari Yoga", "lunar", gaja_kesari),
    RuleDescriptor("budhaditya", "yoga", "Budhaditya Yoga", "solar", budhaditya),
    RuleDescriptor("sunapha", "yoga", "Sunapha Yoga", "lunar", sunapha),
    RuleDescriptor("anapha", "yoga", "Anapha Yoga", "lunar", anapha),
    RuleDescriptor("durudhara", "yoga", "Durudhara Yoga", "lunar", durudhara),
    RuleDescriptor("adhi", "yoga", "Adhi Yoga", "lunar", adhi),
    RuleDescriptor("chandra_mangal", "yoga", "Chandra Mangal Yoga", "wealth", chandra_mangal),
    RuleDescriptor("vesi", "yoga", "Vesi Yoga", "solar", vesi),
    RuleDescriptor("vosi", "yoga", "Vosi Yoga", "solar", vosi),
    RuleDescriptor("ubhayachari", "yoga", "Ubhayachari Yoga", "solar", ubhayachari),
    RuleDescriptor("raja", "yoga", "Raja Yoga", "power", raja),
    RuleDescriptor("dhana", "yoga", "Dhana Yoga", "wealth", dhana),
    RuleDescriptor("lakshmi", "yoga", "Lakshmi Yoga", "wealth", lakshmi),
    RuleDescriptor("viparita_raja", "yoga", "Viparita Raja Yoga", "power", viparita_raja),
    RuleDescriptor("neecha_bhanga", "yoga", "Neecha Bhanga Raja Yoga", "power", neecha_bhanga),
    RuleDescriptor("parivartana", "yoga", "Parivartana Yoga", "exchange", parivartana),
    RuleDescriptor("shubh_kartari", "yoga", "Shubh Kartari Yoga", "protection", shubh_kartari),
    RuleDescriptor("amala", "yoga", "Amala Yoga", "reputation", amala),
    RuleDescriptor("parvata", "yoga", "Parvata Yoga", "prosperity", parvata),
    RuleDescriptor("kahala", "yoga", "Kahala Yoga", "courage", kahala),
    RuleDescriptor("chamara", "yoga", "Chamara Yoga", "reputation", chamara),
]
