from typing import List, Optional

from kundli_core.domain.kundali.zodiac import (
    CLASSICAL_PLANETS,
    DUSTHANA_HOUSES,
    KENDRA_HOUSES,
    angular_distance,
    normalize,
)
from kundli_core.domain.rules.chart_context import ChartContext
from kundli_core.domain.rules.schemas import (
    Cancellation,
    Dosha,
    RuleDescriptor,
    Severity,
)


# Houses considered for Mangal Dosha
MANGAL_DOSHA_HOUSES = {1, 4, 7, 8, 12}

# Kaal Sarp variants named by Rahu's house
KAAL_SARP_TYPES = {
    1: "Anant", 2: "Kulik", 3: "Vasuki", 4: "Shankhpal",
    5: "Padma", 6: "Mahapadma", 7: "Takshak", 8: "Karkotak",
    9: "Shankhachood", 10: "Ghatak", 11: "Vishdhar", 12: "Sheshnag",
}

# Junction nakshatras: Ashwini, Ashlesha, Magha, Jyeshtha, Mula, Revati
GANDMOOL_NAKSHATRAS = {0, 8, 9, 17, 18, 26}
GANDMOOL_SEVERE = {8, 17, 18}

ECLIPSE_ORB = 12.0

_SEVERITY_STEPS = [Severity.HIGH, Severity.MEDIUM, Severity.LOW]


def _resolve_severity(base: Severity, cancellations: List[Cancellation]) -> Severity:
    """
    One cancellation lowers the severity a step, two or more cancel.
    """
    if len(cancellations) >= 2:
        return Severity.CANCELLED
    if len(cancellations) == 1:
        position = _SEVERITY_STEPS.index(base)
        return _SEVERITY_STEPS[min(position + 1, len(_SEVERITY_STEPS) - 1)]
    return base


def _jupiter_cancellation(ctx: ChartContext, *targets: str) -> Optional[Cancellation]:
    touched = [t for t in targets if ctx.influences("Jupiter", t)]
    if not touched:
        return None
    return Cancellation(
        rule="jupiter_influence",
        description=f"Jupiter conjoins or aspects {', '.join(touched)}",
    )


# ─────────────────────────────────────────────
# Mangal Dosha
# ─────────────────────────────────────────────

def manglik(ctx: ChartContext) -> Optional[Dosha]:
    """
    Mars in houses 1, 4, 7, 8 or 12 from the ascendant.

    The same placement from the Moon or Venus raises the severity. Mars
    in its own or exaltation sign, or under Jupiter's (or Venus's)
    influence, cancels the dosha.
    """
    mars_house = ctx.house("Mars")
    if mars_house not in MANGAL_DOSHA_HOUSES:
        return None

    references = ["Ascendant"]
    for reference in ("Moon", "Venus"):
        if ctx.house_from(reference, "Mars") in MANGAL_DOSHA_HOUSES:
            references.append(reference)

    cancellations: List[Cancellation] = []
    if ctx.own_or_exalted("Mars"):
        cancellations.append(Cancellation(
            rule="mars_dignified",
            description=f"Mars is in its own or exaltation sign ({ctx.planet('Mars').sign})",
        ))
    jupiter = _jupiter_cancellation(ctx, "Mars")
    if jupiter:
        cancellations.append(jupiter)
    if ctx.aspects("Venus", "Mars"):
        cancellations.append(Cancellation(
            rule="venus_aspect",
            description="Venus aspects Mars",
        ))

    if cancellations:
        severity = Severity.CANCELLED
    elif len(references) >= 2:
        severity = Severity.HIGH
    else:
        severity = Severity.MEDIUM

    return Dosha(
        key="manglik",
        name="Mangal Dosha",
        sanskrit_name="Kuja Dosha",
        category="marriage",
        forming_planets=["Mars"],
        description=(
            f"Mars is placed in house {mars_house}, "
            "which is considered a Manglik position."
        ),
        severity=severity,
        cancelled=bool(cancellations),
        cancellations=cancellations,
        details={
            "house": mars_house,
            "counted_from": references,
        },
    )


# ─────────────────────────────────────────────
# Kaal Sarp Dosha
# ─────────────────────────────────────────────

def kaal_sarp(ctx: ChartContext) -> Optional[Dosha]:
    """
    All seven classical planets hemmed on one side of the Rahu-Ketu axis.

    Six on one side gives the partial form.
    """
    rahu = ctx.planet("Rahu").longitude
    ahead = sum(
        1 for name in CLASSICAL_PLANETS
        if 0.0 < normalize(ctx.planet(name).longitude - rahu) < 180.0
    )
    behind = len(CLASSICAL_PLANETS) - ahead
    hemmed = max(ahead, behind)

    if hemmed < len(CLASSICAL_PLANETS) - 1:
        return None

    partial = hemmed < len(CLASSICAL_PLANETS)
    rahu_house = ctx.house("Rahu")
    variant = KAAL_SARP_TYPES[rahu_house]

    if partial:
        base = Severity.LOW
    elif rahu_house in DUSTHANA_HOUSES:
        base = Severity.MEDIUM
    else:
        base = Severity.HIGH

    cancellations: List[Cancellation] = []
    jupiter = _jupiter_cancellation(ctx, "Rahu", "Ketu")
    if jupiter:
        cancellations.append(jupiter)
    if ctx.own_or_exalted("Rahu"):
        cancellations.append(Cancellation(
            rule="rahu_dignified",
            description=f"Rahu is strong in {ctx.planet('Rahu').sign}",
        ))
    if ctx.in_kendra_from("Moon", "Jupiter"):
        cancellations.append(Cancellation(
            rule="gaja_kesari",
            description="Jupiter in a kendra from the Moon (Gaja Kesari)",
        ))

    severity = _resolve_severity(base, cancellations)

    return Dosha(
        key="kaal_sarp",
        name="Kaal Sarp Dosha",
        sanskrit_name=f"{variant} Kaal Sarp",
        category="life",
        forming_planets=["Rahu", "Ketu"],
        description=(
            f"{'Six' if partial else 'All seven'} planets lie on one side of "
            f"the Rahu-Ketu axis with Rahu in house {rahu_house} ({variant})."
        ),
        severity=severity,
        cancelled=severity == Severity.CANCELLED,
        cancellations=cancellations,
        details={
            "variant": variant,
            "partial": partial,
            "direction": "Rahu to Ketu" if ahead >= behind else "Ketu to Rahu",
        },
    )


# ─────────────────────────────────────────────
# Kemdrum Dosha
# ─────────────────────────────────────────────

def kemdrum(ctx: ChartContext) -> Optional[Dosha]:
    """
    No planet (Sun and nodes excluded) in the 2nd or 12th from the Moon.
    """
    flanking = [
        name for name in ctx.in_house_from("Moon", (2, 12))
        if name != "Sun"
    ]
    if flanking:
        return None

    cancellations: List[Cancellation] = []
    supporters = [
        name for name in ("Jupiter", "Venus")
        if ctx.in_kendra_from("Moon", name)
    ]
    if supporters:
        cancellations.append(Cancellation(
            rule="benefic_kendra_from_moon",
            description=f"{', '.join(supporters)} in a kendra from the Moon",
        ))
    if ctx.own_or_exalted("Moon"):
        cancellations.append(Cancellation(
            rule="moon_dignified",
            description="Moon is in its own or exaltation sign",
        ))
    if ctx.house("Moon") in KENDRA_HOUSES:
        cancellations.append(Cancellation(
            rule="moon_in_kendra",
            description=f"Moon occupies kendra house {ctx.house('Moon')}",
        ))

    severity = _resolve_severity(Severity.MEDIUM, cancellations)

    return Dosha(
        key="kemdrum",
        name="Kemdrum Dosha",
        sanskrit_name="Kemadruma",
        category="wealth",
        forming_planets=["Moon"],
        description="The Moon has no planetary support in the 2nd or 12th from it.",
        severity=severity,
        cancelled=severity == Severity.CANCELLED,
        cancellations=cancellations,
    )


# ─────────────────────────────────────────────
# Pitra Dosha
# ─────────────────────────────────────────────

def pitra(ctx: ChartContext) -> Optional[Dosha]:
    """
    Affliction of the Sun by Rahu or Saturn, or Rahu in the 9th house.
    """
    afflictions: List[str] = []
    if ctx.conjunct("Sun", "Rahu"):
        afflictions.append("Sun conjoins Rahu")
    if ctx.influences("Saturn", "Sun"):
        afflictions.append("Saturn conjoins or aspects the Sun")
    if ctx.house("Rahu") == 9:
        afflictions.append("Rahu occupies the 9th house")

    if not afflictions:
        return None

    base = _SEVERITY_STEPS[max(0, 3 - len(afflictions))]

    cancellations: List[Cancellation] = []
    jupiter = _jupiter_cancellation(ctx, "Sun")
    if jupiter:
        cancellations.append(jupiter)
    if ctx.own_or_exalted("Sun"):
        cancellations.append(Cancellation(
            rule="sun_dignified",
            description="Sun is in its own or exaltation sign",
        ))

    severity = _resolve_severity(base, cancellations)

    return Dosha(
        key="pitra",
        name="Pitra Dosha",
        sanskrit_name="Pitri Dosha",
        category="ancestry",
        forming_planets=["Sun", "Rahu", "Saturn"],
        description="; ".join(afflictions) + ".",
        severity=severity,
        cancelled=severity == Severity.CANCELLED,
        cancellations=cancellations,
        details={"afflictions": afflictions},
    )


# ─────────────────────────────────────────────
# Grahan Dosha
# ─────────────────────────────────────────────

def grahan(ctx: ChartContext) -> Optional[Dosha]:
    """
    Sun or Moon within 12 degrees of Rahu or Ketu.
    """
    eclipsed = []
    for luminary in ("Sun", "Moon"):
        for node in ("Rahu", "Ketu"):
            distance = angular_distance(
                ctx.planet(luminary).longitude,
                ctx.planet(node).longitude,
            )
            if distance <= ECLIPSE_ORB:
                eclipsed.append((luminary, node, round(distance, 2)))

    if not eclipsed:
        return None

    base = Severity.HIGH if len(eclipsed) > 1 else Severity.MEDIUM

    cancellations: List[Cancellation] = []
    jupiter = _jupiter_cancellation(ctx, *sorted({l for l, _, _ in eclipsed}))
    if jupiter:
        cancellations.append(jupiter)

    severity = _resolve_severity(base, cancellations)
    forming = sorted({name for pair in eclipsed for name in pair[:2]})

    return Dosha(
        key="grahan",
        name="Grahan Dosha",
        sanskrit_name="Grahana Yoga",
        category="health",
        forming_planets=forming,
        description=", ".join(
            f"{l} within {d}° of {n}" for l, n, d in eclipsed
        ) + ".",
        severity=severity,
        cancelled=severity == Severity.CANCELLED,
        cancellations=cancellations,
    )


# ─────────────────────────────────────────────
# Guru Chandal Dosha
# ─────────────────────────────────────────────

def guru_chandal(ctx: ChartContext) -> Optional[Dosha]:
    """Jupiter conjunct Rahu."""
    if not ctx.conjunct("Jupiter", "Rahu"):
        return None

    cancellations: List[Cancellation] = []
    if ctx.own_or_exalted("Jupiter"):
        cancellations.append(Cancellation(
            rule="jupiter_dignified",
            description="Jupiter is in its own or exaltation sign",
        ))
    if ctx.house("Jupiter") in KENDRA_HOUSES:
        cancellations.append(Cancellation(
            rule="jupiter_in_kendra",
            description=f"Jupiter occupies kendra house {ctx.house('Jupiter')}",
        ))

    severity = _resolve_severity(Severity.MEDIUM, cancellations)

    return Dosha(
        key="guru_chandal",
        name="Guru Chandal Dosha",
        sanskrit_name="Guru Chandala Yoga",
        category="wisdom",
        forming_planets=["Jupiter", "Rahu"],
        description=(
            f"Jupiter conjoins Rahu in {ctx.planet('Jupiter').sign} "
            f"(orb {ctx.orb('Jupiter', 'Rahu'):.1f}°)."
        ),
        severity=severity,
        cancelled=severity == Severity.CANCELLED,
        cancellations=cancellations,
    )


# ─────────────────────────────────────────────
# Shrapit Dosha
# ─────────────────────────────────────────────

def shrapit(ctx: ChartContext) -> Optional[Dosha]:
    """Saturn conjunct Rahu."""
    if not ctx.conjunct("Saturn", "Rahu"):
        return None

    cancellations: List[Cancellation] = []
    jupiter = _jupiter_cancellation(ctx, "Saturn")
    if jupiter:
        cancellations.append(jupiter)
    if ctx.own_or_exalted("Saturn"):
        cancellations.append(Cancellation(
            rule="saturn_dignified",
            description="Saturn is in its own or exaltation sign",
        ))

    severity = _resolve_severity(Severity.HIGH, cancellations)

    return Dosha(
        key="shrapit",
        name="Shrapit Dosha",
        sanskrit_name="Shrapita Yoga",
        category="karma",
        forming_planets=["Saturn", "Rahu"],
        description=f"Saturn conjoins Rahu in house {ctx.house('Saturn')}.",
        severity=severity,
        cancelled=severity == Severity.CANCELLED,
        cancellations=cancellations,
    )


# ─────────────────────────────────────────────
# Gandmool Dosha
# ─────────────────────────────────────────────

def gandmool(ctx: ChartContext) -> Optional[Dosha]:
    """Moon in one of the six junction nakshatras."""
    moon = ctx.planet("Moon")
    if moon.nakshatra_index not in GANDMOOL_NAKSHATRAS:
        return None

    base = Severity.MEDIUM if moon.nakshatra_index in GANDMOOL_SEVERE else Severity.LOW

    cancellations: List[Cancellation] = []
    jupiter = _jupiter_cancellation(ctx, "Moon")
    if jupiter:
        cancellations.append(jupiter)
    if ctx.own_or_exalted("Moon"):
        cancellations.append(Cancellation(
            rule="moon_dignified",
            description="Moon is in its own or exaltation sign",
        ))

    severity = _resolve_severity(base, cancellations)

    return Dosha(
        key="gandmool",
        name="Gandmool Dosha",
        sanskrit_name="Ganda Moola",
        category="birth",
        forming_planets=["Moon"],
        description=f"Moon is in {moon.nakshatra} pada {moon.pada}, a junction nakshatra.",
        severity=severity,
        cancelled=severity == Severity.CANCELLED,
        cancellations=cancellations,
        details={"nakshatra": moon.nakshatra, "pada": moon.pada},
    )


DOSHA_RULES = [
    RuleDescriptor("manglik", "dosha", "Mangal Dosha", "marriage", manglik),
    RuleDescriptor("kaal_sarp", "dosha", "Kaal Sarp Dosha", "life", kaal_sarp),
    RuleDescriptor("kemdrum", "dosha", "Kemdrum Dosha", "wealth", kemdrum),
    RuleDescriptor("pitra", "dosha", "Pitra Dosha", "ancestry", pitra),
    RuleDescriptor("grahan", "dosha", "Grahan Dosha", "health", grahan),
    RuleDescriptor("guru_chandal", "dosha", "Guru Chandal Dosha", "wisdom", guru_chandal),
    RuleDescriptor("shrapit", "dosha", "Shrapit Dosha", "karma", shrapit),
    RuleDescriptor("gandmool", "dosha", "Gandmool Dosha", "birth", gandmool),
]
