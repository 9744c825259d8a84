from datetime import datetime
from typing import Any, Dict, List, Optional

from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.errors import InvalidBirthDetailsError
from kundli_core.domain.kundali.houses import HOUSE_NAMES
from kundli_core.domain.kundali.kundli import KundliData
from kundli_core.domain.kundali.schemas import CalculationSettings


PERSISTED_FIELDS = (
    "name", "birth_date", "birth_time",
    "latitude", "longitude", "timezone",
)


# ─────────────────────────────────────────────
# Domain → DB
# ─────────────────────────────────────────────

def kundli_to_persistence(kundli: KundliData) -> Dict[str, Any]:
    """
    Convert a KundliData into a JSON-storable record.

    Only birth inputs, settings and the ascendant are kept; every other
    field is re-derived on load.
    """
    birth = kundli.birth
    settings = kundli.settings
    ascendant = kundli.ascendant

    return {
        "name": birth.name,
        "birth_date": birth.birth_date.isoformat(),
        "birth_time": birth.birth_time.isoformat(),
        "latitude": birth.latitude,
        "longitude": birth.longitude,
        "timezone": birth.timezone,
        "gender": birth.gender.value,
        "settings": {
            "ayanamsa": settings.ayanamsa.value,
            "house_system": settings.house_system.value,
            "node_type": settings.node_type.value,
            "dasha_depth": settings.dasha_depth,
        },
        "ascendant": {
            "sign": ascendant.sign,
            "degree": ascendant.degree,
            "nakshatra": ascendant.nakshatra,
        },
        "calculation_version": kundli.calculation_version,
    }


# ─────────────────────────────────────────────
# DB → Domain
# ─────────────────────────────────────────────

def birth_details_from_persistence(data: Dict[str, Any]) -> BirthDetails:
    """
    Restore BirthDetails from a record written by kundli_to_persistence.
    """
    missing = [key for key in PERSISTED_FIELDS if key not in data]
    if missing:
        raise InvalidBirthDetailsError(
            f"Stored kundli is missing fields: {', '.join(missing)}"
        )

    return BirthDetails.from_strings(
        name=data["name"],
        birth_date=data["birth_date"],
        birth_time=data["birth_time"],
        latitude=data["latitude"],
        longitude=data["longitude"],
        timezone=data["timezone"],
        gender=data.get("gender", "Other"),
    )


def settings_from_persistence(data: Dict[str, Any]) -> CalculationSettings:
    stored = data.get("settings")
    if not stored:
        return CalculationSettings.default()
    return CalculationSettings.from_names(**stored)


# ─────────────────────────────────────────────
# Domain → LLM context
# ─────────────────────────────────────────────

def kundli_to_context_text(kundli: KundliData, at: Optional[datetime] = None) -> str:
    """
    Flatten a kundli into plain text for a language-model prompt.
    """
    chart = kundli.chart
    summary = kundli.summary(at)
    lines: List[str] = []

    lines.append(f"KUNDLI: {kundli.birth.name}")
    lines.append(
        f"Born {kundli.birth.birth_date.isoformat()} {kundli.birth.birth_time.isoformat()} "
        f"({kundli.birth.timezone}) at {kundli.birth.latitude:.4f}, {kundli.birth.longitude:.4f}"
    )
    lines.append(
        f"Ayanamsa: {kundli.settings.ayanamsa.value} {chart.ayanamsa_dms}; "
        f"Houses: {kundli.settings.house_system.value}; Nodes: {kundli.settings.node_type.value}"
    )
    lines.append(
        f"Ascendant: {chart.ascendant.sign} {chart.ascendant.degree_dms} "
        f"({chart.ascendant.nakshatra} pada {chart.ascendant.pada})"
    )
    lines.append("")

    lines.append("PLANETS")
    for planet in chart.planets.values():
        retro = " (R)" if planet.retrograde else ""
        lines.append(
            f"- {planet.name}: {planet.sign} {planet.degree_dms}{retro}, house {planet.house}, "
            f"{planet.nakshatra} pada {planet.pada}, {planet.dignity.value}"
        )
    lines.append("")

    lines.append("HOUSES")
    for house in chart.houses:
        occupants = ", ".join(house.occupants) or "empty"
        lines.append(
            f"- {house.number} ({HOUSE_NAMES[house.number]}): {house.sign}, "
            f"lord {house.lord}; {occupants}"
        )
    lines.append("")

    d9 = kundli.divisional_charts.charts.get("D9")
    if d9 is not None:
        lines.append(f"NAVAMSA: ascendant {d9.ascendant.sign}; " + ", ".join(
            f"{p.body} {p.sign}" for p in d9.placements
        ))
        lines.append("")

    lines.append("DASHA")
    lines.append(f"- Mahadasha: {summary.mahadasha or 'n/a'}")
    lines.append(f"- Antardasha: {summary.antardasha or 'n/a'}")
    lines.append("")

    lines.append("KARAKAS")
    for karaka, planet in kundli.karakas.items():
        lines.append(f"- {karaka}: {planet}")
    lines.append("")

    lines.append("YOGAS")
    for yoga in kundli.yogas:
        lines.append(f"- {yoga.name} ({yoga.strength.value}): {yoga.description}")
    if not kundli.yogas:
        lines.append("- none")
    lines.append("")

    lines.append("DOSHAS")
    for dosha in kundli.doshas:
        state = "cancelled" if dosha.cancelled else dosha.severity.value
        lines.append(f"- {dosha.name} ({state}): {dosha.description}")
        if dosha.cancelled:
            lines.append(f"  Cancelled because: {dosha.cancellation_reason}")
    if not kundli.doshas:
        lines.append("- none")
    lines.append("")

    lines.append("STRENGTH")
    lines.append(
        "- Strongest signs (SAV): " + ", ".join(
            f"{s.sign} {s.points}" for s in kundli.ashtakavarga.strongest_signs()
        )
    )
    lines.append(
        f"- Shadbala strongest {kundli.shadbala.strongest}, weakest {kundli.shadbala.weakest}"
    )
    weak = [name for name, score in kundli.shadbala.scores.items() if not score.is_sufficient]
    lines.append(f"- Below required Shadbala: {', '.join(weak) or 'none'}")

    return "\n".join(lines)
