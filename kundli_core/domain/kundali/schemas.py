from datetime import datetime
from enum import Enum
from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field

from kundli_core.config import settings
from kundli_core.domain.kundali.errors import UnsupportedConfigurationError
from kundli_core.domain.kundali.zodiac import format_dms


# ─────────────────────────────────────────────
# Enumerations
# ─────────────────────────────────────────────

class AyanamsaType(str, Enum):
    LAHIRI = "Lahiri"
    RAMAN = "Raman"
    KRISHNAMURTI = "Krishnamurti"
    FAGAN_BRADLEY = "Fagan-Bradley"
    YUKTESHWAR = "Yukteshwar"
    TRUE_CHITRAPAKSHA = "True Chitrapaksha"


class HouseSystem(str, Enum):
    WHOLE_SIGN = "Whole Sign"
    EQUAL = "Equal"
    PLACIDUS = "Placidus"
    KOCH = "Koch"
    SRIPATI = "Sripati"
    BHAVA_CHALITA = "Bhava Chalita"


class NodeType(str, Enum):
    MEAN = "Mean"
    TRUE = "True"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Dignity(str, Enum):
    EXALTED = "Exalted"
    DEBILITATED = "Debilitated"
    MOOLATRIKONA = "Moolatrikona"
    OWN_SIGN = "Own Sign"
    FRIENDLY = "Friendly"
    ENEMY = "Enemy"
    NEUTRAL = "Neutral"


def _parse_enum(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value

    wanted = str(value).strip().lower().replace("_", " ").replace("-", " ")
    for member in enum_cls:
        candidates = {
            member.value.lower().replace("-", " "),
            member.name.lower().replace("_", " "),
        }
        if wanted in candidates:
            return member

    raise UnsupportedConfigurationError(f"Unsupported {label}: {value!r}")


# ─────────────────────────────────────────────
# Calculation Settings
# ─────────────────────────────────────────────

class CalculationSettings(BaseModel):
    """
    Per-request calculation options.

    Passed explicitly to every engine; never read from module state.
    """
    model_config = ConfigDict(frozen=True)

    ayanamsa: AyanamsaType = AyanamsaType.LAHIRI
    house_system: HouseSystem = HouseSystem.EQUAL
    node_type: NodeType = NodeType.MEAN
    dasha_depth: int = Field(default=3, ge=1, le=5)

    @classmethod
    def from_names(
        cls,
        ayanamsa: str = AyanamsaType.LAHIRI.value,
        house_system: str = HouseSystem.EQUAL.value,
        node_type: str = NodeType.MEAN.value,
        dasha_depth: int = 3,
    ) -> "CalculationSettings":
        """
        Build settings from user-facing names, raising
        UnsupportedConfigurationError for unknown values.
        """
        if not 1 <= int(dasha_depth) <= 5:
            raise UnsupportedConfigurationError(
                f"Unsupported dasha depth: {dasha_depth}"
            )

        return cls(
            ayanamsa=_parse_enum(AyanamsaType, ayanamsa, "ayanamsa"),
            house_system=_parse_enum(HouseSystem, house_system, "house system"),
            node_type=_parse_enum(NodeType, node_type, "node type"),
            dasha_depth=int(dasha_depth),
        )

    @classmethod
    def default(cls) -> "CalculationSettings":
        """
        Settings seeded from the environment configuration.
        """
        return cls.from_names(
            ayanamsa=settings.DEFAULT_AYANAMSA,
            house_system=settings.DEFAULT_HOUSE_SYSTEM,
            node_type=settings.DEFAULT_NODE_TYPE,
            dasha_depth=settings.DEFAULT_DASHA_DEPTH,
        )

    @classmethod
    def krishnamurti(cls) -> "CalculationSettings":
        """KP preset: Krishnamurti ayanamsa with Placidus cusps and true nodes."""
        return cls(
            ayanamsa=AyanamsaType.KRISHNAMURTI,
            house_system=HouseSystem.PLACIDUS,
            node_type=NodeType.TRUE,
        )


# ─────────────────────────────────────────────
# Core Atomic Schemas
# ─────────────────────────────────────────────

class PlanetPosition(BaseModel):
    """
    Represents a single body's sidereal position in the natal chart.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    longitude: float
    sign_index: int
    sign: str
    degree: float
    house: int
    nakshatra: str
    nakshatra_index: int
    nakshatra_lord: str
    pada: int
    speed: float
    retrograde: bool = False
    dignity: Dignity = Dignity.NEUTRAL

    @property
    def motion(self) -> str:
        return "Retrograde" if self.retrograde else "Direct"

    @property
    def degree_dms(self) -> str:
        return format_dms(self.degree)


class AscendantPosition(BaseModel):
    """
    Represents the ascendant (Lagna). It defines house 1.
    """
    model_config = ConfigDict(frozen=True)

    longitude: float
    sign_index: int
    sign: str
    degree: float
    nakshatra: str
    nakshatra_index: int
    nakshatra_lord: str
    pada: int
    lord: str

    @property
    def degree_dms(self) -> str:
        return format_dms(self.degree)


class HouseInfo(BaseModel):
    """
    One bhava: the sign on its cusp, its lord and occupants.
    """
    model_config = ConfigDict(frozen=True)

    number: int
    sign_index: int
    sign: str
    cusp: float
    lord: str
    occupants: List[str] = Field(default_factory=list)


# ─────────────────────────────────────────────
# Core Natal Chart (D1)
# ─────────────────────────────────────────────

class NatalChart(BaseModel):
    """
    Represents the canonical D1 (Rashi) chart.

    Every downstream engine reads positions from this object only.
    """
    model_config = ConfigDict(frozen=True)

    birth_utc: datetime
    julian_day: float
    ayanamsa: AyanamsaType
    ayanamsa_value: float
    house_system: HouseSystem
    node_type: NodeType
    ascendant: AscendantPosition
    planets: Dict[str, PlanetPosition]
    houses: List[HouseInfo]

    @property
    def ayanamsa_dms(self) -> str:
        return format_dms(self.ayanamsa_value)

    def planet(self, name: str) -> PlanetPosition:
        return self.planets[name]

    def house(self, number: int) -> HouseInfo:
        return self.houses[number - 1]

    def house_lord(self, number: int) -> str:
        return self.houses[number - 1].lord

    def occupants(self, number: int) -> List[str]:
        return list(self.houses[number - 1].occupants)
