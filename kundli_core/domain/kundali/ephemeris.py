import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import swisseph as swe

from kundli_core.config import settings
from kundli_core.domain.kundali.errors import (
    CalculationError,
    DateOutOfEphemerisRangeError,
    UnsupportedConfigurationError,
)
from kundli_core.domain.kundali.schemas import HouseSystem, NodeType

logger = logging.getLogger(__name__)


# The Swiss Ephemeris keeps its ephemeris path and sidereal mode in
# process-wide C state; every call that touches that state holds this lock.
SWE_LOCK = threading.RLock()

_context: Optional[Dict[str, Any]] = None


BODY_IDS = {
    "Sun": swe.SUN,
    "Moon": swe.MOON,
    "Mars": swe.MARS,
    "Mercury": swe.MERCURY,
    "Jupiter": swe.JUPITER,
    "Venus": swe.VENUS,
    "Saturn": swe.SATURN,
}

NODE_IDS = {
    NodeType.MEAN: swe.MEAN_NODE,
    NodeType.TRUE: swe.TRUE_NODE,
}

# Systems whose cusps come from the ephemeris house routine. The others
# only need the ascendant, for which Equal is valid at every latitude.
HOUSE_CODES = {
    HouseSystem.PLACIDUS: b"P",
    HouseSystem.KOCH: b"K",
    HouseSystem.SRIPATI: b"O",
    HouseSystem.EQUAL: b"E",
    HouseSystem.WHOLE_SIGN: b"E",
    HouseSystem.BHAVA_CHALITA: b"E",
}

POLAR_FALLBACK_CODE = b"O"


# ─────────────────────────────────────────────
# Initialization
# ─────────────────────────────────────────────

def _detect_ephemeris_backend() -> str:
    """
    Report whether Swiss Ephemeris files or the Moshier fallback is in use.
    """
    jd = swe.julday(2024, 1, 1, 0.0)
    _, retflag = swe.calc_ut(jd, swe.MOON, swe.FLG_SWIEPH)

    if retflag & swe.FLG_MOSEPH:
        return "moshier"
    if retflag & swe.FLG_SWIEPH:
        return "swieph"
    return "unknown"


def initialize_ephemeris(
    ephe_path: Optional[str] = None,
    require_swieph: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Point the Swiss Ephemeris at its data files once per process.

    Returns a status dictionary for diagnostics. Raises CalculationError
    when Swiss files are required but only Moshier is available.
    """
    global _context

    with SWE_LOCK:
        if _context is not None and ephe_path is None:
            return _context

        path = ephe_path if ephe_path is not None else settings.SWE_EPHE_PATH
        required = (
            settings.SWE_REQUIRE_SWIEPH if require_swieph is None else require_swieph
        )

        if path:
            swe.set_ephe_path(path)

        backend = _detect_ephemeris_backend()
        logger.info(
            "Swiss Ephemeris initialized (path=%s, backend=%s)",
            path or "<built-in>",
            backend,
        )

        if required and backend != "swieph":
            raise CalculationError(
                "Swiss Ephemeris data files are not available. "
                f"Configured path: {path}. Backend: {backend}."
            )

        _context = {
            "ephemeris_path": path,
            "ephemeris_backend": backend,
            "require_swieph": required,
        }
        return _context


# ─────────────────────────────────────────────
# Time conversion
# ─────────────────────────────────────────────

def julian_day(instant: datetime) -> float:
    """
    Julian Day (UT) of an aware datetime. Naive values are taken as UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    utc = instant.astimezone(timezone.utc)

    hour_decimal = (
        utc.hour
        + utc.minute / 60.0
        + (utc.second + utc.microsecond / 1_000_000) / 3600.0
    )
    return swe.julday(utc.year, utc.month, utc.day, hour_decimal)


def datetime_from_julian_day(jd: float) -> datetime:
    year, month, day, hour = swe.revjul(jd)
    midnight = datetime(year, month, day, tzinfo=timezone.utc)
    return midnight + timedelta(hours=hour)


@dataclass(frozen=True)
class BodyState:
    """
    Tropical ecliptic longitude and daily motion of one body.
    """
    longitude: float
    speed: float

    @property
    def retrograde(self) -> bool:
        return self.speed < 0


# ─────────────────────────────────────────────
# Adapter
# ─────────────────────────────────────────────

class EphemerisAdapter:
    """
    Thin wrapper over the Swiss Ephemeris.

    This class:
    - Converts UTC instants into tropical longitudes and daily motion
    - Guards the valid ephemeris span
    - Translates library errors into domain errors
    """

    calculation_version = "v1"

    def __init__(
        self,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
    ):
        initialize_ephemeris()

        self.start_year = settings.EPHEMERIS_START_YEAR if start_year is None else start_year
        self.end_year = settings.EPHEMERIS_END_YEAR if end_year is None else end_year
        self.min_jd = swe.julday(self.start_year, 1, 1, 0.0)
        self.max_jd = swe.julday(self.end_year, 12, 31, 24.0)

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def positions(
        self,
        instant: datetime,
        node_type: NodeType = NodeType.MEAN,
    ) -> Dict[str, BodyState]:
        """
        Tropical positions of the seven grahas and both nodes at instant.
        """
        return self.positions_at(julian_day(instant), node_type)

    def positions_at(
        self,
        jd: float,
        node_type: NodeType = NodeType.MEAN,
    ) -> Dict[str, BodyState]:
        self.check_range(jd)

        node_id = NODE_IDS.get(node_type)
        if node_id is None:
            raise UnsupportedConfigurationError(f"Unsupported node type: {node_type}")

        states: Dict[str, BodyState] = {}
        for name, body_id in BODY_IDS.items():
            states[name] = self._body_state(jd, body_id)

        rahu = self._body_state(jd, node_id)
        states["Rahu"] = rahu
        # Ketu is the opposite node and shares its motion
        states["Ketu"] = BodyState(
            longitude=(rahu.longitude + 180.0) % 360.0,
            speed=rahu.speed,
        )

        return states

    def house_cusps(
        self,
        jd: float,
        latitude: float,
        longitude: float,
        house_system: HouseSystem,
    ) -> Tuple[List[float], float, float]:
        """
        Tropical (cusps[12], ascendant, midheaven) for a location.
        """
        self.check_range(jd)

        code = HOUSE_CODES.get(house_system)
        if code is None:
            raise UnsupportedConfigurationError(
                f"Unsupported house system: {house_system}"
            )

        try:
            cusps, ascmc = swe.houses(jd, latitude, longitude, code)
        except swe.Error as exc:
            if code == POLAR_FALLBACK_CODE:
                raise CalculationError(f"House calculation failed: {exc}") from exc
            logger.warning(
                "%s cusps undefined at latitude %.4f (%s); using Porphyry",
                house_system.value,
                latitude,
                exc,
            )
            cusps, ascmc = swe.houses(jd, latitude, longitude, POLAR_FALLBACK_CODE)

        # Older bindings return a leading zero entry
        cusps = list(cusps)[-12:]
        return cusps, ascmc[0], ascmc[1]

    def sun_equatorial(self, jd: float) -> Tuple[float, float]:
        """
        Apparent right ascension and declination of the Sun, in degrees.
        """
        self.check_range(jd)
        try:
            values, _ = swe.calc_ut(jd, swe.SUN, swe.FLG_SWIEPH | swe.FLG_EQUATORIAL)
        except swe.Error as exc:
            raise CalculationError(f"Sun position failed: {exc}") from exc
        return values[0], values[1]

    def sidereal_time(self, jd: float) -> float:
        """Greenwich sidereal time in hours."""
        return swe.sidtime(jd)

    def check_range(self, jd: float) -> None:
        if not self.min_jd <= jd <= self.max_jd:
            raise DateOutOfEphemerisRangeError(
                f"Julian day {jd:.2f} is outside the supported ephemeris span "
                f"({self.start_year}..{self.end_year})"
            )

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    def _body_state(self, jd: float, body_id: int) -> BodyState:
        try:
            values, _ = swe.calc_ut(jd, body_id, swe.FLG_SWIEPH | swe.FLG_SPEED)
        except swe.Error as exc:
            message = str(exc)
            if "range" in message.lower():
                raise DateOutOfEphemerisRangeError(message) from exc
            raise CalculationError(message) from exc

        return BodyState(longitude=values[0] % 360.0, speed=values[3])
