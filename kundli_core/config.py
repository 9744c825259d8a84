from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ─── App ──────────────────────────────
    APP_NAME: str = "kundli-core"
    ENV: str = "local"
    DEBUG: bool = False

    # ─── Logging ──────────────────────────
    LOG_LEVEL: str = "INFO"

    # ─── Ephemeris ────────────────────────
    # Directory holding Swiss Ephemeris *.se1 files. When unset the
    # built-in Moshier model is used.
    SWE_EPHE_PATH: Optional[str] = None
    SWE_REQUIRE_SWIEPH: bool = False
    EPHEMERIS_START_YEAR: int = -3000
    EPHEMERIS_END_YEAR: int = 3000

    # ─── Calculation Defaults ─────────────
    DEFAULT_AYANAMSA: str = "Lahiri"
    DEFAULT_HOUSE_SYSTEM: str = "Equal"
    DEFAULT_NODE_TYPE: str = "Mean"
    DEFAULT_DASHA_DEPTH: int = 3

    # ─── Transits ─────────────────────────
    TRANSIT_TIMELINE_DAYS: int = 365
    TRANSIT_TIMELINE_STEP_DAYS: int = 1


    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
