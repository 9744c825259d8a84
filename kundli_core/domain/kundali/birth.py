from dataclasses import dataclass
from datetime import date, datetime, time, timezone as dt_timezone
from zoneinfo import ZoneInfo

from kundli_core.domain.kundali.errors import InvalidBirthDetailsError
from kundli_core.domain.kundali.schemas import Gender
from kundli_core.validation import (
    validate_date_format,
    validate_latitude,
    validate_local_datetime,
    validate_longitude,
    validate_name,
    validate_time_format,
    validate_timezone,
)


@dataclass(frozen=True)
class BirthDetails:
    """
    Immutable birth input used for kundli calculation.

    Construction validates every field; an instance is always safe to
    calculate with.
    """
    name: str
    birth_date: date
    birth_time: time
    latitude: float
    longitude: float
    timezone: str
    gender: Gender = Gender.OTHER

    def __post_init__(self):
        object.__setattr__(self, "name", validate_name(self.name))
        object.__setattr__(self, "latitude", validate_latitude(self.latitude))
        object.__setattr__(self, "longitude", validate_longitude(self.longitude))
        object.__setattr__(self, "timezone", validate_timezone(self.timezone))
        validate_local_datetime(self.birth_date, self.birth_time)

        try:
            object.__setattr__(self, "gender", Gender(self.gender))
        except ValueError as exc:
            raise InvalidBirthDetailsError(f"Unknown gender: {self.gender}") from exc

    @classmethod
    def from_strings(
        cls,
        name: str,
        birth_date: str,
        birth_time: str,
        latitude: float,
        longitude: float,
        timezone: str,
        gender: str = Gender.OTHER.value,
    ) -> "BirthDetails":
        """
        Build from raw form values ("1990-05-17", "06:45").
        """
        return cls(
            name=name,
            birth_date=validate_date_format(birth_date),
            birth_time=validate_time_format(birth_time),
            latitude=latitude,
            longitude=longitude,
            timezone=timezone,
            gender=gender,
        )

    # ─────────────────────────────────────────────
    # Time helpers
    # ─────────────────────────────────────────────

    @property
    def local_datetime(self) -> datetime:
        return datetime.combine(
            self.birth_date, self.birth_time
        ).replace(tzinfo=ZoneInfo(self.timezone))

    @property
    def utc_datetime(self) -> datetime:
        """
        Birth instant in UTC. Ambiguous local times resolve to the
        first occurrence (fold=0).
        """
        return self.local_datetime.astimezone(dt_timezone.utc)
