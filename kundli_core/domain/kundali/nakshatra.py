from typing import Tuple

from kundli_core.domain.kundali.zodiac import (
    NAKSHATRA_SPAN,
    PADA_SPAN,
    normalize,
    segment_index,
)

# Nakshatra names in order (Ashwini → Revati)
NAKSHATRAS = [
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashirsha",
    "Ardra", "Punarvasu", "Pushya", "Ashlesha",
    "Magha", "Purva Phalguni", "Uttara Phalguni", "Hasta",
    "Chitra", "Swati", "Vishakha", "Anuradha", "Jyeshtha",
    "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana",
    "Dhanishta", "Shatabhisha", "Purva Bhadrapada",
    "Uttara Bhadrapada", "Revati"
]

# Vimshottari lords repeat every nine nakshatras starting at Ashwini
NAKSHATRA_LORDS = [
    "Ketu", "Venus", "Sun", "Moon", "Mars",
    "Rahu", "Jupiter", "Saturn", "Mercury",
]


class NakshatraCalculator:
    """
    Utility to calculate nakshatra and pada from a sidereal longitude.
    """

    def calculate(self, longitude: float) -> Tuple[int, int]:
        """
        Returns:
            (nakshatra_index 0..26, pada 1..4)
        """
        lon = normalize(longitude)
        index = segment_index(lon, NAKSHATRA_SPAN, 27)

        within = max(0.0, lon - index * NAKSHATRA_SPAN)
        pada = segment_index(within, PADA_SPAN, 4) + 1

        return index, pada

    def name(self, index: int) -> str:
        return NAKSHATRAS[index]

    def lord(self, index: int) -> str:
        return NAKSHATRA_LORDS[index % 9]

    def fraction_traversed(self, longitude: float) -> float:
        """
        Portion (0..1) of the current nakshatra already covered.
        """
        lon = normalize(longitude)
        index = segment_index(lon, NAKSHATRA_SPAN, 27)
        return max(0.0, lon - index * NAKSHATRA_SPAN) / NAKSHATRA_SPAN
