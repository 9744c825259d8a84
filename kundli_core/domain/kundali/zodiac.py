"""
Zodiac constants and sign arithmetic shared by every calculator.

All longitudes handled here are sidereal degrees in [0, 360).
"""

SIGNS = [
    "Aries", "Taurus", "Gemini", "Cancer",
    "Leo", "Virgo", "Libra", "Scorpio",
    "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]

SIGN_LORDS = [
    "Mars", "Venus", "Mercury", "Moon",
    "Sun", "Mercury", "Venus", "Mars",
    "Jupiter", "Saturn", "Saturn", "Jupiter",
]

PLANETS = [
    "Sun", "Moon", "Mars", "Mercury", "Jupiter",
    "Venus", "Saturn", "Rahu", "Ketu",
]

# Sun..Saturn, used by Ashtakavarga, Shadbala and Jaimini karakas
CLASSICAL_PLANETS = PLANETS[:7]

BENEFIC_PLANETS = {"Jupiter", "Venus", "Mercury", "Moon"}
MALEFIC_PLANETS = {"Sun", "Mars", "Saturn", "Rahu", "Ketu"}

KENDRA_HOUSES = {1, 4, 7, 10}
TRIKONA_HOUSES = {1, 5, 9}
DUSTHANA_HOUSES = {6, 8, 12}
UPACHAYA_HOUSES = {3, 6, 10, 11}

MOVABLE_SIGNS = {0, 3, 6, 9}
FIXED_SIGNS = {1, 4, 7, 10}
DUAL_SIGNS = {2, 5, 8, 11}

SIGN_SPAN = 30.0
NAKSHATRA_SPAN = 360.0 / 27
PADA_SPAN = NAKSHATRA_SPAN / 4

# Positions within a thousandth of a degree below a boundary are treated as on it.
BOUNDARY_TOLERANCE = 0.001


def normalize(longitude: float) -> float:
    """Wrap a longitude into [0, 360)."""
    value = longitude % 360.0
    if value >= 360.0:
        value = 0.0
    return value


def sign_index(longitude: float) -> int:
    return int(normalize(longitude) // SIGN_SPAN) % 12


def degree_in_sign(longitude: float) -> float:
    return normalize(longitude) - sign_index(longitude) * SIGN_SPAN


def segment_index(value: float, span: float, count: int) -> int:
    """
    Index of the fixed-width segment containing value.

    Segments are inclusive-lower / exclusive-upper; the result is clamped
    to [0, count - 1].
    """
    index = int((value + BOUNDARY_TOLERANCE) // span)
    return max(0, min(index, count - 1))


def is_odd_sign(index: int) -> bool:
    # Aries is the first (odd) sign
    return index % 2 == 0


def house_distance(from_sign: int, to_sign: int) -> int:
    """Count of signs from from_sign to to_sign, inclusive (1..12)."""
    return ((to_sign - from_sign) % 12) + 1


def angular_distance(a: float, b: float) -> float:
    """Shortest arc between two longitudes (0..180)."""
    diff = abs(normalize(a) - normalize(b))
    return min(diff, 360.0 - diff)


def signed_separation(a: float, b: float) -> float:
    """a - b wrapped into (-180, 180]."""
    diff = (a - b) % 360.0
    if diff > 180.0:
        diff -= 360.0
    return diff


def format_dms(value: float) -> str:
    """Format degrees as D°MM′SS″."""
    total_seconds = int(round(abs(value) * 3600))
    degrees, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    sign = "-" if value < 0 else ""
    return f"{sign}{degrees}°{minutes:02d}′{seconds:02d}″"
