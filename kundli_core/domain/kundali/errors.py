class KundaliError(Exception):
    """
    Base exception for all kundli calculation errors.
    """
    pass


class InvalidBirthDetailsError(KundaliError):
    """
    Raised when birth inputs are missing, malformed or out of range.
    """
    pass


class DateOutOfEphemerisRangeError(KundaliError):
    """
    Raised when the requested instant lies outside the ephemeris span.
    """
    pass


class UnsupportedConfigurationError(KundaliError):
    """
    Raised for an unrecognized ayanamsa, house system or node mode,
    or for calculation options outside their valid range.
    """
    pass


class CalculationError(KundaliError):
    """
    Raised when astronomical calculation fails.
    """
    pass
