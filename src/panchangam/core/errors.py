class PanchangamError(Exception):
    """Base error."""

class EphemerisUnavailableError(PanchangamError):
    """Raised when the ephemeris provider cannot supply a body/instant (or extras are missing)."""

class NoCrossingFoundError(PanchangamError):
    """Raised by the strict search helpers when a window holds no crossing."""

class CalculationUnavailableError(PanchangamError):
    """Raised when an element (e.g. masa) cannot be determined from upstream data."""

class AmbiguousMasaResolutionError(PanchangamError):
    """Raised when no new moon at all matches a requested (masa, year) pair."""

class ConfigurationError(PanchangamError):
    """Invalid configuration, locale table or grid mapping."""
