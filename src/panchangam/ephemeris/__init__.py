"""Ephemeris providers.

`ReferenceEphemeris` needs nothing beyond the package itself (Sun, Moon and
the lunar node from analytic series; planets unavailable). The skyfield-backed
provider adds planets; install with:
  pip install "panchangam[ephemeris]"
"""

from ..core.errors import EphemerisUnavailableError


def require_ephemeris():
    """Raise a clear error if ephemeris extras aren't installed."""
    try:
        import jplephem  # noqa: F401
        import skyfield  # noqa: F401
    except ImportError as e:
        raise EphemerisUnavailableError('JPL ephemeris support requires: pip install "panchangam[ephemeris]"') from e
