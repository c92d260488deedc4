# ephemeris/ayanamsa.py

from __future__ import annotations

from ..reference import astro_args as aa

# Lahiri (Chitrapaksha) ayanamsa at J2000.0, degrees
LAHIRI_J2000_DEG = 23.857092


def lahiri_ayanamsa(jd_ut: float) -> float:
    """
    Lahiri ayanamsa in degrees: the J2000 value carried forward by general
    precession in longitude. Positive, growing ~50.3"/yr.
    """
    return LAHIRI_J2000_DEG + aa.general_precession_deg(aa.T_centuries(jd_ut))
