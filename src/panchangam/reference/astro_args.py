# reference/astro_args.py

from __future__ import annotations

import math
from dataclasses import dataclass
from math import fmod
from typing import Tuple


# ------------------------------------------------------------
# Angle helpers
# ------------------------------------------------------------

def wrap_deg(x_deg: float) -> float:
    """Wrap degrees to [0,360)."""
    y = fmod(x_deg, 360.0)
    if y < 0:
        y += 360.0
    # fmod(-1e-17, 360) + 360 rounds to 360.0
    if y >= 360.0:
        y = 0.0
    return y


def wrap180(deg: float) -> float:
    """Wraps an angle in degrees to the range [-180.0, 180.0)."""
    return wrap_deg(deg + 180.0) - 180.0


def arcsec_to_deg(arcsec: float) -> float:
    return arcsec / 3600.0


# ------------------------------------------------------------
# Time variable (TT)
# ------------------------------------------------------------

J2000_TT = 2451545.0  # JD(TT) at J2000.0


def T_centuries(jd_tt: float) -> float:
    """Julian centuries from J2000.0 in TT."""
    return (jd_tt - J2000_TT) / 36525.0


# ------------------------------------------------------------
# Fundamental arguments (Meeus / ELP2000-style; degrees)
# ------------------------------------------------------------

@dataclass(frozen=True)
class FundamentalArgs:
    """Mean lunar/solar arguments in degrees, wrapped to [0,360)."""
    Lp_deg: float     # Moon mean longitude
    D_deg: float      # mean elongation
    M_deg: float      # Sun mean anomaly
    Mp_deg: float     # Moon mean anomaly
    F_deg: float      # Moon argument of latitude
    Omega_deg: float  # longitude of the mean ascending node


def fundamental_args(T: float) -> FundamentalArgs:
    """
    Meeus ch. 47 polynomials:
      L' = 218.3164477 + 481267.88123421 T - 0.0015786 T^2 + T^3/538841 - T^4/65194000
      D  = 297.8501921 + 445267.1114034  T - 0.0018819 T^2 + T^3/545868  - T^4/113065000
      M  = 357.5291092 + 35999.0502909  T - 0.0001536 T^2 + T^3/24490000
      M' = 134.9633964 + 477198.8675055 T + 0.0087414 T^2 + T^3/69699   - T^4/14712000
      F  = 93.2720950  + 483202.0175233 T - 0.0036539 T^2 - T^3/3526000 + T^4/863310000
      Ω  = 125.04452   - 1934.136261    T + 0.0020708 T^2 + T^3/450000
    """
    T2 = T * T
    T3 = T2 * T
    T4 = T2 * T2

    Lp = 218.3164477 + 481267.88123421 * T - 0.0015786 * T2 + T3 / 538841.0 - T4 / 65194000.0
    D = 297.8501921 + 445267.1114034 * T - 0.0018819 * T2 + T3 / 545868.0 - T4 / 113065000.0
    M = 357.5291092 + 35999.0502909 * T - 0.0001536 * T2 + T3 / 24490000.0
    Mp = 134.9633964 + 477198.8675055 * T + 0.0087414 * T2 + T3 / 69699.0 - T4 / 14712000.0
    F = 93.2720950 + 483202.0175233 * T - 0.0036539 * T2 - T3 / 3526000.0 + T4 / 863310000.0
    Omega = 125.04452 - 1934.136261 * T + 0.0020708 * T2 + T3 / 450000.0

    return FundamentalArgs(
        Lp_deg=wrap_deg(Lp),
        D_deg=wrap_deg(D),
        M_deg=wrap_deg(M),
        Mp_deg=wrap_deg(Mp),
        F_deg=wrap_deg(F),
        Omega_deg=wrap_deg(Omega),
    )


def mean_lunar_node_deg(T: float) -> float:
    """Tropical longitude of the mean ascending node (Rahu)."""
    return fundamental_args(T).Omega_deg


# ------------------------------------------------------------
# Mean obliquity and general precession
# ------------------------------------------------------------

def mean_obliquity_deg(T: float) -> float:
    """
    IAU 2006 mean obliquity of the ecliptic (degrees):
      eps = 84381.406" - 46.836769"T - 0.0001831"T^2 + 0.00200340"T^3
            - 0.000000576"T^4 - 0.0000000434"T^5
    """
    T2 = T * T
    T3 = T2 * T
    T4 = T2 * T2
    T5 = T4 * T
    eps_arcsec = (
        84381.406
        - 46.836769 * T
        - 0.0001831 * T2
        + 0.00200340 * T3
        - 0.000000576 * T4
        - 0.0000000434 * T5
    )
    return arcsec_to_deg(eps_arcsec)


def general_precession_deg(T: float) -> float:
    """Accumulated general precession in longitude since J2000 (IAU 2006, degrees)."""
    return arcsec_to_deg(5028.796195 * T + 1.1054348 * T * T)


# ------------------------------------------------------------
# Sun mean elements (Meeus-style)
# ------------------------------------------------------------

@dataclass(frozen=True)
class SolarMean:
    L0_deg: float  # mean longitude of Sun
    M_deg: float   # mean anomaly of Sun


def solar_mean_elements(T: float) -> SolarMean:
    T2 = T * T
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T2
    M = 357.52911 + 35999.05029 * T - 0.0001537 * T2
    return SolarMean(L0_deg=wrap_deg(L0), M_deg=wrap_deg(M))


def eccentricity_factor(T: float) -> float:
    """
    Eccentricity factor E for the Earth's orbit, scaling lunar
    perturbation terms that carry the Sun's mean anomaly.
    """
    return 1.0 - 0.002516 * T - 0.0000074 * (T * T)


# ------------------------------------------------------------
# Frames and sidereal time (for rise/set work)
# ------------------------------------------------------------

def ecliptic_to_equatorial(lon_deg: float, lat_deg: float, eps_deg: float) -> Tuple[float, float]:
    """Ecliptic (lambda, beta) -> equatorial (alpha, delta), all in degrees."""
    lam = math.radians(lon_deg)
    bet = math.radians(lat_deg)
    eps = math.radians(eps_deg)

    sin_d = math.sin(bet) * math.cos(eps) + math.cos(bet) * math.sin(eps) * math.sin(lam)
    y = math.sin(lam) * math.cos(eps) - math.tan(bet) * math.sin(eps)
    x = math.cos(lam)
    return wrap_deg(math.degrees(math.atan2(y, x))), math.degrees(math.asin(sin_d))


def gmst_deg(jd_ut: float) -> float:
    """Greenwich mean sidereal time (Meeus 12.4), degrees."""
    T = (jd_ut - J2000_TT) / 36525.0
    theta = (
        280.46061837
        + 360.98564736629 * (jd_ut - J2000_TT)
        + 0.000387933 * T * T
        - T * T * T / 38710000.0
    )
    return wrap_deg(theta)


def altitude_deg(ra_deg: float, dec_deg: float, lat_deg: float, lon_deg_east: float, jd_ut: float) -> float:
    """Geometric altitude of an equatorial position for an observer."""
    H = math.radians(wrap180(gmst_deg(jd_ut) + lon_deg_east - ra_deg))
    phi = math.radians(lat_deg)
    dec = math.radians(dec_deg)
    sin_h = math.sin(phi) * math.sin(dec) + math.cos(phi) * math.cos(dec) * math.cos(H)
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_h))))
