# reference/solar.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from . import astro_args as aa


@dataclass(frozen=True)
class SolarCoordinates:
    """True and apparent tropical solar longitude (degrees)."""
    L_true_deg: float
    L_app_deg: float


def solar_longitude(jd_tt: float) -> SolarCoordinates:
    """
    True and apparent solar longitude for a JD(TT) from the truncated
    Meeus series (accurate to ~0.01 deg).
    """
    T = aa.T_centuries(jd_tt)
    sm = aa.solar_mean_elements(T)
    M_rad = math.radians(sm.M_deg)

    # equation of center
    C_sun = (
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M_rad)
        + (0.019993 - 0.000101 * T) * math.sin(2.0 * M_rad)
        + 0.000289 * math.sin(3.0 * M_rad)
    )
    L_true = aa.wrap_deg(sm.L0_deg + C_sun)

    # aberration and leading nutation term
    Omega_rad = math.radians(aa.fundamental_args(T).Omega_deg)
    L_app = aa.wrap_deg(L_true - 0.00569 - 0.00478 * math.sin(Omega_rad))
    return SolarCoordinates(L_true_deg=L_true, L_app_deg=L_app)


def solar_declination_deg(L_app_deg: float, eps_deg: float) -> float:
    sin_delta = math.sin(math.radians(eps_deg)) * math.sin(math.radians(L_app_deg))
    return math.degrees(math.asin(sin_delta))


def equation_of_time_minutes(jd_tt: float) -> float:
    """Equation of Time (apparent minus mean solar time) in minutes."""
    T = aa.T_centuries(jd_tt)
    sm = aa.solar_mean_elements(T)
    eps_rad = math.radians(aa.mean_obliquity_deg(T))
    L_app_rad = math.radians(solar_longitude(jd_tt).L_app_deg)

    y = math.cos(eps_rad) * math.sin(L_app_rad)
    x = math.cos(L_app_rad)
    alpha_sun_deg = aa.wrap_deg(math.degrees(math.atan2(y, x)))
    return 4.0 * aa.wrap180(sm.L0_deg - alpha_sun_deg)


def horizon_depression_deg(elevation_m: float = 0.0) -> float:
    """Standard altitude of the solar upper limb at rise/set, with dip for observer height."""
    h0 = -0.833
    if elevation_m > 0:
        h0 -= 0.0347 * math.sqrt(elevation_m)
    return h0


def hour_angle_deg(jd_tt: float, lat_deg: float, h0_deg: float) -> Optional[float]:
    """
    Semi-diurnal arc of the Sun in degrees for altitude h0.
    Returns None if the sun does not cross h0 (polar day/night).
    """
    T = aa.T_centuries(jd_tt)
    delta = math.radians(solar_declination_deg(solar_longitude(jd_tt).L_app_deg, aa.mean_obliquity_deg(T)))
    phi = math.radians(lat_deg)
    cos_H0 = (math.sin(math.radians(h0_deg)) - math.sin(phi) * math.sin(delta)) / (math.cos(phi) * math.cos(delta))
    if cos_H0 < -1.0 or cos_H0 > 1.0:
        return None
    return math.degrees(math.acos(cos_H0))


def solar_event_jd(
    jd_ut_midnight: float,
    lat_deg: float,
    lon_deg_east: float,
    *,
    rising: bool,
    delta_t_seconds: float,
    h0_deg: float = -0.833,
    iterations: int = 3,
) -> Optional[float]:
    """
    JD(UT) of sunrise (rising=True) or sunset for the local solar day that
    starts at `jd_ut_midnight` (0h UT of the civil date).

    Iterates apparent time -> UT, re-evaluating declination and the
    equation of time at the event instant. Eastern observers get negative
    UT hours, which correctly land on the previous UT date.
    """
    jd = jd_ut_midnight + 0.5 - lon_deg_east / 360.0
    for _ in range(iterations):
        jd_tt = jd + delta_t_seconds / 86400.0
        H0 = hour_angle_deg(jd_tt, lat_deg, h0_deg)
        if H0 is None:
            return None
        app_hours = 12.0 - H0 / 15.0 if rising else 12.0 + H0 / 15.0
        ut_hours = app_hours - equation_of_time_minutes(jd_tt) / 60.0 - lon_deg_east / 15.0
        jd = jd_ut_midnight + ut_hours / 24.0
    return jd
