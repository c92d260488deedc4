from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, Dict, Literal, Optional, Tuple, Union

AngaTag = Literal["vriddhi", "kshaya"]
SnapshotAt = Literal["sunrise", "sunset", "pradosha"]


@dataclass(frozen=True)
class CivilTime:
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: float = 0.0

    def day_fraction(self) -> float:
        return self.day + (self.hour + (self.minute + self.second / 60.0) / 60.0) / 24.0


@dataclass(frozen=True)
class Location:
    """Observer position. `timezone` is a fixed offset in hours east of UTC or an IANA name."""
    latitude: float
    longitude: float
    elevation: float = 0.0
    timezone: Union[float, str] = 0.0

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 360.0:
            raise ValueError(f"longitude out of range: {self.longitude}")

    def utc_offset_hours(self, jd: Optional[float] = None) -> float:
        """Offset in hours at the instant `jd` (only matters for IANA names with DST)."""
        if not isinstance(self.timezone, str):
            return float(self.timezone)
        from zoneinfo import ZoneInfo
        from .time import jd_to_datetime

        when = jd_to_datetime(jd if jd is not None else 2451545.0)
        off = when.astimezone(ZoneInfo(self.timezone)).utcoffset()
        return off.total_seconds() / 3600.0 if off is not None else 0.0

    def offset_on(self, d: date) -> float:
        """Offset in effect at local noon of a civil date."""
        if not isinstance(self.timezone, str):
            return float(self.timezone)
        from .time import date_to_jd

        return self.utc_offset_hours(date_to_jd(d) + 0.5)


@dataclass(frozen=True)
class CalendarInstant:
    """A JD (UT) together with the fixed offset used to present it."""
    jd: float
    tz_offset_hours: float = 0.0

    def civil(self) -> CivilTime:
        from .time import julian_day_to_civil
        return julian_day_to_civil(self.jd + self.tz_offset_hours / 24.0)

    def to_datetime(self) -> datetime:
        from .time import jd_to_datetime
        return jd_to_datetime(self.jd, self.tz_offset_hours)

    @classmethod
    def from_civil(cls, c: CivilTime, tz_offset_hours: float = 0.0) -> "CalendarInstant":
        from .time import civil_to_julian_day
        jd_local = civil_to_julian_day(c.month, c.day_fraction(), c.year)
        return cls(jd_local - tz_offset_hours / 24.0, tz_offset_hours)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "CalendarInstant":
        from .time import datetime_to_jd
        off = dt.utcoffset()
        return cls(datetime_to_jd(dt), off.total_seconds() / 3600.0 if off is not None else 0.0)

    def __str__(self) -> str:
        return self.to_datetime().isoformat(timespec="seconds")


# ============================================================
# Panchangam elements
# ============================================================

@dataclass(frozen=True)
class PanchangamElement:
    kind: ClassVar[str] = "element"

    index: int
    name: str
    name_localized: str
    start: Optional[CalendarInstant] = None
    end: Optional[CalendarInstant] = None

    @property
    def start_jd(self) -> Optional[float]:
        return self.start.jd if self.start is not None else None

    @property
    def end_jd(self) -> Optional[float]:
        return self.end.jd if self.end is not None else None

    def contains(self, jd: float) -> bool:
        """Half-open [start, end); unknown bounds count as open."""
        if self.start is not None and jd < self.start.jd:
            return False
        if self.end is not None and jd >= self.end.jd:
            return False
        return True

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "index": self.index,
            "name": self.name,
            "nameLocalized": self.name_localized,
            "start": str(self.start) if self.start is not None else None,
            "end": str(self.end) if self.end is not None else None,
        }


@dataclass(frozen=True)
class Tithi(PanchangamElement):
    kind: ClassVar[str] = "tithi"

    @property
    def ordinal(self) -> int:
        return self.index + 1

    @property
    def paksha_index(self) -> int:
        return 0 if self.index < 15 else 1


@dataclass(frozen=True)
class Nakshatra(PanchangamElement):
    kind: ClassVar[str] = "nakshatra"


@dataclass(frozen=True)
class Yoga(PanchangamElement):
    kind: ClassVar[str] = "yoga"


@dataclass(frozen=True)
class Karana(PanchangamElement):
    kind: ClassVar[str] = "karana"


@dataclass(frozen=True)
class Masa(PanchangamElement):
    kind: ClassVar[str] = "masa"
    is_leap_month: bool = False


@dataclass(frozen=True)
class Paksha(PanchangamElement):
    kind: ClassVar[str] = "paksha"


@dataclass(frozen=True)
class Ritu(PanchangamElement):
    kind: ClassVar[str] = "ritu"


@dataclass(frozen=True)
class Ayana(PanchangamElement):
    kind: ClassVar[str] = "ayana"


@dataclass(frozen=True)
class Rashi(PanchangamElement):
    kind: ClassVar[str] = "rashi"


@dataclass(frozen=True)
class Vara(PanchangamElement):
    kind: ClassVar[str] = "vara"


@dataclass(frozen=True)
class MasaInfo:
    month_index: int        # 1..12, solar month the lunar month is named from
    is_leap_month: bool
    amanta_index: int       # 0..11, Chaitra = 0
    purnimanta_index: int   # 0..11
    solar_month_start: int  # solar month at the opening new moon
    solar_month_end: int    # solar month at the closing new moon


@dataclass(frozen=True)
class TithiBoundary:
    """One tithi occurrence; immutable batch record."""
    tithi_ino: int
    start_time: datetime
    end_time: datetime
    masa_ino: int
    is_leap_month: bool

    @property
    def start_jd(self) -> float:
        from .time import datetime_to_jd
        return datetime_to_jd(self.start_time)

    @property
    def end_jd(self) -> float:
        from .time import datetime_to_jd
        return datetime_to_jd(self.end_time)

    @property
    def key(self) -> Tuple[int, int, bool]:
        return (self.tithi_ino, self.masa_ino, self.is_leap_month)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tithiIno": self.tithi_ino,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "masaIno": self.masa_ino,
            "isLeapMonth": self.is_leap_month,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TithiBoundary":
        return cls(
            tithi_ino=int(d["tithiIno"]),
            start_time=datetime.fromisoformat(d["startTime"]),
            end_time=datetime.fromisoformat(d["endTime"]),
            masa_ino=int(d["masaIno"]),
            is_leap_month=bool(d["isLeapMonth"]),
        )


@dataclass(frozen=True)
class DayAnga:
    """An element interval overlapping a sunrise-to-sunrise day, with its Vriddhi/Kshaya tag."""
    element: PanchangamElement
    tag: Optional[AngaTag] = None


@dataclass(frozen=True)
class SunTimes:
    sunrise: Optional[float]  # JD (UT)
    sunset: Optional[float]


@dataclass(frozen=True)
class MoonTimes:
    moonrise: Optional[float]
    moonset: Optional[float]


@dataclass(frozen=True)
class CalendarSnapshot:
    civil_date: date
    location: Location
    at: SnapshotAt
    reference: CalendarInstant
    tithi: Tithi
    paksha: Paksha
    nakshatra: Nakshatra
    yoga: Yoga
    karana: Karana
    masa: Masa
    purnimanta_masa: Masa
    masa_info: MasaInfo
    ritu: Ritu
    drik_ritu: Ritu
    ayana: Ayana
    vara: Vara
    sun_rashi: Rashi
    moon_rashi: Rashi
    sunrise: Optional[CalendarInstant] = None
    sunset: Optional[CalendarInstant] = None
    moonrise: Optional[CalendarInstant] = None
    moonset: Optional[CalendarInstant] = None
    day_angas: Tuple[DayAnga, ...] = ()
    attributes: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        def _t(x: Optional[CalendarInstant]) -> Optional[str]:
            return str(x) if x is not None else None

        out: Dict[str, Any] = {
            "date": self.civil_date.isoformat(),
            "at": self.at,
            "reference": str(self.reference),
        }
        for el in (self.tithi, self.paksha, self.nakshatra, self.yoga, self.karana,
                   self.ritu, self.ayana, self.vara):
            out[el.kind] = el.as_dict()
        out["masa"] = dict(self.masa.as_dict(), isLeapMonth=self.masa_info.is_leap_month)
        out["purnimantaMasa"] = self.purnimanta_masa.as_dict()
        out["drikRitu"] = self.drik_ritu.as_dict()
        out["sunRashi"] = self.sun_rashi.as_dict()
        out["moonRashi"] = self.moon_rashi.as_dict()
        out["sunrise"] = _t(self.sunrise)
        out["sunset"] = _t(self.sunset)
        out["moonrise"] = _t(self.moonrise)
        out["moonset"] = _t(self.moonset)
        out["dayAngas"] = [dict(a.element.as_dict(), tag=a.tag) for a in self.day_angas]
        out["attributes"] = self.attributes
        return out


@dataclass(frozen=True)
class GrahaPosition:
    graha: str
    rashi_index: int
    degree_in_rashi: float
    tropical_longitude: float
    sidereal_longitude: float


@dataclass(frozen=True)
class RashiChart:
    instant: CalendarInstant
    ayanamsa: float
    positions: Tuple[GrahaPosition, ...]
    missing: Tuple[str, ...] = ()

    def get(self, graha: str) -> Optional[GrahaPosition]:
        for p in self.positions:
            if p.graha == graha:
                return p
        return None


@dataclass(frozen=True)
class Sankranti:
    rashi_index: int
    name: str
    instant: CalendarInstant

    @property
    def jd(self) -> float:
        return self.instant.jd

    @property
    def time(self) -> datetime:
        return self.instant.to_datetime()
