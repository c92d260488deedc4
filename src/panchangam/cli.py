from __future__ import annotations

import argparse
import importlib
import inspect
import json
import logging
import re
import sys
from datetime import date
from typing import Union

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

# Hyderabad
DEFAULT_LAT = 17.385
DEFAULT_LNG = 78.4867
DEFAULT_TZ = "Asia/Kolkata"


def _parse_ymd(s: str) -> date:
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)


def _parse_tz(s: str) -> Union[float, str]:
    try:
        return float(s)
    except ValueError:
        return s


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _add_location_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, default=DEFAULT_LAT, help="Latitude in degrees (north positive)")
    p.add_argument("--lng", type=float, default=DEFAULT_LNG, help="Longitude in degrees (east positive)")
    p.add_argument("--tz", type=_parse_tz, default=DEFAULT_TZ, help="UTC offset in hours or an IANA zone name")
    p.add_argument("--elevation", type=float, default=0.0, help="Elevation in metres")
    p.add_argument("--ephemeris", choices=["reference", "skyfield"], default="reference")
    p.add_argument("--kernel", default="de421.bsp", help="JPL kernel for --ephemeris skyfield")


def _location(args):
    from panchangam.core.types import Location
    return Location(args.lat, args.lng, args.elevation, args.tz)


def _provider(args):
    if args.ephemeris == "skyfield":
        from panchangam.ephemeris.skyfield_provider import SkyfieldEphemeris
        return SkyfieldEphemeris.load(args.kernel)
    from panchangam.ephemeris.reference import ReferenceEphemeris
    return ReferenceEphemeris()


def _config():
    from panchangam.core.config import config_from_env
    return config_from_env()


def _fmt(inst) -> str:
    return inst.to_datetime().strftime("%Y-%m-%d %H:%M") if inst is not None else "-"


def cmd_day(argv: list[str]) -> int:
    import panchangam

    p = argparse.ArgumentParser(prog="panchangam day", description="Panchangam for one civil day")
    p.add_argument("date", help="YYYY-MM-DD")
    p.add_argument("--at", choices=["sunrise", "sunset", "pradosha"], default="sunrise")
    p.add_argument("--locale", default="en")
    p.add_argument("--json", action="store_true")
    _add_location_args(p)
    args = p.parse_args(argv)

    snap = panchangam.panchangam_for(
        _parse_ymd(args.date), _location(args), at=args.at,
        provider=_provider(args), config=_config(), locale=args.locale,
    )
    if args.json:
        print(json.dumps(snap.as_dict(), indent=2, ensure_ascii=False))
        return 0

    leap = "Adhika " if snap.masa_info.is_leap_month else ""
    print(f"{snap.civil_date.isoformat()}  ({snap.at} {_fmt(snap.reference)})")
    print(f"  vara       {snap.vara.name}")
    print(f"  masa       {leap}{snap.masa.name} (purnimanta {snap.purnimanta_masa.name})")
    print(f"  paksha     {snap.paksha.name}")
    for el in (snap.tithi, snap.nakshatra, snap.yoga, snap.karana):
        print(f"  {el.kind:<10} {el.name:<16} {_fmt(el.start)} -> {_fmt(el.end)}")
    print(f"  ritu       {snap.ritu.name} (drik {snap.drik_ritu.name})")
    print(f"  ayana      {snap.ayana.name}")
    print(f"  rashi      sun {snap.sun_rashi.name}, moon {snap.moon_rashi.name}")
    print(f"  sun        rise {_fmt(snap.sunrise)}  set {_fmt(snap.sunset)}")
    print(f"  moon       rise {_fmt(snap.moonrise)}  set {_fmt(snap.moonset)}")
    for a in snap.day_angas:
        tag = f" [{a.tag}]" if a.tag else ""
        print(f"  day tithi  {a.element.name}{tag}")
    return 0


def cmd_year(argv: list[str]) -> int:
    import panchangam
    from panchangam import names

    p = argparse.ArgumentParser(prog="panchangam year", description="All tithi boundaries of a civil year")
    p.add_argument("year", type=int)
    p.add_argument("--json", action="store_true")
    p.add_argument("--cache", default=None, help="Directory for the JSON boundary cache")
    _add_location_args(p)
    args = p.parse_args(argv)

    table = panchangam.tithi_boundaries(
        args.year, _location(args), provider=_provider(args), config=_config(), cache_dir=args.cache,
    )
    if args.json:
        print(table.to_json())
        return 0
    for b in table:
        leap = "*" if b.is_leap_month else " "
        print(f"{b.start_time:%Y-%m-%d %H:%M} -> {b.end_time:%Y-%m-%d %H:%M}  "
              f"{names.name('masa', b.masa_ino):<12}{leap} {names.name('tithi', b.tithi_ino)}")
    gaps = table.gaps()
    if gaps:
        print(f"# {len(gaps)} gap(s) in the sequence")
    return 0


def cmd_sankranti(argv: list[str]) -> int:
    import panchangam

    p = argparse.ArgumentParser(prog="panchangam sankranti", description="Solar ingresses of a civil year")
    p.add_argument("year", type=int)
    _add_location_args(p)
    args = p.parse_args(argv)

    for s in panchangam.sankrantis(args.year, _location(args), provider=_provider(args), config=_config()):
        print(f"{_fmt(s.instant)}  {s.name}")
    return 0


def cmd_rashi(argv: list[str]) -> int:
    import panchangam

    p = argparse.ArgumentParser(prog="panchangam rashi", description="Sidereal rashi chart for a day")
    p.add_argument("date", help="YYYY-MM-DD")
    p.add_argument("--at", default="sunrise", help="sunrise, midnight, noon or HH:MM local time")
    _add_location_args(p)
    args = p.parse_args(argv)

    at = args.at
    m = _HHMM_RE.match(at)
    if m:
        at = (int(m.group(1)), int(m.group(2)))

    chart = panchangam.rashi_chart_for(_parse_ymd(args.date), _location(args), at=at, provider=_provider(args))
    from panchangam import names
    print(f"{_fmt(chart.instant)}  ayanamsa {chart.ayanamsa:.4f}")
    for pos in chart.positions:
        print(f"  {pos.graha:<8} {names.name('rashi', pos.rashi_index):<12} {pos.degree_in_rashi:6.2f}")
    if chart.missing:
        print(f"  unavailable: {', '.join(chart.missing)}")
    return 0


def cmd_festival(argv: list[str]) -> int:
    import panchangam
    from panchangam import names

    p = argparse.ArgumentParser(prog="panchangam festival", description="Find a tithi in a given masa")
    p.add_argument("tithi", type=int, help="Tithi index 0..29 (0 = Shukla Pratipada)")
    p.add_argument("masa", type=int, help="Masa index 0..11 (0 = Chaitra)")
    p.add_argument("year", type=int)
    p.add_argument("--leap", action="store_true", help="Prefer the Adhika masa when there is one")
    _add_location_args(p)
    args = p.parse_args(argv)

    b = panchangam.festival_tithi(
        args.tithi, args.masa, args.year, _location(args),
        prefer_leap=args.leap, provider=_provider(args), config=_config(),
    )
    if b is None:
        print("not found")
        return 1
    leap = "Adhika " if b.is_leap_month else ""
    print(f"{names.name('tithi', b.tithi_ino)} of {leap}{names.name('masa', b.masa_ino)}: "
          f"{b.start_time:%Y-%m-%d %H:%M} -> {b.end_time:%Y-%m-%d %H:%M}")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # shorthand: `panchangam [-v|-q] YYYY-MM-DD ...` runs `day`
    for i, tok in enumerate(argv):
        if not tok.startswith("-"):
            if _DATE_RE.match(tok):
                argv = argv[:i] + ["day"] + argv[i:]
            break

    p = argparse.ArgumentParser(prog="panchangam", description="Hindu panchangam toolkit CLI.")
    p.add_argument("-v", "--verbose", action="count", default=0)
    p.add_argument("-q", "--quiet", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("day", help="Panchangam for one civil day")
    sub.add_parser("year", help="Tithi boundaries of a civil year")
    sub.add_parser("sankranti", help="Solar ingresses of a civil year")
    sub.add_parser("rashi", help="Rashi chart for a day")
    sub.add_parser("festival", help="Find a tithi in a given masa")

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument("tool", choices=["leap-months"], help="Which diagnostic to run")

    args, rest = p.parse_known_args(argv)

    level = logging.ERROR if args.quiet else (logging.WARNING, logging.INFO, logging.DEBUG)[min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "day":
        return cmd_day(rest)

    if args.cmd == "year":
        return cmd_year(rest)

    if args.cmd == "sankranti":
        return cmd_sankranti(rest)

    if args.cmd == "rashi":
        return cmd_rashi(rest)

    if args.cmd == "festival":
        return cmd_festival(rest)

    if args.cmd == "diag":
        tool_map = {
            "leap-months": "panchangam.diagnostics.leap_months",
        }
        return _run_module_main(tool_map[args.tool], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
