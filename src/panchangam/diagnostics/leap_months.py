#!/usr/bin/env python3
from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from panchangam import names
from panchangam.core.config import DEFAULT_CONFIG, EngineConfig
from panchangam.core.time import jd_to_datetime
from panchangam.engines.festival import new_moon_candidates
from panchangam.engines.interfaces import EphemerisProvider
from panchangam.ephemeris.reference import ReferenceEphemeris


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "panchangam[diagnostics]"') from e


@dataclass(frozen=True)
class LeapMonth:
    year: int
    masa_ino: int
    new_moon_jd: float

    @property
    def name(self) -> str:
        return "Adhika " + names.name("masa", self.masa_ino)


def leap_months(
    start_year: int,
    end_year: int,
    provider: EphemerisProvider,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[LeapMonth]:
    """Every leap lunation whose opening new moon falls in [start_year, end_year]."""
    out: List[LeapMonth] = []
    for y in range(start_year, end_year + 1):
        for c in new_moon_candidates(y, provider, config):
            if c.year == y and c.masa.is_leap_month:
                out.append(LeapMonth(y, c.masa.amanta_index, c.jd))
    return out


def barcode(leaps: List[LeapMonth], start_year: int, end_year: int, out: str, title: str) -> None:
    plt = _need_matplotlib()
    from matplotlib.colors import ListedColormap

    fig, ax = plt.subplots(figsize=(16, 3.6))

    x_edges = np.arange(start_year - 0.5, end_year + 1.5, 1.0)
    y_edges = np.arange(-0.5, 12.5, 1.0)
    Z = np.zeros((12, end_year - start_year + 1), dtype=float)
    ax.pcolormesh(
        x_edges, y_edges, Z,
        shading="flat",
        cmap=ListedColormap(["white"]),
        vmin=0, vmax=1,
        edgecolors="0.88",
        linewidth=0.6,
        zorder=0,
    )
    ax.set_xlim(start_year - 0.5, end_year + 0.5)
    ax.set_ylim(-0.5, 11.5)
    ax.tick_params(axis="both", which="both", length=0)
    ax.set_yticks(list(range(12)))
    ax.set_yticklabels([names.name("masa", i) for i in range(12)])
    ax.set_xlabel("Gregorian year")

    xs = np.array([lm.year for lm in leaps], dtype=int)
    ys = np.array([lm.masa_ino for lm in leaps], dtype=int)
    ax.scatter(xs, ys, s=40, marker="o", c="0.15", linewidths=0.0, zorder=5)

    ax.set_title(title)
    fig.tight_layout()
    fig.savefig(out, dpi=250)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Adhika (leap) masas over a range of years.")
    p.add_argument("--start-year", type=int, default=2000)
    p.add_argument("--end-year", type=int, default=2030)
    p.add_argument("--out", default=None, help="Write a barcode plot to this file (needs matplotlib)")
    p.add_argument("--title", default="Adhika masa pattern")
    args = p.parse_args(argv)

    if args.end_year < args.start_year:
        raise SystemExit("--end-year must be >= --start-year")

    leaps = leap_months(args.start_year, args.end_year, ReferenceEphemeris())
    for lm in leaps:
        print(f"{lm.year}  {lm.name:<20} new moon {jd_to_datetime(lm.new_moon_jd):%Y-%m-%d %H:%M} UT")

    if args.out:
        barcode(leaps, args.start_year, args.end_year, args.out, args.title)
        print(f"Saved: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
