"""Print yearly tables of UTC phase transition times.

Usage:
    python sunphase_table.py <lat> <lon> [year | start-end | y1,y2,...]
    python sunphase_table.py [years]          # with SUNPHASE_LAT/SUNPHASE_LON set
"""

from __future__ import annotations

import sys
import time
from typing import Dict, List, Optional, Sequence

from joblib import Parallel, cpu_count, delayed

from sunphase.calendar import EPOCH_YEAR, CivilTime, days_in_year, decompose, recompose
from sunphase.config import ConfigurationError, resolve_default_location
from sunphase.phases import Phase, PhaseEngine

COLUMN_LABELS = ("ASTRO-M", "NAUT-M", "CIVIL-M", "DAY", "CIVIL-E", "NAUT-E", "ASTRO-E", "NIGHT")
ABSENT = "--:--"


def parse_year_arguments(arg: str) -> List[int]:
    """Parse a single year, a ``start-end`` range or a comma separated list."""

    years: List[int] = []
    parts = [p.strip() for p in arg.split(",") if p.strip()]
    if not parts:
        raise ValueError("empty year argument")

    for part in parts:
        if "-" in part:
            start_str, end_str = part.split("-", 1)
            start = int(start_str)
            end = int(end_str)
            if end < start:
                raise ValueError(f"range {part} ends before it starts")
            years.extend(range(start, end + 1))
        else:
            years.append(int(part))

    for year in years:
        if year < EPOCH_YEAR:
            raise ValueError(f"year {year} precedes {EPOCH_YEAR}")

    # Drop duplicates, keep input order.
    return list(dict.fromkeys(years))


def _format_minute(minute_of_day: int) -> str:
    hour, minute = divmod(minute_of_day % 1440, 60)
    suffix = "+" if minute_of_day >= 1440 else " "
    return f"{hour:02d}:{minute:02d}{suffix}"


def year_rows(latitude: float, longitude: float, year: int) -> List[str]:
    """One formatted line per day of *year* with each phase's begin time."""

    engine = PhaseEngine(latitude, longitude)
    new_year = recompose(
        CivilTime(
            second=0,
            minute=0,
            hour=0,
            day=1,
            month=0,
            year_offset=year - EPOCH_YEAR,
            day_of_year=0,
        )
    )

    rows: List[str] = []
    for day_of_year in range(days_in_year(year)):
        civil = decompose(new_year + day_of_year * 86400)
        begins = {t.phase: t.minute_of_day for t in engine.schedule(day_of_year)}
        cells = [
            _format_minute(begins[phase]) if phase in begins else ABSENT + " "
            for phase in Phase
        ]
        rows.append(
            f"{civil.year:04d}-{civil.month + 1:02d}-{civil.day:02d}  " + " ".join(cells)
        )
    return rows


def compute_years(latitude: float, longitude: float, years: Sequence[int]) -> Dict[int, List[str]]:
    if not years:
        return {}

    n_jobs = max(1, min(cpu_count(), len(years)))
    if n_jobs == 1:
        return {year: year_rows(latitude, longitude, year) for year in years}

    results = Parallel(n_jobs=n_jobs)(
        delayed(year_rows)(latitude, longitude, year) for year in years
    )
    return dict(zip(years, results))


def _print_year(latitude: float, longitude: float, year: int, rows: List[str]) -> None:
    print(f"{year}  lat {latitude:+.4f}  lon {longitude:+.4f}  (UTC, + = next UTC day)")
    print("-" * 72)
    print("date        " + " ".join(f"{label:<6}" for label in COLUMN_LABELS))
    for row in rows:
        print(row)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        if len(args) >= 2:
            latitude, longitude = float(args[0]), float(args[1])
            year_arg = args[2] if len(args) > 2 else None
        else:
            location = resolve_default_location()
            if location is None:
                print(__doc__.strip())
                return 1
            latitude, longitude = location.latitude, location.longitude
            year_arg = args[0] if args else None
    except (ValueError, ConfigurationError) as exc:
        print(f"invalid location: {exc}")
        return 1

    if year_arg is None:
        years = [decompose(int(time.time())).year]
    else:
        try:
            years = parse_year_arguments(year_arg)
        except ValueError as exc:
            print(f"invalid year argument: {exc}")
            return 1

    tables = compute_years(latitude, longitude, years)
    for idx, year in enumerate(years):
        if idx:
            print("\n" + "=" * 72 + "\n")
        _print_year(latitude, longitude, year, tables[year])
    return 0


if __name__ == "__main__":
    sys.exit(main())
