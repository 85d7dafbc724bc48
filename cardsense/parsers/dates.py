"""Date token normalization for Indian statement formats.

Two-digit years use a fixed pivot: ``51``-``99`` become ``19xx`` and ``00``-``50``
become ``20xx``. The pivot does not move with the current date.
"""

import re

YEAR_PIVOT = 50

MONTHS = {
    "jan": "01",
    "feb": "02",
    "mar": "03",
    "apr": "04",
    "may": "05",
    "jun": "06",
    "jul": "07",
    "aug": "08",
    "sep": "09",
    "oct": "10",
    "nov": "11",
    "dec": "12",
}

DMY_FULL = re.compile(r"(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})")
DMY_SHORT = re.compile(r"(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})")
YMD = re.compile(r"^(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})$")
DMON_FULL = re.compile(r"^(\d{1,2})[\s\-.]?([A-Za-z]{3})[\s\-.]?(\d{4})$")
DMON_SHORT = re.compile(r"^(\d{1,2})[\s\-.]?([A-Za-z]{3})[\s\-.]?(\d{2})$")


def expand_year(yy: str) -> str:
    """Expand a two-digit year around the fixed pivot."""
    return f"19{yy}" if int(yy) > YEAR_PIVOT else f"20{yy}"


def _iso(year: str, month: str, day: str) -> str:
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def normalize_date(raw: str) -> str | None:
    """Normalize a ``D/M/YYYY`` or ``D/M/YY`` token (``/``, ``-`` or ``.``) to ``YYYY-MM-DD``."""
    m = DMY_FULL.search(raw)
    if m:
        day, month, year = m.groups()
        return _iso(year, month, day)
    m = DMY_SHORT.search(raw)
    if m:
        day, month, yy = m.groups()
        return _iso(expand_year(yy), month, day)
    return None


def parse_date(raw: str) -> str | None:
    """Parse a whole CSV date cell, also accepting ISO dates and ``DD-Mon-YY(YY)``."""
    s = raw.strip().replace('"', "").replace("'", "")
    if not s:
        return None
    m = DMY_FULL.fullmatch(s)
    if m:
        day, month, year = m.groups()
        return _iso(year, month, day)
    m = YMD.match(s)
    if m:
        year, month, day = m.groups()
        return _iso(year, month, day)
    m = DMON_FULL.match(s)
    if m:
        day, mon, year = m.groups()
        mm = MONTHS.get(mon.lower())
        return _iso(year, mm, day) if mm else None
    m = DMON_SHORT.match(s)
    if m:
        day, mon, yy = m.groups()
        mm = MONTHS.get(mon.lower())
        return _iso(expand_year(yy), mm, day) if mm else None
    m = DMY_SHORT.fullmatch(s)
    if m:
        day, month, yy = m.groups()
        return _iso(expand_year(yy), month, day)
    return None
