"""Strict parsing and formatting of moment-style date formats.

Boards store their date format as a moment.js pattern ("YYYY-MM-DD",
"MMM D, YYYY h:mm a"). Patterns are compiled once into a matcher and a
formatter. Parsing is strict: the whole string must match the pattern and
formatting the result must give the input back.
"""

import re
from datetime import datetime
from functools import lru_cache

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

TIME_FORMATS = ("HH:mm", "H:mm", "HHmm", "Hmm")

_TOKEN = re.compile(r"\[[^\]]*\]|YYYY|YY|MMMM|MMM|MM|M|Do|DD|D|dddd|ddd|HH|H|hh|h|mm|m|ss|s|A|a")

_PATTERNS = {
    "YYYY": r"\d{4}",
    "YY": r"\d{2}",
    "MMMM": "|".join(MONTHS),
    "MMM": "|".join(m[:3] for m in MONTHS),
    "MM": r"\d{2}",
    "M": r"\d{1,2}",
    "Do": r"\d{1,2}(?:st|nd|rd|th)",
    "DD": r"\d{2}",
    "D": r"\d{1,2}",
    "dddd": "|".join(WEEKDAYS),
    "ddd": "|".join(d[:3] for d in WEEKDAYS),
    "HH": r"\d{2}",
    "H": r"\d{1,2}",
    "hh": r"\d{2}",
    "h": r"\d{1,2}",
    "mm": r"\d{2}",
    "m": r"\d{1,2}",
    "ss": r"\d{2}",
    "s": r"\d{1,2}",
    "A": "AM|PM",
    "a": "am|pm",
}


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        return f"{n}th"
    return f"{n}" + {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


_FORMATTERS = {
    "YYYY": lambda d: f"{d.year:04d}",
    "YY": lambda d: f"{d.year % 100:02d}",
    "MMMM": lambda d: MONTHS[d.month - 1],
    "MMM": lambda d: MONTHS[d.month - 1][:3],
    "MM": lambda d: f"{d.month:02d}",
    "M": lambda d: str(d.month),
    "Do": lambda d: _ordinal(d.day),
    "DD": lambda d: f"{d.day:02d}",
    "D": lambda d: str(d.day),
    "dddd": lambda d: WEEKDAYS[d.weekday()],
    "ddd": lambda d: WEEKDAYS[d.weekday()][:3],
    "HH": lambda d: f"{d.hour:02d}",
    "H": lambda d: str(d.hour),
    "hh": lambda d: f"{d.hour % 12 or 12:02d}",
    "h": lambda d: str(d.hour % 12 or 12),
    "mm": lambda d: f"{d.minute:02d}",
    "m": lambda d: str(d.minute),
    "ss": lambda d: f"{d.second:02d}",
    "s": lambda d: str(d.second),
    "A": lambda d: "PM" if d.hour >= 12 else "AM",
    "a": lambda d: "pm" if d.hour >= 12 else "am",
}


def _tokenize(fmt: str) -> list[tuple[bool, str]]:
    """Split a format into (is_token, text) parts."""
    parts = []
    pos = 0
    for match in _TOKEN.finditer(fmt):
        if match.start() > pos:
            parts.append((False, fmt[pos : match.start()]))
        text = match.group(0)
        if text.startswith("["):
            parts.append((False, text[1:-1]))
        else:
            parts.append((True, text))
        pos = match.end()
    if pos < len(fmt):
        parts.append((False, fmt[pos:]))
    return parts


@lru_cache(maxsize=64)
def _compile(fmt: str) -> tuple[re.Pattern, tuple[tuple[bool, str], ...]]:
    parts = tuple(_tokenize(fmt))
    regex = []
    for i, (is_token, text) in enumerate(parts):
        if is_token:
            regex.append(f"(?P<t{i}>{_PATTERNS[text]})")
        else:
            regex.append(re.escape(text))
    return re.compile("".join(regex), re.IGNORECASE), parts


def format_date(value: datetime, fmt: str) -> str:
    """Format value with a moment-style pattern."""
    _, parts = _compile(fmt)
    return "".join(_FORMATTERS[text](value) if is_token else text for is_token, text in parts)


def parse_date(text: str, fmt: str) -> datetime | None:
    """Strictly parse text with a moment-style pattern, or return None."""
    pattern, parts = _compile(fmt)
    match = pattern.fullmatch(text)
    if match is None:
        return None

    fields = {"year": 1900, "month": 1, "day": 1, "hour": 0, "minute": 0, "second": 0}
    meridiem = None
    for i, (is_token, token) in enumerate(parts):
        if not is_token:
            continue
        raw = match.group(f"t{i}")
        if token == "YYYY":
            fields["year"] = int(raw)
        elif token == "YY":
            year = int(raw)
            fields["year"] = year + (1900 if year > 68 else 2000)
        elif token in ("MMMM", "MMM"):
            fields["month"] = [m[: len(raw)].lower() for m in MONTHS].index(raw.lower()) + 1
        elif token in ("MM", "M"):
            fields["month"] = int(raw)
        elif token in ("DD", "D", "Do"):
            fields["day"] = int(raw[:-2] if token == "Do" else raw)
        elif token in ("HH", "H", "hh", "h"):
            fields["hour"] = int(raw)
        elif token in ("mm", "m"):
            fields["minute"] = int(raw)
        elif token in ("ss", "s"):
            fields["second"] = int(raw)
        elif token in ("A", "a"):
            meridiem = raw.lower()

    if meridiem is not None:
        if not 1 <= fields["hour"] <= 12:
            return None
        fields["hour"] = fields["hour"] % 12 + (12 if meridiem == "pm" else 0)

    try:
        value = datetime(**fields)
    except ValueError:
        return None

    # Strict: leading zeros, weekday names and ordinals must all agree.
    if format_date(value, fmt).lower() != text.lower():
        return None
    return value


def parse_time(text: str, extra_formats: tuple[str, ...] = ()) -> datetime | None:
    """Strictly parse a time of day against the accepted time formats."""
    for fmt in (*TIME_FORMATS, *extra_formats):
        value = parse_date(text, fmt)
        if value is not None:
            return value
    return None
