"""Duration and time parsing and formatting.

Durations use the compact Go-style syntax (``1h30m``, ``1.5s``, ``-250ms``)
both for parsing string input and for rendering durations in debug strings
and text outputs. ``timedelta`` has microsecond resolution, so nanosecond
components are truncated toward zero.

Times are parsed and formatted with ``strptime``/``strftime`` layouts. In
output, ``%z`` renders as an RFC 3339 offset (``Z`` or ``+HH:MM``).
"""

import re
from collections.abc import Iterable
from datetime import datetime, timedelta

RFC3339 = "%Y-%m-%dT%H:%M:%S%z"
RFC3339_MICRO = "%Y-%m-%dT%H:%M:%S.%f%z"
DEFAULT_TIME_LAYOUT = RFC3339

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # U+00B5 micro sign
    "μs": MICROSECOND,  # U+03BC Greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}
_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")
_MAX_NANOSECONDS = (1 << 63) - 1
_DIRECTIVE = re.compile(r"%.")


def to_microseconds(value: timedelta) -> int:
    return (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration string.

    A duration is an optional sign followed by one or more decimal numbers,
    each with an optional fraction and a required unit: ``ns``, ``us``
    (or ``µs``), ``ms``, ``s``, ``m`` or ``h``. The bare string ``0`` is
    also accepted.

    Raises:
        ValueError: If the text is not a valid duration

    Example:
        >>> parse_duration("1h30m")
        datetime.timedelta(seconds=5400)
        >>> parse_duration("-1.5s")
        datetime.timedelta(days=-1, seconds=86398, microseconds=500000)
    """
    body = text
    negative = False
    if body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")

    total = 0
    position = 0
    while position < len(body):
        match = _COMPONENT.match(body, position)
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise ValueError(f"invalid duration {text!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {text!r}")
        scale = _UNITS.get(unit)
        if scale is None:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > _MAX_NANOSECONDS:
            raise ValueError(f"invalid duration {text!r}")
        position = match.end()

    microseconds = total // MICROSECOND
    return timedelta(microseconds=-microseconds if negative else microseconds)


def _decimal(value: int, scale: int) -> str:
    whole, fraction = divmod(value, scale)
    if not fraction:
        return str(whole)
    digits = str(fraction).rjust(len(str(scale)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def format_duration(value: timedelta) -> str:
    """Render a duration in Go-style syntax.

    Durations of a second or more render as hours, minutes and seconds with
    leading zero units omitted. Shorter durations use ``ms`` or ``µs``.

    Example:
        >>> format_duration(timedelta(hours=1, minutes=30))
        '1h30m0s'
        >>> format_duration(timedelta(seconds=5.5))
        '5.5s'
        >>> format_duration(timedelta(milliseconds=1.5))
        '1.5ms'
    """
    microseconds = to_microseconds(value)
    if microseconds == 0:
        return "0s"
    sign = "-" if microseconds < 0 else ""
    microseconds = abs(microseconds)

    if microseconds < 1_000:
        return f"{sign}{microseconds}µs"
    if microseconds < 1_000_000:
        return f"{sign}{_decimal(microseconds, 1_000)}ms"

    seconds, fraction = divmod(microseconds, 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    text = _decimal(seconds * 1_000_000 + fraction, 1_000_000) + "s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def parse_time(text: str, layouts: Iterable[str]) -> tuple[datetime, str] | None:
    """Parse a time string with the first layout that matches.

    Returns:
        The parsed datetime and the layout that matched, or None if no
        layout matches.
    """
    for layout in layouts:
        try:
            return datetime.strptime(text, layout), layout
        except ValueError:
            continue
    return None


def _offset(value: datetime) -> str:
    offset = value.utcoffset()
    if offset is None:
        return ""
    if not offset:
        return "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_time(value: datetime, layout: str) -> str:
    """Format a datetime with a strftime layout, rendering %z as in RFC 3339.

    Example:
        >>> format_time(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc), RFC3339)
        '2024-05-01T12:00:00Z'
    """
    offset = _offset(value)
    layout = _DIRECTIVE.sub(lambda m: offset if m.group() == "%z" else m.group(), layout)
    return value.strftime(layout)
