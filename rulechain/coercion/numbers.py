"""Numeric coercion, parsing and formatting.

Integer and float families share this module. Each coercion function takes a
classified Input and either returns the converted value or a Violation built
from the context; nothing here raises for bad input.

Conversions between numeric types use round-trip checks (see
rulechain.coercion.kinds): a value that does not survive conversion to the
target kind is out of range, never silently truncated.
"""

import math
import re

from rulechain.core.context import RuleContext
from rulechain.core.rounding import ROUNDING_TOLERANCE, Rounding, round_integral
from rulechain.core.violations import Violation
from rulechain.coercion.inputs import Input, InputKind
from rulechain.coercion.kinds import FLOAT32, NumericKind

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_PLAIN_DIGITS = re.compile(r"[0-9A-Za-z]+")
_PREFIXED_DIGITS = re.compile(r"[0-9A-Za-z_]+")
_BASE_PREFIXES = {2: "0b", 8: "0o", 16: "0x"}
_INFINITY = re.compile(r"[+-]?(inf|infinity)", re.IGNORECASE)


def parse_integer(text: str, kind: NumericKind, base: int = 10) -> int:
    """Parse an integer string for a fixed-width integer kind.

    Only ASCII digits and letters are accepted, with an optional sign for
    signed kinds. Base 0 infers the base from a ``0x``, ``0o`` or ``0b``
    prefix (a bare leading zero means octal) and allows underscores between
    digits. Any other base rejects prefixes.

    Args:
        text: String to parse
        kind: Target integer kind
        base: Numeric base, 2 to 36, or 0 to infer it

    Returns:
        The parsed value.

    Raises:
        ValueError: If the text is not a valid integer in the base
        OverflowError: If the value does not fit the kind

    Example:
        >>> parse_integer("BeEf", INT64, 16)
        48879
        >>> parse_integer("-1", UINT8)
        Traceback (most recent call last):
        ...
        ValueError: invalid syntax for uint8: '-1'
    """
    sign, body = "", text
    if body[:1] in ("+", "-"):
        sign, body = body[0], body[1:]
    if sign and not kind.signed:
        raise ValueError(f"invalid syntax for {kind.name}: {text!r}")

    if base == 0:
        if not _PREFIXED_DIGITS.fullmatch(body):
            raise ValueError(f"invalid syntax for {kind.name}: {text!r}")
        if len(body) > 1 and body[0] == "0" and body[1].isdigit():
            value = int(body, 8)
        else:
            value = int(body, 0)
    else:
        if not _PLAIN_DIGITS.fullmatch(body) or body[:2].lower() == _BASE_PREFIXES.get(base):
            raise ValueError(f"invalid syntax for {kind.name}: {text!r}")
        value = int(body, base)

    if sign == "-":
        value = -value
    if not kind.fits(value):
        raise OverflowError(f"value out of range for {kind.name}: {text!r}")
    return value


def parse_float(text: str, kind: NumericKind) -> float:
    """Parse a float string for a float kind.

    Surrounding whitespace and underscores are rejected. A finite literal
    that overflows to infinity, in float64 or after narrowing to float32, is
    out of range.

    Raises:
        ValueError: If the text is not a valid float literal
        OverflowError: If the value overflows the kind
    """
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid syntax for {kind.name}: {text!r}")
    value = float(text)
    if math.isinf(value) and not _INFINITY.fullmatch(text):
        raise OverflowError(f"value out of range for {kind.name}: {text!r}")
    if kind is FLOAT32:
        narrowed = kind.convert(value)
        if math.isinf(narrowed) and not math.isinf(value):
            raise OverflowError(f"value out of range for {kind.name}: {text!r}")
        value = narrowed
    return value


def coerce_integer(
    ctx: RuleContext,
    item: Input,
    kind: NumericKind,
    *,
    strict: bool = False,
    base: int = 10,
    rounding: Rounding = Rounding.NONE,
) -> int | Violation:
    """Convert a classified input to an integer of the given kind.

    A Python int is the exact type for every integer kind and only needs a
    range check. Fixed-width integers must survive a round trip. Floats are
    rounded with the rounding policy; with no policy, a float more than
    ROUNDING_TOLERANCE away from an integer is a type error. Strings are
    parsed in the configured base. In strict mode only a Python int or an
    integer of the kind's exact width is accepted.

    Returns:
        The integer value, or a TYPE or RANGE violation.
    """
    if item.kind in (InputKind.NATIVE, InputKind.INTEGER):
        if strict and item.numeric is not None and item.numeric.shape != kind.shape:
            return ctx.type_violation(kind.name, item.type_name)
        if not kind.fits(item.value):
            return ctx.range_violation(kind.name)
        return item.value

    if strict:
        return ctx.type_violation(kind.name, item.type_name)

    if item.kind is InputKind.FLOAT:
        value = item.value
        if math.isnan(value):
            return ctx.type_violation(kind.name, item.type_name)
        if math.isinf(value):
            return ctx.range_violation(kind.name)
        rounded = round_integral(value, rounding)
        if rounding is Rounding.NONE and abs(rounded - value) > ROUNDING_TOLERANCE:
            return ctx.type_violation(kind.name, item.type_name)
        if not kind.fits(rounded):
            return ctx.range_violation(kind.name)
        return rounded

    if item.kind is InputKind.STRING:
        try:
            return parse_integer(item.value, kind, base)
        except OverflowError:
            return ctx.range_violation(kind.name)
        except ValueError:
            return ctx.type_violation(kind.name, item.type_name)

    return ctx.type_violation(kind.name, item.type_name)


def coerce_float(
    ctx: RuleContext,
    item: Input,
    kind: NumericKind,
    *,
    strict: bool = False,
) -> float | Violation:
    """Convert a classified input to a float of the given kind.

    A float input must be exactly representable in the kind, so a float64
    value with more precision than float32 is out of range for Float32.
    Integers must convert to the kind and back without change. Strings are
    parsed as float literals. In strict mode only a Python float or a float
    of the kind's exact width is accepted.

    Returns:
        The float value, or a TYPE or RANGE violation.
    """
    if item.kind in (InputKind.NATIVE, InputKind.FLOAT):
        if strict and item.kind is InputKind.FLOAT and item.numeric.shape != kind.shape:
            return ctx.type_violation(kind.name, item.type_name)
        if not kind.fits(item.value):
            return ctx.range_violation(kind.name)
        return kind.convert(item.value)

    if strict:
        return ctx.type_violation(kind.name, item.type_name)

    if item.kind is InputKind.INTEGER:
        try:
            value = kind.convert(float(item.value))
        except OverflowError:
            return ctx.range_violation(kind.name)
        if math.isinf(value) or int(value) != item.value:
            return ctx.range_violation(kind.name)
        return value

    if item.kind is InputKind.STRING:
        try:
            return parse_float(item.value, kind)
        except OverflowError:
            return ctx.range_violation(kind.name)
        except ValueError:
            return ctx.type_violation(kind.name, item.type_name)

    return ctx.type_violation(kind.name, item.type_name)


def format_integer(value: int, base: int = 10) -> str:
    """Format an integer in a base from 2 to 36 using lowercase digits.

    Base 0 formats in base 10.

    Example:
        >>> format_integer(48879, 16)
        'beef'
        >>> format_integer(-5, 2)
        '-101'
    """
    if base in (0, 10):
        return str(value)
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, remainder = divmod(value, base)
        digits.append(_DIGITS[remainder])
    return sign + "".join(reversed(digits))


def format_float(
    value: float,
    kind: NumericKind,
    *,
    fixed: int | None = None,
    precision: int | None = None,
) -> str:
    """Format a float for a text output.

    Args:
        value: Value to format
        kind: Float kind, which sets the default number of significant digits
            (15 for float64, 7 for float32)
        fixed: Exact number of decimal places, zero-padded
        precision: Maximum number of decimal places, trailing zeros trimmed.
            Ignored when ``fixed`` is set.

    Example:
        >>> format_float(123.456, FLOAT64, precision=2)
        '123.46'
        >>> format_float(100.0, FLOAT64, precision=2)
        '100'
        >>> format_float(1.5, FLOAT64, fixed=3)
        '1.500'
    """
    if fixed is not None:
        return f"{value:.{fixed}f}"
    if precision is not None:
        text = f"{value:.{precision}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    digits = 7 if kind is FLOAT32 else 15
    return format(value, f".{digits}g")
