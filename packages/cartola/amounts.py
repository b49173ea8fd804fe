"""Locale-ambiguous amount parsing.

Bank exports mix ``1.234,56`` (es-CL), ``1,234.56`` (en-US), bare thousands
groupings such as ``10.000`` and currency decorations like ``$ -5.990``. The
rules below pick the decimal separator from the shape of the string rather
than from a configured locale.

Sign handling is per branch: the decimal-comma and two-separator branches
re-apply the recorded sign to the parsed value as-is, while the
thousands-comma, dot-only and plain-digit branches take the absolute value
first and then re-apply the sign. Both yield the same result for every input
whose only ``-`` is the leading one; the difference is kept as-is because
downstream type assignment was tuned against it.
"""

from __future__ import annotations

import math
import re

_NON_NUMERIC_RE = re.compile(r"[^\d.,-]")
# Leading float prefix, the subset of JavaScript ``parseFloat`` that can occur
# once the string has been reduced to digits, separators and minus signs.
_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")


def _parse_float_prefix(text: str) -> float | None:
    match = _FLOAT_PREFIX_RE.match(text.strip())
    if match is None:
        return None
    return float(match.group(0))


def _signed(value: float | None, negative: bool, *, force_abs: bool) -> float:
    if value is None:
        return 0.0
    if force_abs:
        value = abs(value)
    return -value if negative else value


def parse_amount(raw: object) -> float:
    """Convert a raw amount cell into a signed float.

    Numeric inputs (already coerced by the file parser) are returned as
    floats. Strings follow the separator policy described in the module
    docstring; anything unparseable yields ``0.0``.
    """

    if isinstance(raw, bool) or raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
        return 0.0 if math.isnan(value) else value
    if not isinstance(raw, str):
        return 0.0

    cleaned = _NON_NUMERIC_RE.sub("", raw).strip()
    if not cleaned or cleaned == "-":
        return 0.0

    negative = cleaned.startswith("-")
    if negative:
        cleaned = cleaned[1:]

    has_comma = "," in cleaned
    has_dot = "." in cleaned

    if has_comma and has_dot:
        # The separator that appears last is the decimal separator.
        if cleaned.rfind(",") > cleaned.rfind("."):
            parts = cleaned.split(",")
            int_part = parts[0].replace(".", "")
        else:
            parts = cleaned.split(".")
            int_part = parts[0].replace(",", "")
        dec_part = parts[1] if len(parts) > 1 and parts[1] else "00"
        return _signed(_parse_float_prefix(f"{int_part}.{dec_part}"), negative, force_abs=False)

    if has_comma:
        if cleaned.count(",") == 1:
            int_part, dec_part = cleaned.split(",")
            if len(dec_part) <= 2:
                value = _parse_float_prefix(f"{int_part}.{dec_part or '00'}")
                return _signed(value, negative, force_abs=False)
        value = _parse_float_prefix(cleaned.replace(",", ""))
        return _signed(value, negative, force_abs=True)

    if has_dot:
        if cleaned.count(".") > 1:
            cleaned = cleaned.replace(".", "")
        elif len(cleaned[cleaned.rfind(".") + 1 :]) > 2:
            cleaned = cleaned.replace(".", "")

    return _signed(_parse_float_prefix(cleaned), negative, force_abs=True)


__all__ = ["parse_amount"]
