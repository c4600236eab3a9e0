# utils/validators.py
import math
import re

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def non_empty(text) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)

    ok == False means parsing failed (or the value is NaN/inf) and value is None.
    """
    if x is None or isinstance(x, bool):
        return False, None
    try:
        val = float(x)
    except (TypeError, ValueError):
        return False, None
    if not math.isfinite(val):
        return False, None
    return True, val


def parse_float(x) -> float:
    """
    Strict parse to float; raises ValueError with a clear message on failure.
    """
    ok, val = try_parse_float(x)
    if not ok:
        raise ValueError(f"Could not parse '{x}' as a number.")
    return val  # type: ignore[return-value]


def non_negative_or_zero(x) -> float:
    """Parse `x`; anything missing, unparsable or negative counts as 0.0."""
    ok, val = try_parse_float(x)
    if not ok or val is None or val < 0:
        return 0.0
    return val


def is_strictly_positive_number(x) -> bool:
    """
    True iff x parses to a float and value > 0.
    """
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val > 0)


def is_month_string(value) -> bool:
    """True for a zero-padded `YYYY-MM` string."""
    return bool(value and _MONTH_RE.match(str(value)))
