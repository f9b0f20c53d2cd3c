"""Unit formatting for benchmark measurements.

Converts raw numeric measurements reported by the benchmark backend
into display strings:

- :func:`format_count` — operation and allocation counts with
  thousands grouping (``1234567`` → ``"1,234,567"``)
- :func:`format_duration` — nanosecond durations scaled to the
  largest fitting unit (``1333`` → ``"1.33 μs"``)
- :func:`format_bytes` — byte sizes scaled by 1024 up to GB
  (``1048576`` → ``"1.00 MB"``)
- :func:`format_microseconds` — fixed-unit latency chart labels

All functions are pure: no locale lookup, no hidden state. Grouping
always follows ``en-US`` conventions (comma separator) so output is
stable across machines.

Error contract:
    Formatters raise ``ValueError`` for input they cannot represent
    (negative durations, NaN, sizes of 1024 GB and above). Callers
    rendering untrusted backend data are expected to catch it and
    show :data:`PLACEHOLDER` instead (see
    :func:`core.normalizer.to_display_row`).

Example:
    >>> format_count(750000)
    '750,000'
    >>> format_duration(999)
    '999 ns'
    >>> format_duration(1000)
    '1.00 μs'
    >>> format_bytes(0)
    '0 B'
    >>> format_bytes(1024)
    '1.00 KB'
"""

import math


PLACEHOLDER: str = "-"
"""Display value for measurements that are unavailable (failed or malformed)."""

# ---------------------------------------------------------------------------
# Unit tables
# ---------------------------------------------------------------------------

_DURATION_TIERS: tuple[tuple[int, str], ...] = (
    (1_000_000_000, "s"),
    (1_000_000, "ms"),
    (1_000, "μs"),
)
"""(nanoseconds per unit, suffix), largest first. Below the last tier: ns."""

_BYTE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB")

_BYTES_PER_STEP: int = 1024


# ---------------------------------------------------------------------------
# Input checks
# ---------------------------------------------------------------------------


def _require_finite(value: float, name: str) -> None:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


def _require_non_negative(value: float, name: str) -> None:
    _require_finite(value, name)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value!r}")


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_count(n: float) -> str:
    """Format a count with thousands grouping and no fractional digits.

    Integers are formatted exactly, without a round-trip through
    ``float``, so arbitrarily large values keep every digit. Floats
    are truncated toward zero: the integer part shown is always the
    integer part of the input (``749999.9`` → ``"749,999"``).

    Args:
        n: Count to format (ops/sec, allocations per op).

    Returns:
        Grouped integer string, e.g. ``"1,234,567"``.

    Raises:
        ValueError: If ``n`` is NaN or infinite.

    Example:
        >>> format_count(1234567)
        '1,234,567'
        >>> format_count(500000.75)
        '500,000'
    """
    if isinstance(n, int):
        return f"{n:,}"
    _require_finite(n, "count")
    return f"{math.trunc(n):,}"


def format_duration(ns: float) -> str:
    """Format a nanosecond duration using the largest fitting unit.

    Tiers (lower bound inclusive on the larger unit):

    ============================  =========================
    Input range (ns)              Output
    ============================  =========================
    ``< 1_000``                   whole nanoseconds, ``ns``
    ``< 1_000_000``               2 decimals, ``μs``
    ``< 1_000_000_000``           2 decimals, ``ms``
    otherwise                     2 decimals, ``s``
    ============================  =========================

    Args:
        ns: Duration in nanoseconds.

    Returns:
        Human-readable duration, e.g. ``"1.33 μs"``.

    Raises:
        ValueError: If ``ns`` is negative, NaN or infinite.

    Example:
        >>> format_duration(999_999)
        '1000.00 μs'
        >>> format_duration(1_000_000)
        '1.00 ms'
    """
    _require_non_negative(ns, "duration")
    for divisor, unit in _DURATION_TIERS:
        if ns >= divisor:
            return f"{ns / divisor:.2f} {unit}"
    return f"{ns:.0f} ns"


def format_bytes(num_bytes: float) -> str:
    """Format a byte size in B, KB, MB or GB (base 1024).

    Zero is rendered as the literal ``"0 B"``. Any other value is
    divided by 1024 until it is below 1024, and shown with two
    decimals in the reached unit.

    Args:
        num_bytes: Size in bytes.

    Returns:
        Human-readable size, e.g. ``"1.00 MB"``.

    Raises:
        ValueError: If ``num_bytes`` is negative, non-finite, or
            1024 GB or larger (no unit beyond GB is supported).

    Example:
        >>> format_bytes(1536)
        '1.50 KB'
    """
    _require_non_negative(num_bytes, "byte count")
    if num_bytes == 0:
        return "0 B"

    value: float = float(num_bytes)
    unit_index: int = 0
    while value >= _BYTES_PER_STEP and unit_index < len(_BYTE_UNITS) - 1:
        value /= _BYTES_PER_STEP
        unit_index += 1

    if value >= _BYTES_PER_STEP:
        raise ValueError(
            f"byte count {num_bytes!r} exceeds the largest supported unit "
            f"({_BYTE_UNITS[-1]})"
        )

    return f"{value:.2f} {_BYTE_UNITS[unit_index]}"


def format_microseconds(us: float) -> str:
    """Format a latency chart value, always in microseconds.

    Unlike :func:`format_duration`, the unit never adapts: the
    latency chart axis is fixed to microseconds.

    Example:
        >>> format_microseconds(1.333)
        '1.33 μs'
    """
    _require_finite(us, "latency")
    return f"{us:.2f} μs"
