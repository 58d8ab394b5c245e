"""Duration units and human-readable elapsed-time rendering.

All elapsed values are integer nanosecond counts. Fixed units truncate toward
zero (a duration cast); ``AUTOMATIC`` picks the largest unit whose threshold
the value reaches.
"""

from enum import Enum

from beartype import beartype

NS_IN_US = 1_000
NS_IN_MS = NS_IN_US * 1_000
NS_IN_S = NS_IN_MS * 1_000
NS_IN_MIN = 60 * NS_IN_S
NS_IN_HR = 60 * NS_IN_MIN


class DurationUnit(Enum):
    """Display granularity for an elapsed time.

    Each member's value is ``(suffix, nanoseconds per unit)``. ``AUTOMATIC``
    has neither; its unit is chosen per value by :func:`select_unit`.
    """

    NANOSECONDS = ("ns", 1)
    MICROSECONDS = ("us", NS_IN_US)
    MILLISECONDS = ("ms", NS_IN_MS)
    SECONDS = ("s", NS_IN_S)
    MINUTES = ("m", NS_IN_MIN)
    HOURS = ("h", NS_IN_HR)
    AUTOMATIC = ("", 0)

    @property
    def suffix(self) -> str:
        if self is DurationUnit.AUTOMATIC:
            raise ValueError("AUTOMATIC has no fixed suffix; use format_automatic()")
        return self.value[0]

    @property
    def nanoseconds(self) -> int:
        if self is DurationUnit.AUTOMATIC:
            raise ValueError("AUTOMATIC has no fixed scale; use select_unit()")
        return self.value[1]


# (exclusive upper bound in ns, unit), strictly increasing
_AUTOMATIC_THRESHOLDS: tuple[tuple[int, DurationUnit], ...] = (
    (NS_IN_US, DurationUnit.NANOSECONDS),
    (NS_IN_MS, DurationUnit.MICROSECONDS),
    (NS_IN_S, DurationUnit.MILLISECONDS),
    (NS_IN_MIN, DurationUnit.SECONDS),
    (NS_IN_HR, DurationUnit.MINUTES),
)


def truncating_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero (``//`` floors)."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


@beartype
def select_unit(elapsed_ns: int) -> DurationUnit:
    """Pick the display unit for ``elapsed_ns`` (negative values give ns)."""
    for upper, unit in _AUTOMATIC_THRESHOLDS:
        if elapsed_ns < upper:
            return unit
    return DurationUnit.HOURS


@beartype
def format_automatic(elapsed_ns: int) -> str:
    """Render ``elapsed_ns`` in the unit chosen by :func:`select_unit`.

    Sub-microsecond values are shown as an integer count; everything else is
    the floating-point quotient with six decimals, e.g. ``"1.500000 us"``.
    """
    unit = select_unit(elapsed_ns)
    if unit is DurationUnit.NANOSECONDS:
        return f"{elapsed_ns} {unit.suffix}"
    return f"{elapsed_ns / float(unit.nanoseconds):f} {unit.suffix}"


@beartype
def format_fixed(elapsed_ns: int, unit: DurationUnit) -> str:
    """Render ``elapsed_ns`` truncated into a fixed ``unit``, e.g. ``"3 s"``."""
    return f"{truncating_div(elapsed_ns, unit.nanoseconds)} {unit.suffix}"


@beartype
def format_duration(elapsed_ns: int, unit: DurationUnit = DurationUnit.AUTOMATIC) -> str:
    if unit is DurationUnit.AUTOMATIC:
        return format_automatic(elapsed_ns)
    return format_fixed(elapsed_ns, unit)
