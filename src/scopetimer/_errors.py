"""Exception types raised by scopetimer.

Contract violations on constructor arguments fail fast with ``AssertionError``
(and beartype violations for wrong types). The classes below cover the
reportable failures of a completed measurement.
"""


class ScopeTimerError(Exception):
    """Base class for all scopetimer errors."""


class ResultIndexError(ScopeTimerError, IndexError):
    """Requested per-run result index is outside ``0..runs-1``."""


class ResultTypeError(ScopeTimerError, TypeError):
    """Captured result is not an instance of the requested type."""


class TimerStateError(ScopeTimerError, RuntimeError):
    """Manual timer queried or emitted before its end point was marked."""
