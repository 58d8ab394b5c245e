"""Single measurements: a callable-bound timer and a manually bounded one.

Design by Contract:
- The clock is read immediately before and after the measured call
- A failing callable propagates unchanged; no timer object is produced
- A report is written only on explicit finish/emit or a clean ``with`` exit
- Timers are not copyable: a measurement's start point and call site are unique
"""

from collections.abc import Callable
from typing import Any, NoReturn

import psutil
from beartype import beartype
from loguru import logger

from scopetimer._errors import ResultTypeError, TimerStateError
from scopetimer._format import format_report
from scopetimer._settings import TimerSettings
from scopetimer._units import format_duration


def _rss() -> int:
    return psutil.Process().memory_info().rss


def write_report(settings: TimerSettings, result_text: str) -> None:
    """Format one report line and write it, newline-terminated, to the sink."""
    sink = settings.resolve_sink()
    sink.write(format_report(settings, result_text) + "\n")
    flush = getattr(sink, "flush", None)
    if flush is not None:
        flush()


class CapturedResult:
    """Holds one return value of statically unknown type.

    ``None`` stands for a callable that returned nothing. Retrieval with an
    expected type is checked; a mismatch raises ``ResultTypeError`` and
    leaves the stored value untouched.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any) -> None:
        self._value = value

    @property
    def has_value(self) -> bool:
        return self._value is not None

    @beartype
    def get(self, expected_type: type | tuple[type, ...] | None = None) -> Any:
        if expected_type is not None and not isinstance(self._value, expected_type):
            expected = (
                expected_type.__name__
                if isinstance(expected_type, type)
                else " | ".join(t.__name__ for t in expected_type)
            )
            raise ResultTypeError(
                f"Captured result has type {type(self._value).__name__}, "
                f"not {expected}"
            )
        return self._value

    def __repr__(self) -> str:
        return f"CapturedResult({self._value!r})"


class _NonCopyable:
    def __copy__(self) -> NoReturn:
        raise TypeError(f"{type(self).__name__} cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        raise TypeError(f"{type(self).__name__} cannot be copied")

    def __reduce_ex__(self, protocol: Any) -> NoReturn:
        raise TypeError(f"{type(self).__name__} cannot be pickled")


class ScopedTimer(_NonCopyable):
    """Times one synchronous call made during construction.

    Args:
        settings: TimerSettings for this measurement
        function: Callable to measure
        *args, **kwargs: Forwarded to ``function``

    Example:
        with ScopedTimer(TimerSettings("parse"), parse, payload) as timer:
            tree = timer.result()
        # "[parse] app.py:12 in main took: 1.250000 ms" printed here

    Without ``with``, call ``finish()`` (or ``close()``) to emit the report;
    a timer that is never finished reports nothing.

    Design by Contract:
        - elapsed() is available as soon as the constructor returns
        - the report is emitted at most once
    """

    @beartype
    def __init__(
        self,
        settings: TimerSettings,
        function: Callable[..., Any],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        self._settings = settings
        self._finished = False
        self.memory_delta: int = 0

        start_memory = _rss() if settings.track_memory else 0
        clock = settings.clock
        self._start: int = clock()
        value = function(*args, **kwargs)
        self._end: int = clock()

        if settings.track_memory:
            self.memory_delta = _rss() - start_memory
        self._result = CapturedResult(value)

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    def elapsed(self) -> int:
        """Nanoseconds between the clock reads around the measured call."""
        return self._end - self._start

    def result(self, expected_type: type | tuple[type, ...] | None = None) -> Any:
        return self._result.get(expected_type)

    @property
    def captured(self) -> CapturedResult:
        return self._result

    def finish(self) -> None:
        """Emit the report (if ``show_output``); later calls do nothing."""
        if self._finished:
            return
        self._finished = True

        elapsed = self.elapsed()
        logger.debug(f"[{self._settings.name}] measured {elapsed} ns")
        if self._settings.show_output:
            write_report(self._settings, format_duration(elapsed, self._settings.unit))

    close = finish

    def __enter__(self) -> "ScopedTimer":
        return self

    def __exit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type is None:
            self.finish()


class BlockTimer(_NonCopyable):
    """Manually bounded timer for an arbitrary code region.

    Start is captured at construction, the end by ``mark_end()`` and the
    report is written by ``emit()``.

    Usage:
        timer = BlockTimer(TimerSettings("load"))
        rows = load_rows()
        timer.mark_end()
        timer.emit()

    Or as a context manager, which marks the end (unless already marked)
    and emits on a clean exit:
        with BlockTimer(TimerSettings("load")):
            rows = load_rows()

    Design by Contract:
        - mark_end() may be called repeatedly; the last call wins
        - elapsed()/emit() before any mark_end() raise TimerStateError
    """

    @beartype
    def __init__(self, settings: TimerSettings) -> None:
        self._settings = settings
        self._end: int | None = None
        self.memory_delta: int = 0
        self._start_memory = _rss() if settings.track_memory else 0
        self._start: int = settings.clock()

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    @property
    def is_marked(self) -> bool:
        return self._end is not None

    def mark_end(self) -> None:
        self._end = self._settings.clock()
        if self._settings.track_memory:
            self.memory_delta = _rss() - self._start_memory

    def elapsed(self) -> int:
        if self._end is None:
            raise TimerStateError(
                f"[{self._settings.name}] end point not marked; call mark_end() first"
            )
        return self._end - self._start

    def emit(self) -> None:
        """Write the report for the current end point (if ``show_output``)."""
        elapsed = self.elapsed()
        logger.debug(f"[{self._settings.name}] measured {elapsed} ns")
        if self._settings.show_output:
            write_report(self._settings, format_duration(elapsed, self._settings.unit))

    def __enter__(self) -> "BlockTimer":
        return self

    def __exit__(self, exc_type: Any, *args: Any) -> None:
        if self._end is None:
            self.mark_end()
        if exc_type is None:
            self.emit()
