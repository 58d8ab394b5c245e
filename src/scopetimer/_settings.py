"""Measurement settings and call-site capture.

Settings are immutable for the lifetime of a measurement. The call site is
captured when the settings object is built, so a report always points at the
code that configured the measurement, never at the report machinery.
"""

import dataclasses
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from scopetimer._units import DurationUnit

DEFAULT_FORMAT = "[{name}] {filename}:{row} in {function} took: {result}"

_PACKAGE = __name__.rpartition(".")[0]


@runtime_checkable
class OutputSink(Protocol):
    """Anything report lines can be written to (``sys.stdout``, ``StringIO``, ...)."""

    def write(self, text: str, /) -> Any: ...


def _is_internal(frame: Any) -> bool:
    module = frame.f_globals.get("__name__", "")
    filename = frame.f_code.co_filename
    # dataclass-generated __init__ of a settings object
    if filename == "<string>" and frame.f_code.co_name == "__init__":
        return isinstance(frame.f_locals.get("self"), TimerSettings)
    return module == _PACKAGE or module.startswith(_PACKAGE + ".")


@dataclass(frozen=True)
class CallSite:
    """Source location (file, line, enclosing function) of a measurement."""

    filename: str
    line: int
    function: str

    @classmethod
    def capture(cls) -> "CallSite":
        """Describe the innermost frame outside scopetimer itself."""
        frame = sys._getframe(1)
        while frame.f_back is not None and _is_internal(frame):
            frame = frame.f_back
        return cls(
            filename=frame.f_code.co_filename,
            line=frame.f_lineno,
            function=frame.f_code.co_name,
        )


@dataclass(frozen=True)
class TimerSettings:
    """Configuration for one measurement.

    Args:
        name: Label substituted for ``{name}`` (MUST be non-empty)
        format: Report template; see ``scopetimer.render_template``
        show_output: If False, no report is emitted (elapsed stays queryable)
        unit: Display granularity for ``{result}`` (default: automatic)
        output_sink: Destination with a ``write(str)`` method; None means
            the process's standard output, looked up at write time
        clock: Monotonic clock returning integer nanoseconds
        track_memory: If True, record the RSS delta around the measured call
        call_site: Where the measurement was configured; captured from the
            constructing frame when omitted

    Design by Contract:
        - name is non-empty
        - call_site is fixed once the settings object exists
    """

    name: str
    format: str = DEFAULT_FORMAT
    show_output: bool = True
    unit: DurationUnit = DurationUnit.AUTOMATIC
    output_sink: OutputSink | None = field(default=None, compare=False)
    clock: Callable[[], int] = field(default=time.perf_counter_ns, compare=False)
    track_memory: bool = False
    call_site: CallSite | None = None

    def __post_init__(self) -> None:
        assert self.name, "Timer name must be non-empty"
        assert self.output_sink is None or isinstance(self.output_sink, OutputSink), (
            f"Output sink must have a write() method: {self.output_sink!r}"
        )
        if self.call_site is None:
            object.__setattr__(self, "call_site", CallSite.capture())

    def resolve_sink(self) -> OutputSink:
        return self.output_sink if self.output_sink is not None else sys.stdout


@dataclass(frozen=True)
class AggregateSettings(TimerSettings):
    """Settings for a repeated-run harness.

    Args:
        child_output: If True, every individual run also emits its own
            report, independently of the aggregate's ``show_output``
    """

    child_output: bool = False

    def get_child_settings(self) -> TimerSettings:
        """Copy every timer field, overriding only output visibility."""
        values = {f.name: getattr(self, f.name) for f in dataclasses.fields(TimerSettings)}
        values["show_output"] = self.child_output
        return TimerSettings(**values)
