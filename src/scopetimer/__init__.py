"""scopetimer: In-process timing of calls and code regions with reports.

Provides:
- ScopedTimer: Times one call and writes a formatted report on finish
- BlockTimer: Manually bounded timer (mark_end / emit) for arbitrary regions
- RepeatedRunHarness: Runs a callable N times; min/max/median/mean/total
- TimerSettings / AggregateSettings: Immutable per-measurement configuration
- DurationUnit: Fixed or automatic display granularity
- render_template: Placeholder substitution for report templates
- LoggerSink / setup_logging: Send reports through loguru

Usage:
    from scopetimer import AggregateSettings, RepeatedRunHarness, ScopedTimer, TimerSettings

    with ScopedTimer(TimerSettings("fib"), fibonacci, 30) as timer:
        value = timer.result(int)

    with RepeatedRunHarness(10, AggregateSettings("foo"), foo, 1, 2) as bench:
        spread = bench.max() - bench.min()
"""

from scopetimer._errors import (
    ResultIndexError,
    ResultTypeError,
    ScopeTimerError,
    TimerStateError,
)
from scopetimer._format import PLACEHOLDERS, format_report, render_template
from scopetimer._harness import AggregateResult, RepeatedRunHarness, Sample
from scopetimer._logging import LoggerSink, setup_logging
from scopetimer._settings import (
    DEFAULT_FORMAT,
    AggregateSettings,
    CallSite,
    OutputSink,
    TimerSettings,
)
from scopetimer._timer import BlockTimer, CapturedResult, ScopedTimer
from scopetimer._units import (
    DurationUnit,
    format_automatic,
    format_duration,
    format_fixed,
    select_unit,
)

__all__ = [
    "DEFAULT_FORMAT",
    "PLACEHOLDERS",
    "AggregateResult",
    "AggregateSettings",
    "BlockTimer",
    "CallSite",
    "CapturedResult",
    "DurationUnit",
    "LoggerSink",
    "OutputSink",
    "RepeatedRunHarness",
    "ResultIndexError",
    "ResultTypeError",
    "Sample",
    "ScopeTimerError",
    "ScopedTimer",
    "TimerSettings",
    "TimerStateError",
    "format_automatic",
    "format_duration",
    "format_fixed",
    "format_report",
    "render_template",
    "select_unit",
    "setup_logging",
]

__version__ = "0.1.0"
