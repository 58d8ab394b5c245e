"""Repeated-run harness and aggregate statistics.

Design by Contract (fail-fast):
- runs MUST be >= 1 (crash otherwise)
- Runs execute strictly in order 0..runs-1 on the calling thread
- A failing run aborts the harness; no statistics over fewer than runs samples
- Statistics use a sorted copy; samples keep their original run order
- mean and even-sized medians truncate toward zero on integer nanoseconds
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from beartype import beartype
from loguru import logger

from scopetimer._errors import ResultIndexError
from scopetimer._settings import AggregateSettings
from scopetimer._timer import CapturedResult, ScopedTimer, _NonCopyable, write_report
from scopetimer._units import format_duration, truncating_div


@dataclass(frozen=True)
class Sample:
    """One run's elapsed time and captured return value."""

    elapsed_ns: int
    result: CapturedResult


@dataclass(frozen=True)
class AggregateResult:
    """Statistics over all samples of a harness, in nanoseconds.

    Attributes:
        min, max, median, mean, total: Aggregate elapsed times
        samples: Raw samples in original run order
    """

    min: int
    max: int
    median: int
    mean: int
    total: int
    samples: tuple[Sample, ...]

    @classmethod
    @beartype
    def from_samples(cls, samples: Sequence[Sample]) -> "AggregateResult":
        assert samples, "At least one sample is required"
        ordered = sorted(s.elapsed_ns for s in samples)
        count = len(ordered)
        middle = count // 2
        if count % 2:
            median = ordered[middle]
        else:
            median = truncating_div(ordered[middle - 1] + ordered[middle], 2)
        total = sum(ordered)
        return cls(
            min=ordered[0],
            max=ordered[-1],
            median=median,
            mean=truncating_div(total, count),
            total=total,
            samples=tuple(samples),
        )

    @property
    def runs(self) -> int:
        return len(self.samples)

    def as_dict(self) -> dict[str, int]:
        return {
            "runs": self.runs,
            "min": self.min,
            "max": self.max,
            "median": self.median,
            "mean": self.mean,
            "total": self.total,
        }


class RepeatedRunHarness(_NonCopyable):
    """Runs a callable N times and reports the mean elapsed time.

    Args:
        runs: Number of runs (MUST be >= 1), fixed at construction
        settings: AggregateSettings; each run uses get_child_settings()
        function: Callable to measure
        *args, **kwargs: Forwarded to every call

    Example:
        with RepeatedRunHarness(10, AggregateSettings("foo"), foo, 1, 2) as bench:
            print(bench.median(), bench.result(0))
        # one "[foo] ... took: <mean>" line printed here

    The aggregate report's ``{result}`` is always the mean. min, max and
    median are only available through the accessors.
    """

    @beartype
    def __init__(
        self,
        runs: int,
        settings: AggregateSettings,
        function: Callable[..., Any],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        assert runs >= 1, f"Run count must be positive: {runs}"
        self._settings = settings
        self._finished = False

        child_settings = settings.get_child_settings()
        samples: list[Sample] = []
        for _ in range(runs):
            with ScopedTimer(child_settings, function, *args, **kwargs) as timer:
                samples.append(Sample(timer.elapsed(), timer.captured))

        self._aggregate = AggregateResult.from_samples(samples)
        logger.debug(
            f"[{settings.name}] completed {runs} runs: "
            f"mean={self._aggregate.mean} ns, total={self._aggregate.total} ns"
        )

    @property
    def settings(self) -> AggregateSettings:
        return self._settings

    @property
    def runs(self) -> int:
        return self._aggregate.runs

    @property
    def aggregate(self) -> AggregateResult:
        return self._aggregate

    @property
    def samples(self) -> tuple[Sample, ...]:
        return self._aggregate.samples

    def result(self, index: int, expected_type: type | tuple[type, ...] | None = None) -> Any:
        """Return the ``index``-th run's value, in original run order."""
        if not 0 <= index < self.runs:
            raise ResultIndexError(
                f"[{self._settings.name}] result index {index} out of range "
                f"for {self.runs} runs"
            )
        return self._aggregate.samples[index].result.get(expected_type)

    def min(self) -> int:
        return self._aggregate.min

    def max(self) -> int:
        return self._aggregate.max

    def median(self) -> int:
        return self._aggregate.median

    def mean(self) -> int:
        return self._aggregate.mean

    def total(self) -> int:
        return self._aggregate.total

    def log_summary(self) -> None:
        """Log every statistic, rendered in the configured unit, via loguru."""
        unit = self._settings.unit
        stats = self._aggregate.as_dict()
        runs = stats.pop("runs")
        rendered = ", ".join(f"{key}={format_duration(value, unit)}" for key, value in stats.items())
        logger.info(f"[{self._settings.name}] {runs} runs: {rendered}")

    def finish(self) -> None:
        """Emit the aggregate report (if ``show_output``); later calls do nothing."""
        if self._finished:
            return
        self._finished = True
        if self._settings.show_output:
            write_report(self._settings, format_duration(self._aggregate.mean, self._settings.unit))

    close = finish

    def __enter__(self) -> "RepeatedRunHarness":
        return self

    def __exit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type is None:
            self.finish()
