"""Loguru integration: route reports into the application log."""

import sys
from pathlib import Path

from beartype import beartype
from loguru import logger


class LoggerSink:
    """Output sink that forwards each report line to loguru.

    Records are logged from the sink itself, so their location is
    ``scopetimer._logging`` rather than the measured code; the report line
    carries the call site.

    Usage:
        settings = TimerSettings("query", output_sink=LoggerSink("DEBUG"))
    """

    @beartype
    def __init__(self, level: str = "INFO") -> None:
        self.level = level
        self._buffer = ""

    @beartype
    def write(self, text: str) -> int:
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        for line in lines:
            if line:
                logger.log(self.level, line)
        return len(text)

    def flush(self) -> None:
        if self._buffer:
            logger.log(self.level, self._buffer)
            self._buffer = ""


@beartype
def setup_logging(log_file: Path | None = None, level: str = "INFO") -> None:
    """Configure the global loguru logger.

    Args:
        log_file: Optional file path for an additional rotating sink.
        level: Minimum log level (string understood by loguru).
    """
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level, rotation="10 MB", retention="7 days")
