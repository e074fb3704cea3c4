"""Reporting sinks for validation and lifecycle events.

A sink receives ``record(source, severity, message)`` calls. Reporting is
fire-and-forget: a failing sink is logged and never changes an outcome.
"""

from typing import Protocol, runtime_checkable

from rulegate.logging import get_logger
from rulegate.rules.base import Severity

logger = get_logger(__name__)


@runtime_checkable
class ReportingSink(Protocol):
    """Contract of an external observability collaborator."""

    def record(self, source: str, severity: Severity, message: str) -> None:
        ...


class LoggingSink:
    """Sink that writes events to a structlog logger."""

    _methods = {
        Severity.EXCEPTION: "error",
        Severity.WARNING: "warning",
        Severity.INFORMATION: "info",
    }

    def __init__(self, name: str = "rulegate.events"):
        self._logger = get_logger(name)

    def record(self, source: str, severity: Severity, message: str) -> None:
        log = getattr(self._logger, self._methods[Severity(severity)])
        log(message, source=source, severity=Severity(severity).value)


class NullSink:
    """Sink that discards every event."""

    def record(self, source: str, severity: Severity, message: str) -> None:
        pass


def report(sink: ReportingSink | None, source: str, severity: Severity, message: str) -> None:
    """Forward an event to a sink, containing any failure of the sink."""
    if sink is None:
        return
    try:
        sink.record(source, severity, message)
    except Exception:
        logger.warning("reporting_sink_failed", source=source, exc_info=True)
