"""Structured event reporting for pipeline stages."""

import logging

from epub2cbz.models.result import ConversionEvent


class EventSink:
    """Collects pipeline events and mirrors them to a logger."""

    def __init__(self, logger: logging.Logger | None = None):
        self.events: list[ConversionEvent] = []
        self.logger = logger or logging.getLogger("epub2cbz")

    def bound(self, logger: logging.Logger) -> "EventSink":
        """Sink that logs through `logger` but records into the same event list."""
        sink = EventSink(logger)
        sink.events = self.events
        return sink

    def _emit(self, level: str, message: str, log_level: int) -> None:
        self.events.append(ConversionEvent(level=level, message=message))
        self.logger.log(log_level, message)

    def info(self, message: str) -> None:
        self._emit("info", message, logging.INFO)

    def warning(self, message: str) -> None:
        self._emit("warning", message, logging.WARNING)

    def error(self, message: str) -> None:
        self._emit("error", message, logging.ERROR)

    @property
    def warnings(self) -> list[str]:
        return [e.message for e in self.events if e.level == "warning"]
