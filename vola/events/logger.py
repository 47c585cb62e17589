"""
Event Logger

Every significant action in the system is logged as a structured event.
This provides traceability of each audit cycle (request, reply,
history write) tied together by a correlation ID.

The event logger:
- Is synchronous: the only suspension point in the app is the model call
- Never raises: a logging failure must not break an audit
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from vola.models.events import AppEvent, AppEventBuilder, EventSeverity


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog for JSON output.

    Safe to call more than once; the last level wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class EventLogger:
    """
    Central event logging service.

    Writes AppEvents to the structured log at the level matching
    their severity. Keeps the last events in memory so the UI and
    tests can inspect them.
    """

    def __init__(self, logger_name: str = "vola", keep_last: int = 100):
        self._logger = structlog.get_logger(logger_name)
        self._keep_last = keep_last
        self._recent: list[AppEvent] = []

    @property
    def recent_events(self) -> list[AppEvent]:
        """Most recent events, oldest first."""
        return list(self._recent)

    def log(self, event: AppEvent) -> None:
        """Log an event locally."""
        self._recent.append(event)
        del self._recent[:-self._keep_last]

        log_dict = event.to_log_dict()
        try:
            if event.severity == EventSeverity.ERROR:
                self._logger.error("app_event", **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning("app_event", **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug("app_event", **log_dict)
            else:
                self._logger.info("app_event", **log_dict)
        except Exception as e:
            # A broken log sink must not break the audit flow
            print(f"Warning: failed to write log event: {e}", file=sys.stderr)

    def log_csv_loaded(self, filename: str, size: int) -> None:
        self.log(AppEventBuilder.csv_loaded(filename=filename, size=size))

    def log_file_read_failed(self, filename: str, error_message: str) -> None:
        self.log(AppEventBuilder.file_read_failed(
            filename=filename,
            error_message=error_message,
        ))

    def log_empty_input(self, correlation_id: UUID) -> None:
        self.log(AppEventBuilder.empty_input_rejected(correlation_id))

    def log_csv_parse_failed(
        self,
        line_number: Optional[int],
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AppEventBuilder.csv_parse_failed(
            line_number=line_number,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_audit_requested(
        self,
        model_name: str,
        csv_length: int,
        correlation_id: Optional[UUID],
    ) -> None:
        self.log(AppEventBuilder.audit_requested(
            model_name=model_name,
            csv_length=csv_length,
            correlation_id=correlation_id,
        ))

    def log_audit_completed(
        self,
        verdict_score: float,
        burn_rate: float,
        leakage_count: int,
        correlation_id: Optional[UUID],
    ) -> None:
        self.log(AppEventBuilder.audit_completed(
            verdict_score=verdict_score,
            burn_rate=burn_rate,
            leakage_count=leakage_count,
            correlation_id=correlation_id,
        ))

    def log_audit_failed(
        self,
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        self.log(AppEventBuilder.audit_failed(
            error_type=error_type,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_history_loaded(self, entry_count: int) -> None:
        self.log(AppEventBuilder.history_loaded(entry_count))

    def log_history_corrupt(self, storage_key: str, error_message: str) -> None:
        self.log(AppEventBuilder.history_corrupt(
            storage_key=storage_key,
            error_message=error_message,
        ))

    def log_history_recorded(
        self,
        entry_id: UUID,
        entry_count: int,
        evicted: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AppEventBuilder.history_recorded(
            entry_id=entry_id,
            entry_count=entry_count,
            evicted=evicted,
            correlation_id=correlation_id,
        ))

    def log_history_cleared(self, removed: int) -> None:
        self.log(AppEventBuilder.history_cleared(removed))

    def log_storage_unavailable(self, directory: str, error_message: str) -> None:
        self.log(AppEventBuilder.storage_unavailable(
            directory=directory,
            error_message=error_message,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of each audit cycle.
    """
    return uuid4()
