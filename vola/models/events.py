"""
Application Event Models

Every significant action (an audit request, a history write, a failed
file read) is logged as a structured event.

DESIGN DECISION: Events only go to the structured log. They are not
persisted; the audit history is the only durable state.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AppEventType(str, Enum):
    """Types of events we log."""
    # Input
    CSV_LOADED = "csv_loaded"
    FILE_READ_FAILED = "file_read_failed"
    EMPTY_INPUT_REJECTED = "empty_input_rejected"
    CSV_PARSE_FAILED = "csv_parse_failed"

    # Audit call
    AUDIT_REQUESTED = "audit_requested"
    AUDIT_COMPLETED = "audit_completed"
    AUDIT_FAILED = "audit_failed"

    # History
    HISTORY_LOADED = "history_loaded"
    HISTORY_CORRUPT = "history_corrupt"
    HISTORY_RECORDED = "history_recorded"
    HISTORY_CLEARED = "history_cleared"
    STORAGE_UNAVAILABLE = "storage_unavailable"


class EventSeverity(str, Enum):
    """Severity level for events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AppEvent(BaseModel):
    """A single structured log event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AppEventType
    severity: EventSeverity = EventSeverity.INFO

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together the events of one audit cycle"
    )
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AppEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = AppEventBuilder.audit_requested(csv_bytes, correlation_id)
    """

    @staticmethod
    def csv_loaded(filename: str, size: int) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.CSV_LOADED,
            description=f"CSV loaded from file: {filename}",
            details={"filename": filename, "size_bytes": size},
        )

    @staticmethod
    def file_read_failed(filename: str, error_message: str) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.FILE_READ_FAILED,
            severity=EventSeverity.WARNING,
            description=f"Could not read uploaded file: {filename}",
            details={"filename": filename},
            error_message=error_message,
        )

    @staticmethod
    def empty_input_rejected(correlation_id: UUID) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.EMPTY_INPUT_REJECTED,
            severity=EventSeverity.WARNING,
            correlation_id=correlation_id,
            description="Audit triggered with an empty CSV buffer",
        )

    @staticmethod
    def csv_parse_failed(
        line_number: Optional[int],
        error_message: str,
        correlation_id: UUID,
    ) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.CSV_PARSE_FAILED,
            severity=EventSeverity.WARNING,
            correlation_id=correlation_id,
            description="CSV could not be parsed",
            details={"line_number": line_number},
            error_message=error_message,
        )

    @staticmethod
    def audit_requested(
        model_name: str,
        csv_length: int,
        correlation_id: Optional[UUID],
    ) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.AUDIT_REQUESTED,
            correlation_id=correlation_id,
            description=f"Audit requested from {model_name}",
            details={"model_name": model_name, "csv_length": csv_length},
        )

    @staticmethod
    def audit_completed(
        verdict_score: float,
        burn_rate: float,
        leakage_count: int,
        correlation_id: Optional[UUID],
    ) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.AUDIT_COMPLETED,
            correlation_id=correlation_id,
            description=f"Audit completed with verdict {verdict_score:g}",
            details={
                "verdict_score": verdict_score,
                "burn_rate": burn_rate,
                "leakage_count": leakage_count,
            },
        )

    @staticmethod
    def audit_failed(
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.AUDIT_FAILED,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Audit failed: {error_type}",
            details={"error_type": error_type},
            error_message=error_message,
        )

    @staticmethod
    def history_loaded(entry_count: int) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.HISTORY_LOADED,
            severity=EventSeverity.DEBUG,
            description=f"History loaded with {entry_count} entries",
            details={"entry_count": entry_count},
        )

    @staticmethod
    def history_corrupt(storage_key: str, error_message: str) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.HISTORY_CORRUPT,
            severity=EventSeverity.WARNING,
            description="Stored history is unreadable and was discarded",
            details={"storage_key": storage_key},
            error_message=error_message,
        )

    @staticmethod
    def history_recorded(
        entry_id: UUID,
        entry_count: int,
        evicted: int,
        correlation_id: Optional[UUID] = None,
    ) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.HISTORY_RECORDED,
            correlation_id=correlation_id,
            description="Audit saved to history",
            details={
                "entry_id": str(entry_id),
                "entry_count": entry_count,
                "evicted": evicted,
            },
        )

    @staticmethod
    def history_cleared(removed: int) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.HISTORY_CLEARED,
            description=f"History cleared ({removed} entries removed)",
            details={"removed": removed},
        )

    @staticmethod
    def storage_unavailable(directory: str, error_message: str) -> AppEvent:
        return AppEvent(
            event_type=AppEventType.STORAGE_UNAVAILABLE,
            severity=EventSeverity.WARNING,
            description="History storage unavailable, keeping history in memory only",
            details={"directory": directory},
            error_message=error_message,
        )
