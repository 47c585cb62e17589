"""
Data Models Package

All data flowing through Vola Auditor conforms to these pydantic schemas.
"""

from vola.models.audit import (
    AuditResult,
    CategorySpend,
    HistoryEntry,
    LeakageItem,
    TrendPoint,
)
from vola.models.events import (
    AppEvent,
    AppEventBuilder,
    AppEventType,
    EventSeverity,
)
from vola.models.transaction import Transaction

__all__ = [
    # Audit models
    "AuditResult",
    "CategorySpend",
    "HistoryEntry",
    "LeakageItem",
    "TrendPoint",
    # Event models
    "AppEvent",
    "AppEventBuilder",
    "AppEventType",
    "EventSeverity",
    # Ledger
    "Transaction",
]
