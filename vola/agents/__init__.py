"""AI Agents package."""

from vola.agents.audit_agent import (
    AUDIT_RESPONSE_SCHEMA,
    SYSTEM_INSTRUCTION,
    AuditError,
    FinancialAuditAgent,
    MalformedResponseError,
    NoResponseError,
    ServiceCallError,
    build_prompt,
    parse_audit_response,
)

__all__ = [
    "AUDIT_RESPONSE_SCHEMA",
    "SYSTEM_INSTRUCTION",
    "AuditError",
    "FinancialAuditAgent",
    "MalformedResponseError",
    "NoResponseError",
    "ServiceCallError",
    "build_prompt",
    "parse_audit_response",
]
