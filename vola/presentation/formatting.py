"""
Display formatting for audit results and transactions.

Pure functions only, so the Streamlit page stays thin and these rules
can be tested without a browser.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from vola.models.audit import HistoryEntry
from vola.models.transaction import Transaction


BURN_RATE_CRITICAL_THRESHOLD = 40.0

CHART_COLORS = ["#4facfe", "#00f2fe", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"]


@dataclass(frozen=True)
class VerdictBand:
    label: str
    color: str


def verdict_band(score: float) -> VerdictBand:
    """Map a verdict score to its display band."""
    if score > 80:
        return VerdictBand("Excellent", "#34d399")
    if score > 60:
        return VerdictBand("Good", "#38bdf8")
    if score > 40:
        return VerdictBand("Fair", "#facc15")
    return VerdictBand("Critical", "#f43f5e")


def burn_rate_label(burn_rate: float) -> str:
    """CRITICAL above 40% burn, EFFICIENT otherwise."""
    return "CRITICAL" if burn_rate > BURN_RATE_CRITICAL_THRESHOLD else "EFFICIENT"


def format_amount(amount: Optional[Decimal]) -> str:
    """Signed amount with two decimals: ``+2500.00`` / ``-7.50``."""
    if amount is None:
        return ""
    try:
        quantized = amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        # Too many digits to show to the cent
        quantized = amount
    return f"+{quantized}" if amount > 0 else str(quantized)


def format_score(score: float) -> str:
    """Scores are shown without a trailing .0 when whole."""
    return f"{score:g}" if float(score).is_integer() else f"{score:.1f}"


def flow_label(transaction: Transaction) -> str:
    """IN for inflows, OUT for outflows, blank when there is no amount."""
    if transaction.amount is None:
        return ""
    return "IN" if transaction.is_inflow else "OUT"


def transaction_rows(transactions: list[Transaction]) -> list[dict]:
    """Rows for the read-only transaction table."""
    return [
        {
            "Date": t.date or "",
            "Description": t.description or "",
            "Category": t.category or "",
            "Flow": flow_label(t),
            "Amount": format_amount(t.amount),
        }
        for t in transactions
    ]


@dataclass(frozen=True)
class StatusBadge:
    label: str
    color: str
    problems: tuple[str, ...] = ()


def system_status(results: dict) -> StatusBadge:
    """
    Header badge from ``validate_all_settings()`` output.

    ONLINE only when every settings group is valid; otherwise the
    per-group error messages are carried along for display.
    """
    problems = tuple(
        str(value) for key, value in results.items() if key.endswith("_error")
    )
    if problems or not all(v for k, v in results.items() if not k.endswith("_error")):
        return StatusBadge("DEGRADED", "#f43f5e", problems)
    return StatusBadge("ONLINE", "#34d399")


def history_label(entry: HistoryEntry) -> str:
    """One-line summary of a past audit for the history panel."""
    stamp = entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
    return (
        f"{stamp} · Verdict: {format_score(entry.result.vola_verdict_score)}"
        f" · {entry.result.burn_rate_percentage:.0f}% Burn"
    )
