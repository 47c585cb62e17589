"""Presentation helpers: formatting rules and chart builders."""

from vola.presentation.charts import build_category_donut, build_trend_chart
from vola.presentation.formatting import (
    BURN_RATE_CRITICAL_THRESHOLD,
    CHART_COLORS,
    StatusBadge,
    VerdictBand,
    burn_rate_label,
    flow_label,
    format_amount,
    format_score,
    history_label,
    system_status,
    transaction_rows,
    verdict_band,
)

__all__ = [
    "BURN_RATE_CRITICAL_THRESHOLD",
    "CHART_COLORS",
    "StatusBadge",
    "VerdictBand",
    "build_category_donut",
    "build_trend_chart",
    "burn_rate_label",
    "flow_label",
    "format_amount",
    "format_score",
    "history_label",
    "system_status",
    "transaction_rows",
    "verdict_band",
]
