"""
Plotly chart builders for the audit page.

Each builder returns None when there is nothing worth plotting, so the
page can skip the chart instead of drawing an empty frame.
"""

from typing import Optional

import plotly.graph_objects as go

from vola.models.audit import AuditResult, TrendPoint
from vola.presentation.formatting import CHART_COLORS


def build_category_donut(result: AuditResult) -> Optional[go.Figure]:
    """Donut of spend per category, in the model's order."""
    if not result.category_spending:
        return None

    labels = [c.category for c in result.category_spending]
    values = [abs(c.total) for c in result.category_spending]
    colors = [CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(labels))]

    fig = go.Figure(
        go.Pie(
            labels=labels,
            values=values,
            hole=0.6,
            sort=False,
            marker={"colors": colors},
            textinfo="label+percent",
        )
    )
    fig.update_layout(
        showlegend=True,
        margin={"l": 10, "r": 10, "t": 10, "b": 10},
        height=320,
    )
    return fig


def build_trend_chart(points: list[TrendPoint]) -> Optional[go.Figure]:
    """
    Verdict score and burn rate over time, oldest to newest.

    Needs at least two audits to show a trend.
    """
    if len(points) < 2:
        return None

    x = [p.timestamp for p in points]
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=x,
            y=[p.score for p in points],
            mode="lines",
            name="Verdict",
            line={"color": CHART_COLORS[0], "width": 2},
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=[p.burn for p in points],
            mode="lines",
            name="Burn %",
            line={"color": CHART_COLORS[4], "width": 1, "dash": "dash"},
        )
    )
    fig.update_layout(
        margin={"l": 10, "r": 10, "t": 10, "b": 10},
        height=200,
        legend={"orientation": "h"},
    )
    return fig
