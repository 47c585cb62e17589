"""
Audit Result Models

The structured output of one financial audit, and the persisted
history record wrapping it.

DESIGN DECISION: Python attributes are snake_case, but the wire
names are the camelCase keys the model is asked to produce
(burnRatePercentage, volaVerdictScore, ...). Serialization always
uses the wire names so persisted history keeps one stable shape.

Scores are NOT range-checked. The remote schema asks for 0-100 and
we trust it for ranges. Structure and types ARE checked, and every
number must be finite.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    """Frozen model that accepts either attribute or wire names."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        # NaN and Infinity are not JSON and do not survive a history round trip
        allow_inf_nan=False,
    )


class LeakageItem(_WireModel):
    """Discretionary spend flagged as reducible."""

    item: str
    reason: str
    alternative: str = Field(
        ...,
        description="Actionable step to reduce this leakage"
    )


class CategorySpend(_WireModel):
    """Aggregated spend for one category."""

    category: str
    total: float


class AuditResult(_WireModel):
    """
    Result of one audit call.

    Produced atomically by the audit agent; never mutated.
    """

    burn_rate_percentage: float = Field(
        ...,
        alias="burnRatePercentage",
        description="Percentage of income spent (0-100)"
    )
    vola_verdict_score: float = Field(
        ...,
        alias="volaVerdictScore",
        description="Health score (0-100)"
    )
    asset_accumulation_summary: str = Field(
        ...,
        alias="assetAccumulationSummary",
    )
    detailed_reasoning: str = Field(
        ...,
        alias="detailedReasoning",
        description="Markdown summary of the audit"
    )
    leakage_items: list[LeakageItem] = Field(
        ...,
        alias="leakageItems",
    )
    category_spending: list[CategorySpend] = Field(
        ...,
        alias="categorySpending",
    )

    def to_wire(self) -> dict:
        """Dump using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryEntry(_WireModel):
    """
    A persisted audit.

    Wire shape: {"id", "timestamp", "data", "rawCsv"}.
    """

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=_utcnow)
    raw_csv: str = Field(..., alias="rawCsv")
    result: AuditResult = Field(..., alias="data")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        # raw CSV is stored exactly as the user supplied it
        str_strip_whitespace=False,
        allow_inf_nan=False,
    )


class TrendPoint(BaseModel):
    """One point of the health trend chart."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    score: float
    burn: float
