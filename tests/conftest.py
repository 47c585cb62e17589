"""
Shared fixtures.

No test talks to Gemini: the agent is given a FakeGeminiModel that
replays a canned reply and records every prompt it was sent.
"""

import json
from typing import Optional

import pytest

from vola.agents import FinancialAuditAgent
from vola.config import GeminiSettings
from vola.events import EventLogger
from vola.history import AuditHistoryStore
from vola.models.audit import AuditResult
from vola.orchestrator import SAMPLE_CSV, AuditSession
from vola.services.storage import InMemoryStorage


SAMPLE_REPLY = {
    "burnRatePercentage": 62.4,
    "volaVerdictScore": 41,
    "assetAccumulationSummary": "Deployed $200.00 into Coinbase. Capital, not spend.",
    "detailedReasoning": "**Burn is high.** The Apple Store purchase dominates outflow.",
    "leakageItems": [
        {
            "item": "Uber Eats",
            "reason": "Frictionless delivery markup vs home cooking",
            "alternative": "Batch-cook twice a week to cut delivery spend by 70%",
        },
        {
            "item": "Starbucks",
            "reason": "Daily high-margin coffee",
            "alternative": "Switch to bulk-buy coffee to reduce cost by 85%",
        },
    ],
    "categorySpending": [
        {"category": "Tech", "total": 1200.0},
        {"category": "Entertainment", "total": 60.0},
        {"category": "Gas", "total": 50.0},
        {"category": "Dining", "total": 45.2},
    ],
}


class FakeResponse:
    """Mimics the ``text`` property of a Gemini response."""

    def __init__(self, text: Optional[str] = None, blocked: bool = False):
        self._text = text
        self._blocked = blocked

    @property
    def text(self):
        if self._blocked:
            raise ValueError("The response has no parts (finish_reason: SAFETY)")
        return self._text


class FakeGeminiModel:
    """Stand-in for ``genai.GenerativeModel``."""

    def __init__(
        self,
        text: Optional[str] = None,
        error: Optional[Exception] = None,
        blocked: bool = False,
    ):
        self.text = text
        self.error = error
        self.blocked = blocked
        self.prompts: list[str] = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text, blocked=self.blocked)


@pytest.fixture
def sample_reply_text() -> str:
    return json.dumps(SAMPLE_REPLY)


@pytest.fixture
def sample_result() -> AuditResult:
    return AuditResult.model_validate(SAMPLE_REPLY)


@pytest.fixture
def event_logger() -> EventLogger:
    return EventLogger()


@pytest.fixture
def gemini_settings() -> GeminiSettings:
    return GeminiSettings(api_key="test-key", model_name="gemini-test")


@pytest.fixture
def fake_model(sample_reply_text) -> FakeGeminiModel:
    return FakeGeminiModel(text=sample_reply_text)


@pytest.fixture
def agent(gemini_settings, fake_model, event_logger) -> FinancialAuditAgent:
    return FinancialAuditAgent(
        settings=gemini_settings,
        model=fake_model,
        event_logger=event_logger,
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def history(storage, event_logger) -> AuditHistoryStore:
    return AuditHistoryStore(storage, event_logger=event_logger)


@pytest.fixture
def session(agent, history, event_logger) -> AuditSession:
    return AuditSession(
        agent=agent,
        history=history,
        event_logger=event_logger,
        csv_text=SAMPLE_CSV,
    )
