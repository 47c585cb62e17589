"""
Financial Audit Agent

DESIGN DECISION: The model is an opaque, fallible, non-deterministic
black box behind a stable contract:
    prompt + response schema in  ->  AuditResult or typed failure out

We never simulate or patch up its reasoning. One request per audit:
no retries, no streaming, no partial results.

CRITICAL BOUNDARIES:
- The model is ASKED (not forced) to follow the schema, so every
  reply is parsed and structurally validated before it is trusted.
- A reply with no text is a NoResponseError.
- A reply that is not JSON, or misses a mandatory field, is a
  MalformedResponseError.
"""

from typing import Any, Optional
from uuid import UUID

import google.generativeai as genai
from pydantic import ValidationError

from vola.config import GeminiSettings, get_settings
from vola.events import EventLogger
from vola.models.audit import AuditResult


SYSTEM_INSTRUCTION = """
Role: You are Vola, a strategic financial AI designed to automate "adulting" and accelerate financial independence.
Task: Analyze provided transaction logs.

Instructions:
1. Calculate the "Burn Rate": What percentage of income was spent immediately? (Total Spend / Total Income).
2. Identify "Leakage": Spot emotional or frictionless spending (e.g., dining out, excessive coffee, impulse tech buys, unused subscriptions).
   - Provide a specific reason WHY it's leakage (e.g., "Frequent high-margin retail spend vs home utility").
   - Suggest a concrete, "Actionable Alternative" to reduce or replace this spend (e.g., "Cancel unused subscriptions for immediate monthly savings" or "Switch to bulk-buy coffee to reduce cost by 85%").
3. The "Vola Verdict": Give a harsh but constructive score (0-100) on their financial health. 100 is perfect discipline.
4. Crypto/Asset Check: Acknowledge asset accumulation (like Coinbase, stocks, or gold) as "deploying capital" rather than "spending." Do not count these as Burn Rate expenses if possible, treat them as transfers to wealth.
5. Category Spending: Total the outflows per category.
6. Tone: Direct, data-driven, slightly futuristic, cold but helpful. No fluff.

Return the result strictly as a JSON object matching the provided schema.
"""

REQUIRED_FIELDS = [
    "burnRatePercentage",
    "leakageItems",
    "volaVerdictScore",
    "assetAccumulationSummary",
    "detailedReasoning",
    "categorySpending",
]

AUDIT_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "burnRatePercentage": {
            "type": "NUMBER",
            "description": "Percentage of income spent (0-100)",
        },
        "leakageItems": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "item": {"type": "STRING"},
                    "reason": {"type": "STRING"},
                    "alternative": {
                        "type": "STRING",
                        "description": "Actionable step to reduce this leakage",
                    },
                },
                "required": ["item", "reason", "alternative"],
            },
        },
        "volaVerdictScore": {
            "type": "NUMBER",
            "description": "Health score (0-100)",
        },
        "assetAccumulationSummary": {"type": "STRING"},
        "detailedReasoning": {
            "type": "STRING",
            "description": "Markdown summary of the audit",
        },
        "categorySpending": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "category": {"type": "STRING"},
                    "total": {"type": "NUMBER"},
                },
                "required": ["category", "total"],
            },
        },
    },
    "required": REQUIRED_FIELDS,
}


class AuditError(Exception):
    """Base exception for audit failures."""
    pass


class ServiceCallError(AuditError):
    """Network, authentication or any other failure calling the model."""
    pass


class NoResponseError(ServiceCallError):
    """The model returned no usable text."""

    def __init__(self, message: str = "No response from Vola."):
        super().__init__(message)


class MalformedResponseError(AuditError):
    """The model's reply was not JSON or broke the mandatory-field contract."""

    def __init__(self, message: str, raw_text: str = ""):
        self.raw_text = raw_text
        super().__init__(message)


def build_prompt(csv_text: str) -> str:
    """The user content sent alongside the system instruction."""
    return f"Analyze this CSV data:\n\n{csv_text}"


def parse_audit_response(text: Optional[str]) -> AuditResult:
    """
    Parse the model's reply into an AuditResult.

    Raises:
        NoResponseError: If the reply is empty
        MalformedResponseError: If the reply is not a valid AuditResult
    """
    if text is None or not text.strip():
        raise NoResponseError()

    try:
        return AuditResult.model_validate_json(text.strip())
    except ValidationError as e:
        raise MalformedResponseError(
            f"Model reply is not a valid audit result: {e.error_count()} problem(s)",
            raw_text=text,
        ) from e


class FinancialAuditAgent:
    """
    AI agent that audits a CSV of transactions.

    RESPONSIBILITIES:
    - Build the instruction, schema and prompt
    - Make exactly one model call per audit
    - Turn the reply into an AuditResult or a typed failure

    BOUNDARIES:
    - NEVER retries
    - NEVER persists anything (the session records history)
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
        event_logger: Optional[EventLogger] = None,
    ):
        """
        Initialize the agent.

        Args:
            settings: Gemini settings. Loaded from the environment if None.
            model: Object exposing ``generate_content_async``. A configured
                   GenerativeModel is created if None.
            event_logger: Where to log request/outcome events.
        """
        self._settings = settings or get_settings().gemini
        self._event_logger = event_logger
        self._model = model or self._configure_genai()

    @property
    def model_name(self) -> str:
        return self._settings.model_name

    def _configure_genai(self):
        """Configure Google Generative AI."""
        # An empty key is not rejected here; the first call fails with
        # the service's own authentication error.
        genai.configure(api_key=self._settings.api_key)
        return genai.GenerativeModel(
            model_name=self._settings.model_name,
            system_instruction=SYSTEM_INSTRUCTION,
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": AUDIT_RESPONSE_SCHEMA,
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            },
        )

    async def audit(
        self,
        csv_text: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditResult:
        """
        Audit the raw CSV text.

        Returns:
            The parsed AuditResult

        Raises:
            ServiceCallError: Transport/auth failure, or no text (NoResponseError)
            MalformedResponseError: Reply is not a valid AuditResult
        """
        if self._event_logger:
            self._event_logger.log_audit_requested(
                model_name=self.model_name,
                csv_length=len(csv_text),
                correlation_id=correlation_id,
            )

        try:
            result = await self._call_model(csv_text)
        except AuditError as e:
            if self._event_logger:
                self._event_logger.log_audit_failed(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._event_logger:
            self._event_logger.log_audit_completed(
                verdict_score=result.vola_verdict_score,
                burn_rate=result.burn_rate_percentage,
                leakage_count=len(result.leakage_items),
                correlation_id=correlation_id,
            )
        return result

    async def _call_model(self, csv_text: str) -> AuditResult:
        try:
            response = await self._model.generate_content_async(build_prompt(csv_text))
        except Exception as e:
            raise ServiceCallError(f"Gemini request failed: {e}") from e

        # .text raises ValueError when the reply has no parts
        # (blocked by safety filters, or no candidates at all)
        try:
            text = response.text
        except ValueError as e:
            raise NoResponseError() from e

        return parse_audit_response(text)
