"""Natural-language insights over an admin's customer data.

Customer records are stripped of direct identifiers before they leave the
process. The pseudonymous ``customerId`` is derived from the last four
digits of the mobile number, so two customers can share one.
"""

import json
from typing import Any, Protocol

import structlog

from loyalty_pro.clients import GeminiClient, GeminiResponse
from loyalty_pro.config import get_settings
from loyalty_pro.exceptions import ServiceUnavailableError, UpstreamError
from loyalty_pro.ledger import LedgerService
from loyalty_pro.models import Customer

logger = structlog.get_logger(__name__)

NO_DATA_MESSAGE = "There is no customer data to analyze. Please add transactions first."

SYSTEM_INSTRUCTION = """You are a world-class data analyst for a high-end customer loyalty program called "Loyalty Pro".
Your task is to analyze the provided customer data and answer the user's question with actionable insights.

The data is provided as an array of JSON objects. Each object represents a customer.
- 'mobile': Customer's mobile number.
- 'points': Current loyalty points balance.
- 'totalSpent': Lifetime spending in Rupees (₹).
- 'history': An array of their past transactions, including 'date', 'bill' amount, and 'points' earned.
- 'customerId': A unique anonymous identifier for the customer.

Based on the data provided, please answer the user's question. Provide a concise, well-formatted, and insightful response. Use markdown for formatting if it helps clarity (e.g., lists, bold text)."""

USER_CONTENT_TEMPLATE = """
Here is the customer data:
```json
{data}
```

User's Question: "{prompt}"
"""

IDENTIFYING_FIELDS = {"name", "pin"}


class TextGenerator(Protocol):
    """Anything that turns a system instruction and a user turn into text."""

    async def generate(self, system_instruction: str, user_content: str) -> GeminiResponse:
        ...


def customer_id(mobile: str) -> str:
    """Pseudonymous id from the mobile number's last four characters."""
    return f"CUST-{mobile[-4:]}"


def sanitize_customers(customers: list[Customer]) -> list[dict[str, Any]]:
    """Drop name and pin, add ``customerId``."""
    sanitized = []
    for customer in customers:
        record = customer.model_dump(mode="json", by_alias=True, exclude=IDENTIFYING_FIELDS)
        record["customerId"] = customer_id(customer.mobile)
        sanitized.append(record)
    return sanitized


def build_user_content(customers: list[Customer], prompt: str) -> str:
    """Embed the sanitized data and the question in one user turn."""
    data = json.dumps(sanitize_customers(customers), indent=2, ensure_ascii=False)
    return USER_CONTENT_TEMPLATE.format(data=data, prompt=prompt)


class InsightRequestBuilder:
    """Builds insight requests and delegates them to a text generator.

    ``generator`` is None when no credential was configured; every call then
    fails with ``ServiceUnavailableError`` while the ledger keeps working.
    """

    def __init__(self, generator: TextGenerator | None):
        self._generator = generator
        self._logger = logger.bind(service="insights")

    @classmethod
    def from_settings(cls) -> "InsightRequestBuilder":
        """Resolve the Gemini credential once and build accordingly."""
        settings = get_settings()
        if not settings.insights_enabled:
            logger.warning("insights_disabled", reason="missing_google_api_key")
            return cls(None)
        return cls(GeminiClient())

    @property
    def available(self) -> bool:
        return self._generator is not None

    async def build_and_run(self, customers: list[Customer], prompt: str) -> str:
        """Answer ``prompt`` over ``customers``.

        Raises:
            ServiceUnavailableError: No generator configured.
            UpstreamError: The generator failed or returned no text.
        """
        if not customers:
            return NO_DATA_MESSAGE

        if self._generator is None:
            raise ServiceUnavailableError()

        user_content = build_user_content(customers, prompt)
        self._logger.info("insight_requested", customers=len(customers))

        try:
            response = await self._generator.generate(SYSTEM_INSTRUCTION, user_content)
        except Exception as e:
            self._logger.error("insight_failed", error=str(e))
            raise UpstreamError(
                f"An error occurred while fetching insights: {e}", details=e
            ) from e

        if not response.content:
            self._logger.error("insight_failed", error="empty_response")
            raise UpstreamError(
                "An error occurred while fetching insights: No response from AI model."
            )

        return response.content


class InsightService:
    """Answers an admin's question over that admin's current customers."""

    def __init__(self, ledger: LedgerService, builder: InsightRequestBuilder):
        self._ledger = ledger
        self._builder = builder

    async def fetch_insights(self, username: str, prompt: str) -> str:
        """
        Raises:
            AdminNotFoundError: If ``username`` does not exist.
            ServiceUnavailableError: No generator configured.
            UpstreamError: The generator failed.
        """
        customers = await self._ledger.get_customers(username)
        return await self._builder.build_and_run(customers, prompt)
