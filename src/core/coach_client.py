"""AI coach client.

Async HTTP client for an OpenAI-compatible chat completions API. Answers
free-form budgeting questions and narrates composed plans.
"""

import json
from typing import Any, Optional

import httpx

from src.models.results import PlanResponse

BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.4
DEFAULT_TIMEOUT = 60.0

EMPTY_REPLY = "Sorry, I couldn't generate a response. Try asking in a different way."

SYSTEM_PROMPT = """\
You are a friendly and professional financial coach.
- You speak clearly and concisely.
- You focus on budgeting, cash flow, savings, and debt payoff.
- You give practical, actionable advice, usually in 3-5 bullet points.
- You are NOT a tax attorney or investment advisor; avoid giving specific
  ticker recommendations or legal/tax advice.

If you're given context from the app (income, needs/wants/savings, goals),
use it to personalize the answer.
Context (JSON): {context}."""

PLAN_REQUEST = (
    "Explain this monthly budget plan in plain language. Comment on the "
    "surplus, suggest realistic monthly contributions for goals that have "
    "none, and flag any category where recent spending runs above plan."
)


class CoachError(Exception):
    """Base exception for coach API errors."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Coach API Error [{status_code}]: {detail}")


def build_messages(message: str, context: Optional[dict[str, Any]] = None) -> list[dict[str, str]]:
    """Build the chat messages for a coach request."""
    safe_context = json.dumps(context) if isinstance(context, dict) and context else "none provided"
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(context=safe_context)},
        {"role": "user", "content": message},
    ]


class CoachClient:
    """Async client for the coach's chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = BASE_URL,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=DEFAULT_TIMEOUT,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _complete(self, messages: list[dict[str, str]]) -> str:
        try:
            response = await self.client.post(
                "/chat/completions",
                json={
                    "model": self.model,
                    "messages": messages,
                    "temperature": self.temperature,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json() if e.response.content else {}
            except ValueError:
                body = {}
            error = body.get("error") if isinstance(body, dict) else None
            if not isinstance(error, dict):
                error = {}
            raise CoachError(
                status_code=e.response.status_code,
                detail=error.get("message") or str(e),
            ) from e
        except httpx.TimeoutException as e:
            raise CoachError(
                status_code=408,
                detail="Request to the coach timed out. Please try again.",
            ) from e
        except httpx.TransportError as e:
            raise CoachError(
                status_code=503,
                detail=f"Cannot reach the coach service: {e}",
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise CoachError(
                status_code=502,
                detail="The coach service returned a response that is not JSON.",
            ) from e

        choices = (body.get("choices") if isinstance(body, dict) else None) or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        return content.strip() or EMPTY_REPLY

    async def ask(self, message: str, context: Optional[dict[str, Any]] = None) -> str:
        """Answer a free-form budgeting question."""
        if not isinstance(message, str) or not message.strip():
            raise ValueError("Field 'message' is required.")
        return await self._complete(build_messages(message, context))

    async def narrate_plan(self, plan: PlanResponse) -> str:
        """Narrate a composed plan."""
        return await self._complete(build_messages(PLAN_REQUEST, plan.to_dict()))
