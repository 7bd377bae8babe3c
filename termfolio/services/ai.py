"""
AI collaborators - answer natural-language questions about the portfolio.

Two backends share one interface:
- RemoteResponder: the portfolio's own `/api/ai` endpoint (it owns the quota)
- AnthropicResponder: asks Claude directly and keeps an in-memory daily quota
"""

import json
from collections.abc import Callable
from datetime import date
from typing import Protocol

import httpx
from anthropic import APIError, AsyncAnthropic
from pydantic import ValidationError

from termfolio.config import Config
from termfolio.engine.catalog import CATALOG
from termfolio.logging import log, log_ai_call
from termfolio.models import AIResponse, PortfolioData

AI_PATH = "/api/ai"


class AIServiceError(Exception):
    """Raised when the AI collaborator cannot produce an answer."""


class AIResponder(Protocol):
    """Answer one question."""

    async def ask(self, message: str) -> AIResponse: ...


class RemoteResponder:
    """POST the question to `{api_url}/api/ai`."""

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def ask(self, message: str) -> AIResponse:
        url = f"{self.api_url}{AI_PATH}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json={"message": message})
        except httpx.HTTPError as e:
            raise AIServiceError(f"AI request failed: {e}") from e

        # Rate limited: the body is a regular answer explaining the limit
        if response.status_code != httpx.codes.TOO_MANY_REQUESTS and response.is_error:
            raise AIServiceError(f"AI request failed: {response.status_code}")

        try:
            answer = AIResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AIServiceError(f"Invalid AI response: {e}") from e

        log_ai_call("remote", message, remaining=answer.remaining)
        return answer


SYSTEM_PROMPT = """You are the assistant inside a terminal-style portfolio website.
Answer visitors' questions about the portfolio owner using ONLY the data below.
Keep answers short (at most 4 sentences), friendly and factual.

Respond only with valid JSON of this shape:
{{"message": "<answer>", "equivalentCmd": "<command or empty>", "openUrl": "<url or null>"}}

- equivalentCmd: the terminal command that shows the same information, chosen
  from this list, or "" when none fits: {commands}
- openUrl: a URL to open for the visitor only when they explicitly ask to open
  or download something (resume, GitHub, LinkedIn); otherwise null.

Portfolio data:
{portfolio}
"""


class AnthropicResponder:
    """Answer directly through the Anthropic API, with a per-day prompt quota."""

    def __init__(
        self,
        config: Config,
        portfolio: Callable[[], PortfolioData | None],
        client: AsyncAnthropic | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.config = config
        self.portfolio = portfolio
        self.daily_limit = config.ai_daily_limit
        self.client = client or AsyncAnthropic(api_key=config.anthropic_api_key)
        self._today = today
        self._day = today()
        self._used = 0

    @property
    def remaining(self) -> int:
        self._roll_day()
        return max(0, self.daily_limit - self._used)

    def _roll_day(self) -> None:
        today = self._today()
        if today != self._day:
            self._day = today
            self._used = 0

    async def ask(self, message: str) -> AIResponse:
        if self.remaining == 0:
            log("ai", "Daily quota exhausted", limit=self.daily_limit)
            return AIResponse(
                message=(
                    f"You've used all {self.daily_limit} AI prompts for today. "
                    "Direct commands still work. Type 'help' to see them."
                ),
                equivalent_cmd="help",
                remaining=0,
            )

        data = self.portfolio()
        system = SYSTEM_PROMPT.format(
            commands=", ".join(entry.command for entry in CATALOG),
            portfolio=data.model_dump_json(indent=2) if data else "(not loaded yet)",
        )

        try:
            response = await self.client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                system=system,
                messages=[{"role": "user", "content": message}],
            )
        except APIError as e:
            raise AIServiceError(f"Anthropic request failed: {e}") from e

        self._used += 1
        text = response.content[0].text if response.content else ""
        answer = self._parse_answer(text)

        log_ai_call("anthropic", message, remaining=answer.remaining)
        return answer

    def _parse_answer(self, response_text: str) -> AIResponse:
        """Parse Claude's JSON answer; fall back to the raw text as the message."""
        text = response_text.strip()

        # Extract from markdown code block if present
        if "```json" in text:
            start = text.find("```json") + 7
            end = text.find("```", start)
            if end > start:
                text = text[start:end].strip()
        elif "```" in text:
            start = text.find("```") + 3
            end = text.find("```", start)
            if end > start:
                text = text[start:end].strip()

        try:
            payload = json.loads(text)
            answer = AIResponse.model_validate({**payload, "remaining": self.remaining})
        except (ValueError, TypeError, ValidationError):
            log("ai", "Unstructured answer, using raw text", level="warning")
            return AIResponse(message=response_text.strip(), remaining=self.remaining)

        # Only offer commands the terminal actually knows
        known = {entry.command for entry in CATALOG}
        if answer.equivalent_cmd and answer.equivalent_cmd not in known:
            answer = answer.model_copy(update={"equivalent_cmd": ""})
        return answer


def build_responder(
    config: Config, portfolio: Callable[[], PortfolioData | None]
) -> AIResponder:
    """Pick the configured backend."""
    if config.ai_backend == "anthropic":
        return AnthropicResponder(config, portfolio)
    return RemoteResponder(config.api_url, timeout=config.request_timeout)
