"""Pytest configuration and fixtures."""

import asyncio
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from termfolio.config import Config, reset_config
from termfolio.engine.session import SessionController
from termfolio.logging import reset_logging
from termfolio.models import AIResponse, PortfolioData


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset global config and logging before each test."""
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def mock_env(tmp_path: Path):
    """Mock environment variables for testing."""
    env_vars = {
        "ANTHROPIC_API_KEY": "test-api-key-12345",
        "MODEL": "claude-sonnet-4-20250514",
        "LOG_LEVEL": "debug",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def test_config(mock_env, tmp_path: Path) -> Config:
    """Create a test configuration."""
    return Config(
        anthropic_api_key=mock_env["ANTHROPIC_API_KEY"],
        model=mock_env["MODEL"],
        log_level=mock_env["LOG_LEVEL"],
        data_dir=tmp_path / ".termfolio",
    )


@pytest.fixture
def portfolio_json() -> dict:
    """Raw portfolio document as served by /api/data."""
    return {
        "personal": {
            "name": "Sam Rivera",
            "location": "Austin, TX",
            "phone": "+1 555 0100",
            "email": "sam@example.com",
            "linkedin": "linkedin.com/in/samrivera",
            "github": "github.com/samrivera",
        },
        "summary": "Backend engineer who likes small tools and fast feedback loops.",
        "skills": {
            "Languages": ["Python", "TypeScript", "Go"],
            "Frameworks": ["FastAPI", "React"],
            "Cloud": ["AWS", "Docker", "Terraform"],
        },
        "experience": [
            {
                "company": "Acme Corp",
                "role": "Senior Engineer",
                "period": "2022 - Present",
                "location": "Remote",
                "highlights": ["Cut p95 latency by 40%", "Led the billing rewrite"],
            },
            {
                "company": "Initech",
                "role": "Engineer",
                "period": "2019 - 2022",
                "highlights": ["Built the reporting pipeline"],
            },
        ],
        "projects": [
            {
                "name": "Tracecat",
                "tech": ["Python", "Postgres"],
                "highlights": ["Open-source log explorer"],
            },
            {"name": "Pinboard Sync", "tech": ["Go"], "highlights": []},
        ],
        "education": {
            "degree": "B.S. Computer Science",
            "institution": "University of Texas",
            "location": "Austin, TX",
            "period": "2015 - 2019",
        },
        "certifications": ["AWS Solutions Architect", "CKA"],
    }


@pytest.fixture
def portfolio(portfolio_json: dict) -> PortfolioData:
    """Parsed portfolio snapshot."""
    return PortfolioData.model_validate(portfolio_json)


class FakeResponder:
    """
    AI responder whose answers are released by the test.

    Each call waits on its own gate unless `auto` is set; `answers` are
    consumed in order, exceptions in it are raised.
    """

    def __init__(self, answers: list | None = None, auto: bool = True):
        self.answers = list(answers or [])
        self.auto = auto
        self.questions: list[str] = []
        self.gates: list[asyncio.Event] = []

    async def ask(self, message: str) -> AIResponse:
        self.questions.append(message)
        if not self.auto:
            gate = asyncio.Event()
            self.gates.append(gate)
            await gate.wait()

        answer = self.answers.pop(0) if self.answers else AIResponse(message=f"echo: {message}")
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def responder() -> FakeResponder:
    """Fake AI collaborator that answers immediately."""
    return FakeResponder()


@pytest.fixture
def opened_urls() -> list[str]:
    """URLs the controller asked to open."""
    return []


@pytest.fixture
def controller(responder: FakeResponder, portfolio: PortfolioData, opened_urls) -> SessionController:
    """Session controller with loaded data and a fake AI."""
    return SessionController(responder, portfolio, open_url=opened_urls.append)


@pytest.fixture
def make_controller(portfolio: PortfolioData, opened_urls):
    """Factory for controllers with scripted AI answers."""

    def _make(
        answers: list | None = None,
        auto: bool = True,
        loaded: bool = True,
        credits: int = 5,
        open_url=None,
    ) -> tuple[SessionController, FakeResponder]:
        fake = FakeResponder(answers, auto=auto)
        session = SessionController(
            fake,
            portfolio if loaded else None,
            credits=credits,
            open_url=open_url or opened_urls.append,
        )
        return session, fake

    return _make
