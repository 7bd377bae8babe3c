"""Portfolio data sources - the HTTP endpoint or a local JSON file."""

import asyncio
from pathlib import Path
from typing import Protocol

import httpx
from pydantic import ValidationError

from termfolio.config import Config
from termfolio.logging import log
from termfolio.models import PortfolioData

DATA_PATH = "/api/data"


class PortfolioSourceError(Exception):
    """Raised when the portfolio snapshot cannot be fetched or parsed."""


class PortfolioSource(Protocol):
    """Anything that can produce the portfolio snapshot once."""

    async def fetch(self) -> PortfolioData: ...


class HttpPortfolioSource:
    """Fetch the snapshot from `GET {api_url}/api/data`."""

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> PortfolioData:
        url = f"{self.api_url}{DATA_PATH}"
        log("api", f"GET {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PortfolioSourceError(
                f"Failed to fetch portfolio data: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise PortfolioSourceError(f"Failed to fetch portfolio data: {e}") from e

        try:
            data = PortfolioData.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise PortfolioSourceError(f"Invalid portfolio data: {e}") from e

        log("api", "Portfolio loaded", projects=len(data.projects), experience=len(data.experience))
        return data


class FilePortfolioSource:
    """Read the snapshot from a local JSON file (offline use)."""

    def __init__(self, path: Path):
        self.path = path

    async def fetch(self) -> PortfolioData:
        log("api", f"READ {self.path}")

        try:
            loop = asyncio.get_running_loop()
            raw = await loop.run_in_executor(None, self.path.read_text, "utf-8")
        except OSError as e:
            raise PortfolioSourceError(f"Could not read {self.path}: {e}") from e

        try:
            return PortfolioData.model_validate_json(raw)
        except ValidationError as e:
            raise PortfolioSourceError(f"Invalid portfolio data in {self.path}: {e}") from e


def get_portfolio_source(config: Config) -> PortfolioSource:
    """Local file when one is configured, otherwise the HTTP endpoint."""
    if config.data_file:
        return FilePortfolioSource(config.data_file)
    return HttpPortfolioSource(config.api_url, timeout=config.request_timeout)
