"""Services module - portfolio data source and AI collaborators."""

from termfolio.services.ai import (
    AIResponder,
    AIServiceError,
    AnthropicResponder,
    RemoteResponder,
    build_responder,
)
from termfolio.services.portfolio import (
    FilePortfolioSource,
    HttpPortfolioSource,
    PortfolioSource,
    PortfolioSourceError,
    get_portfolio_source,
)

__all__ = [
    # AI
    "AIResponder",
    "AIServiceError",
    "AnthropicResponder",
    "RemoteResponder",
    "build_responder",
    # Portfolio
    "FilePortfolioSource",
    "HttpPortfolioSource",
    "PortfolioSource",
    "PortfolioSourceError",
    "get_portfolio_source",
]
