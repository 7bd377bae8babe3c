"""Tests for renderers, toolbar status and the CLI entry point."""

import json
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from rich.console import Console
from rich.panel import Panel
from typer.testing import CliRunner

from termfolio.cli import app
from termfolio.config import Config
from termfolio.engine.catalog import CATALOG, suggest
from termfolio.engine.commands import process
from termfolio.engine.output import AIFailure, AIReply
from termfolio.engine.session import SessionController
from termfolio.models import PortfolioData
from termfolio.ui.render import render_entry, render_output, render_payload
from termfolio.ui.status import (
    MAX_DROPDOWN_ROWS,
    credits_style,
    dropdown_fragments,
    format_credits,
    format_thinking,
)
from termfolio.ui.theme import RICH_THEME

runner = CliRunner()


def to_text(renderable) -> str:
    console = Console(file=StringIO(), width=100, theme=RICH_THEME, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


# =============================================================================
# Rendering
# =============================================================================


def test_render_contact_aligns_labels(portfolio: PortfolioData):
    """Test label column alignment."""
    text = to_text(render_output(process("contact", portfolio, ["contact"])))

    email = next(line for line in text.splitlines() if "sam@example.com" in line)
    phone = next(line for line in text.splitlines() if "+1 555 0100" in line)
    assert email.index("sam@example.com") == phone.index("+1 555 0100")


def test_render_boxed_output(portfolio: PortfolioData):
    """Boxed output renders as a panel."""
    renderable = render_output(process("sudo hire-me", portfolio, ["sudo hire-me"]))

    assert isinstance(renderable, Panel)
    assert "privilege granted" in to_text(renderable)


def test_render_ai_reply_offers_command():
    """Test the assistant panel with a suggested command."""
    text = to_text(render_payload(AIReply("Mostly Python.", equivalent_command="skills")))

    assert "ASSISTANT" in text
    assert "Mostly Python." in text
    assert "❯ skills" in text
    assert "Ctrl+E" in text


def test_render_ai_failure():
    """Test the connectivity message."""
    text = to_text(render_payload(AIFailure()))

    assert "Couldn't connect to the AI layer" in text
    assert "Type 'help'" in text


def test_render_entry_echoes_prompt(controller: SessionController):
    """Test that an entry echoes its prompt line."""
    entry = controller.submit_text("skills")
    text = to_text(render_entry(entry))

    assert text.startswith("❯ skills")
    assert "Languages" in text


# =============================================================================
# Toolbar status
# =============================================================================


def test_credits_style_thresholds():
    """Test credit counter colors."""
    assert credits_style(5) == "class:credits.ok"
    assert credits_style(3) == "class:credits.low"
    assert credits_style(1) == "class:credits.out"
    assert credits_style(0) == "class:credits.out"


def test_format_credits_and_thinking():
    """Test credit and thinking text."""
    assert format_credits(2, 5) == "🤖 2/5 AI prompts left today"
    assert format_thinking("x" * 60).endswith('..."...')


def test_dropdown_scrolls_to_highlight():
    """The dropdown window follows the highlight."""
    matches = suggest("/")
    fragments = dropdown_fragments(matches, len(matches) - 1)
    rows = [text for style, text in fragments if style == "class:dropdown.current"]

    assert len(rows) == 1
    assert CATALOG[-1].command in rows[0]
    shown = [text for style, text in fragments if style in ("class:dropdown", "class:dropdown.current")]
    assert len(shown) == MAX_DROPDOWN_ROWS


def test_dropdown_empty():
    """Test dropdown with no matches."""
    assert dropdown_fragments([], -1) == []


# =============================================================================
# CLI
# =============================================================================


def test_cli_version():
    """Test --version."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "termfolio version" in result.output


def test_cli_catalog():
    """Test the catalog command."""
    result = runner.invoke(app, ["catalog"])

    assert result.exit_code == 0
    assert "curl resume.pdf" in result.output


def test_cli_exec_with_data_file(tmp_path: Path, portfolio_json: dict):
    """Test exec against a local data file."""
    data_file = tmp_path / "portfolio.json"
    data_file.write_text(json.dumps(portfolio_json), encoding="utf-8")

    with patch("termfolio.cli.load_config", return_value=Config(data_dir=tmp_path)):
        result = runner.invoke(app, ["--data-file", str(data_file), "exec", "projects", "--ls"])

    assert result.exit_code == 0
    assert "Tracecat" in result.output
    assert "Pinboard Sync" in result.output


def test_cli_unknown_backend(tmp_path: Path):
    """An unknown backend fails commands that load config."""
    with patch("termfolio.cli.load_config", return_value=Config(data_dir=tmp_path)):
        result = runner.invoke(app, ["--backend", "oracle", "catalog"])

    # catalog does not load config; exec does
    assert result.exit_code == 0

    with patch("termfolio.cli.load_config", return_value=Config(data_dir=tmp_path)):
        result = runner.invoke(app, ["--backend", "oracle", "exec", "help"])

    assert result.exit_code == 1
    assert "Unknown AI backend" in result.output


def test_cli_config_init(tmp_path: Path):
    """Test config init and its overwrite guard."""
    with patch("termfolio.cli.load_config", return_value=Config(data_dir=tmp_path)):
        first = runner.invoke(app, ["config", "init"])
        second = runner.invoke(app, ["config", "init"])

    assert first.exit_code == 0
    assert (tmp_path / "config.toml").exists()
    assert second.exit_code == 1
