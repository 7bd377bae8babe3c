"""Tests for file-based debug logging."""

from pathlib import Path

from termfolio.logging import (
    CATEGORIES,
    get_log_file,
    is_debug_enabled,
    log,
    log_ai_call,
    log_command,
    parse_filter,
    reset_logging,
    setup_logging,
)


def test_parse_filter():
    """Test category filter parsing."""
    assert parse_filter(None) == CATEGORIES
    assert parse_filter("ai, session") == {"ai", "session"}
    assert parse_filter("!commands") == CATEGORIES - {"commands"}
    assert parse_filter("ai,!ai") == frozenset()


def test_log_is_silent_without_debug(tmp_path: Path):
    """Nothing is recorded unless debug is on."""
    log_file = setup_logging(tmp_path, debug=False)
    log("session", "should not appear")
    reset_logging()

    assert not is_debug_enabled()
    assert "should not appear" not in log_file.read_text(encoding="utf-8")


def test_log_writes_context_to_file(tmp_path: Path):
    """Test that context is appended and other categories are filtered out."""
    log_file = setup_logging(tmp_path / "logs", debug=True, debug_filter="commands")

    log_command("skills", "skills")
    log("session", "filtered out")
    reset_logging()

    text = log_file.read_text(encoding="utf-8")
    assert log_file.parent == tmp_path / "logs"
    assert "DISPATCH skills [raw='skills']" in text
    assert "filtered out" not in text
    assert get_log_file() is None


def test_log_ai_call_records_question(tmp_path: Path):
    """Test that AI calls are logged with a truncated question."""
    log_ai_call("remote", "no debug yet", remaining=4)

    log_file = setup_logging(tmp_path, debug=True, debug_filter="ai")
    log_ai_call("remote", "what does sam know", remaining=2)
    log_ai_call("anthropic", "x" * 80)
    reset_logging()

    text = log_file.read_text(encoding="utf-8")
    assert "ASK remote [question='what does sam know' remaining=2]" in text
    assert f"question='{'x' * 57}...'" in text
    assert "no debug yet" not in text
