"""Tests for the command catalog and autocomplete index."""

from termfolio.engine.catalog import CATALOG, HELP_TOPICS, SHOW_ALL, suggest
from termfolio.engine.classifier import InputMode, classify


def test_show_all_returns_whole_catalog_in_order():
    """A bare slash shows the whole catalog."""
    assert suggest(SHOW_ALL) == list(CATALOG)
    assert suggest("  /  ") == list(CATALOG)


def test_empty_input_suggests_nothing():
    """Test empty input."""
    assert suggest("") == []
    assert suggest("   ") == []


def test_prefix_matches_keep_catalog_order():
    """Test that prefix matches keep catalog order."""
    commands = [entry.command for entry in suggest("c")]

    assert commands == [
        "certifications",
        "contact",
        "clear",
        "cat about.txt",
        "cat skills.json",
        "cat experience.md",
        "cat contact.txt",
        "cat certifications.txt",
        "curl resume.pdf",
    ]


def test_exact_command_does_not_suggest_itself():
    """An exact command is not suggested back."""
    commands = [entry.command for entry in suggest("experience")]

    assert commands == ["experience --short"]


def test_suggest_is_case_insensitive():
    """Test case-insensitive suggestions."""
    assert [entry.command for entry in suggest("PROJ")] == ["projects", "projects --ls"]


def test_no_matches():
    """Test input with no suggestions."""
    assert suggest("zzz") == []


def test_catalog_commands_are_unique_and_routable():
    """Every catalog command is unique and classifies as a command."""
    commands = [entry.command for entry in CATALOG]

    assert len(commands) == len(set(commands))
    for command in commands:
        assert classify(command) is InputMode.CLI


def test_help_topics_cover_the_basics():
    """Test help topic table."""
    usages = [usage for usage, _ in HELP_TOPICS]

    assert usages[0] == "help"
    assert "cat <file>" in usages
    assert "curl resume.pdf" in usages
