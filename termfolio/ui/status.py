"""Status indicators for the REPL toolbar: dropdown, thinking, credits."""

from termfolio.engine.catalog import CatalogEntry

# Status symbols
SYMBOLS = {
    "prompt": "❯",
    "ai": "✦",
    "thinking": "◐",
    "selected": "▸",
}

# Dropdown rows shown at once
MAX_DROPDOWN_ROWS = 8


def credits_style(credits: int) -> str:
    """Toolbar style class for the remaining-credit counter."""
    if credits <= 1:
        return "class:credits.out"
    if credits <= 3:
        return "class:credits.low"
    return "class:credits.ok"


def format_credits(credits: int, total: int) -> str:
    return f"🤖 {credits}/{total} AI prompts left today"


def format_thinking(question: str) -> str:
    """One-line indicator for the pending AI question."""
    if len(question) > 40:
        question = question[:37] + "..."
    return f"{SYMBOLS['thinking']} thinking about \"{question}\"..."


def dropdown_fragments(
    matches: list[CatalogEntry], selected: int
) -> list[tuple[str, str]]:
    """
    prompt_toolkit formatted text for the autocomplete dropdown.

    The window scrolls so the highlighted row stays visible.
    """
    if not matches:
        return []

    start = 0
    if selected >= MAX_DROPDOWN_ROWS:
        start = selected - MAX_DROPDOWN_ROWS + 1
    visible = matches[start : start + MAX_DROPDOWN_ROWS]

    fragments: list[tuple[str, str]] = []
    for offset, entry in enumerate(visible):
        index = start + offset
        current = index == selected
        style = "class:dropdown.current" if current else "class:dropdown"
        marker = SYMBOLS["selected"] if current else " "
        fragments.append((style, f" {marker} {entry.icon} {entry.command:<24}"))
        fragments.append(("class:dropdown.meta", f" {entry.description} "))
        fragments.append(("", "\n"))

    hidden = len(matches) - len(visible)
    if hidden > 0:
        fragments.append(("class:dropdown.meta", f"   … {hidden} more\n"))
    return fragments
