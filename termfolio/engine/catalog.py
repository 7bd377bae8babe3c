"""Command catalog and the autocomplete index built on it."""

from dataclasses import dataclass

SHOW_ALL = "/"


@dataclass(frozen=True)
class CatalogEntry:
    """A single command the interpreter accepts, with display metadata."""

    command: str
    icon: str
    description: str


CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry("help", "📋", "Show all available commands"),
    CatalogEntry("whoami", "👤", "Display profile summary"),
    CatalogEntry("skills", "⚡", "Technical skills by category"),
    CatalogEntry("experience", "💼", "Work experience timeline"),
    CatalogEntry("experience --short", "💼", "Condensed experience view"),
    CatalogEntry("projects", "📂", "Featured project portfolio"),
    CatalogEntry("projects --ls", "📂", "List project names only"),
    CatalogEntry("education", "🎓", "Education background"),
    CatalogEntry("certifications", "📜", "Certifications & courses"),
    CatalogEntry("contact", "📧", "Contact information"),
    CatalogEntry("neofetch", "🖥️", "System summary card"),
    CatalogEntry("clear", "🧹", "Clear the terminal"),
    CatalogEntry("history", "📝", "Show command history"),
    CatalogEntry("ls", "📁", "List available sections"),
    CatalogEntry("cat about.txt", "🐱", "Read profile summary"),
    CatalogEntry("cat skills.json", "🐱", "Read skills data"),
    CatalogEntry("cat experience.md", "🐱", "Read experience file"),
    CatalogEntry("cat contact.txt", "🐱", "Read contact info"),
    CatalogEntry("cat certifications.txt", "🐱", "Read certifications"),
    CatalogEntry("pwd", "📍", "Print working directory"),
    CatalogEntry("date", "📅", "Current date & time"),
    CatalogEntry("uname -a", "💻", "System information"),
    CatalogEntry("echo hello", "🔊", "Echo text back"),
    CatalogEntry("sudo hire-me", "🔒", "🤫 Easter egg"),
    CatalogEntry("curl resume.pdf", "📄", "Open resume in browser"),
)

# Rows of the `help` command: (usage, description)
HELP_TOPICS: tuple[tuple[str, str], ...] = (
    ("help", "Show this help menu"),
    ("whoami", "Display profile summary"),
    ("skills", "List technical skills by category"),
    ("experience", "Show work experience timeline"),
    ("experience --short", "Condensed experience view"),
    ("projects", "Show project portfolio"),
    ("projects --ls", "List project names only"),
    ("education", "Show education details"),
    ("certifications", "List certifications"),
    ("contact", "Display contact information"),
    ("neofetch", "System info (portfolio style)"),
    ("ls", "List available files"),
    ("cat <file>", "Read a file"),
    ("pwd", "Print working directory"),
    ("date", "Show current date"),
    ("uname -a", "Show system information"),
    ("echo <text>", "Print text"),
    ("history", "Show command history"),
    ("clear", "Clear the terminal"),
    ("sudo hire-me", "🤫 Easter egg"),
    ("curl resume.pdf", "Get resume link"),
)


def suggest(partial: str) -> list[CatalogEntry]:
    """
    Return catalog entries completing `partial`, in catalog order.

    `/` lists the whole catalog, empty input lists nothing, and a command that
    is already fully typed does not suggest itself.
    """
    typed = partial.strip().lower()

    if typed == SHOW_ALL:
        return list(CATALOG)
    if not typed:
        return []

    return [
        entry
        for entry in CATALOG
        if entry.command.startswith(typed) and entry.command != typed
    ]
