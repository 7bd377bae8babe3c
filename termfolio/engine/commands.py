"""
Command processor - the deterministic half of the terminal.

Every line routed to the CLI ends up here. The processor is a pure function
of (command text, portfolio data, history): it never raises, never touches
the session, and describes side effects (opening the resume) in its output
instead of performing them.
"""

from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Protocol

from termfolio.engine.catalog import HELP_TOPICS
from termfolio.engine.output import (
    CLEAR,
    ClearSignal,
    CommandOutput,
    OutputBuilder,
    OutputLine,
    Tone,
    single,
    with_hint,
)
from termfolio.logging import log_command
from termfolio.models import PortfolioData

DEFAULT_RESUME_URL = (
    "https://drive.google.com/file/d/1SxTOiE5DdYFrcdTkxsL8pTSWEAm7rlNU/view?usp=drivesdk"
)

FLAG_SHORT = "--short"
FLAG_LIST = "--ls"

PROJECTS_DIR = "projects/"

WHOAMI_BANNER = (
    "████████╗███████╗██████╗ ███╗   ███╗",
    "╚══██╔══╝██╔════╝██╔══██╗████╗ ████║",
    "   ██║   █████╗  ██████╔╝██╔████╔██║",
    "   ██║   ██╔══╝  ██╔══██╗██║╚██╔╝██║",
    "   ██║   ███████╗██║  ██║██║ ╚═╝ ██║",
    "   ╚═╝   ╚══════╝╚═╝  ╚═╝╚═╝     ╚═╝",
)

NEOFETCH_LOGO = (
    "   _____  ",
    "  / ____| ",
    " | (___   ",
    "  \\___ \\  ",
    "  ____) | ",
    " |_____/  ",
)


class CommandKind(Enum):
    """Every command the interpreter knows, grouped where they share a response."""

    HELP = "help"
    WHOAMI = "whoami"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    PROJECTS = "projects"
    EDUCATION = "education"
    CERTIFICATIONS = "certifications"
    CONTACT = "contact"
    NEOFETCH = "neofetch"
    LS = "ls"
    CAT = "cat"
    PWD = "pwd"
    DATE = "date"
    UNAME = "uname"
    ECHO = "echo"
    HISTORY = "history"
    CLEAR = "clear"
    SUDO = "sudo"
    CURL = "curl"
    CD = "cd"
    READ_ONLY = "read_only"  # mkdir, rm, mv, cp, touch, chmod
    EDITOR = "editor"  # vim, nano
    GREP = "grep"
    MAN = "man"
    GIT = "git"
    NETWORK = "network"  # ssh, wget, apt, pip, npm
    UNKNOWN = "unknown"


# First word -> command kind. Also the classifier's set of known commands.
COMMAND_WORDS: dict[str, CommandKind] = {
    "help": CommandKind.HELP,
    "whoami": CommandKind.WHOAMI,
    "skills": CommandKind.SKILLS,
    "experience": CommandKind.EXPERIENCE,
    "projects": CommandKind.PROJECTS,
    "education": CommandKind.EDUCATION,
    "certifications": CommandKind.CERTIFICATIONS,
    "contact": CommandKind.CONTACT,
    "neofetch": CommandKind.NEOFETCH,
    "ls": CommandKind.LS,
    "cat": CommandKind.CAT,
    "pwd": CommandKind.PWD,
    "date": CommandKind.DATE,
    "uname": CommandKind.UNAME,
    "echo": CommandKind.ECHO,
    "history": CommandKind.HISTORY,
    "clear": CommandKind.CLEAR,
    "sudo": CommandKind.SUDO,
    "curl": CommandKind.CURL,
    "cd": CommandKind.CD,
    "mkdir": CommandKind.READ_ONLY,
    "rm": CommandKind.READ_ONLY,
    "mv": CommandKind.READ_ONLY,
    "cp": CommandKind.READ_ONLY,
    "touch": CommandKind.READ_ONLY,
    "chmod": CommandKind.READ_ONLY,
    "vim": CommandKind.EDITOR,
    "nano": CommandKind.EDITOR,
    "grep": CommandKind.GREP,
    "man": CommandKind.MAN,
    "git": CommandKind.GIT,
    "ssh": CommandKind.NETWORK,
    "wget": CommandKind.NETWORK,
    "apt": CommandKind.NETWORK,
    "pip": CommandKind.NETWORK,
    "npm": CommandKind.NETWORK,
}

# Virtual files readable with `cat`, in `ls` order
VIRTUAL_FILES: tuple[str, ...] = (
    "about.txt",
    "skills.json",
    "experience.md",
    "contact.txt",
    "certifications.txt",
)

# What `ls` prints: files plus the projects pseudo-directory
LS_LISTING: tuple[str, ...] = (
    "about.txt",
    "skills.json",
    "experience.md",
    PROJECTS_DIR,
    "contact.txt",
    "certifications.txt",
)


def parse_kind(command: str) -> CommandKind:
    """Map the first word of a command to its kind."""
    words = command.strip().lower().split()
    if not words:
        return CommandKind.UNKNOWN
    return COMMAND_WORDS.get(words[0], CommandKind.UNKNOWN)


# =============================================================================
# File suggestion strategy
# =============================================================================


class FileSuggester(Protocol):
    """Suggest a known file for a name that did not resolve."""

    def suggest(self, name: str, known: tuple[str, ...]) -> str | None: ...


class StemSuggester:
    """Match on the part of the name before the first '.'."""

    def suggest(self, name: str, known: tuple[str, ...]) -> str | None:
        stem = name.split(".")[0]
        for candidate in known:
            if candidate.split(".")[0] == stem:
                return candidate
        return None


DEFAULT_SUGGESTER = StemSuggester()


# =============================================================================
# Dispatch
# =============================================================================


def process(
    command: str,
    data: PortfolioData | None,
    history: list[str],
    *,
    now: datetime | None = None,
    suggester: FileSuggester | None = None,
) -> CommandOutput | ClearSignal:
    """
    Execute one CLI command.

    Args:
        command: Raw submitted text
        data: Portfolio snapshot, or None while it is still loading
        history: Submitted commands, oldest first
        now: Clock reading for `date` (defaults to the current time)
        suggester: Strategy for `cat` typo suggestions

    Returns:
        Output to append to the log, or CLEAR to wipe it
    """
    if data is None:
        return single("Loading portfolio data...", Tone.MUTED)

    trimmed = command.strip()
    parts = trimmed.lower().split()
    first_word = parts[0] if parts else ""
    args = parts[1:]
    kind = COMMAND_WORDS.get(first_word, CommandKind.UNKNOWN)

    log_command(kind.value, trimmed)

    match kind:
        case CommandKind.HELP:
            return render_help()
        case CommandKind.WHOAMI:
            return render_whoami(data)
        case CommandKind.SKILLS:
            return render_skills(data)
        case CommandKind.EXPERIENCE:
            return render_experience(data, short=FLAG_SHORT in args)
        case CommandKind.PROJECTS:
            return render_projects(data, list_only=FLAG_LIST in args)
        case CommandKind.EDUCATION:
            return render_education(data)
        case CommandKind.CERTIFICATIONS:
            return render_certifications(data)
        case CommandKind.CONTACT:
            return render_contact(data)
        case CommandKind.NEOFETCH:
            return render_neofetch(data)
        case CommandKind.LS:
            return render_ls()
        case CommandKind.CAT:
            return _cat(data, args[0] if args else "", suggester or DEFAULT_SUGGESTER)
        case CommandKind.PWD:
            return single(_home(data), Tone.BRIGHT)
        case CommandKind.DATE:
            return single(_format_date(now or datetime.now()), Tone.BRIGHT)
        case CommandKind.UNAME:
            return single(
                f"Linux {data.personal.handle}-portfolio 5.15.0-generic #1 SMP x86_64 GNU/Linux",
                Tone.BRIGHT,
            )
        case CommandKind.ECHO:
            # Original casing, everything after "echo "
            return single(trimmed[5:], Tone.BRIGHT)
        case CommandKind.HISTORY:
            return render_history(history)
        case CommandKind.CLEAR:
            return CLEAR
        case CommandKind.SUDO:
            if args and args[0] == "hire-me":
                return render_sudo_hire_me(data)
            return single(f"sudo: {' '.join(args)}: command not found", Tone.ERROR)
        case CommandKind.CURL:
            if args and args[0] == "resume.pdf":
                return render_resume_link(data)
            return single(
                f"curl: (6) Could not resolve host: {args[0] if args else ''}", Tone.ERROR
            )
        case CommandKind.CD:
            return _cd(data, args[0] if args else "")
        case CommandKind.READ_ONLY:
            return with_hint(
                f"bash: {first_word}: permission denied (read-only filesystem)",
                "🔒 This is a virtual portfolio — no file modifications allowed!",
            )
        case CommandKind.EDITOR:
            return single(
                f"{first_word}: this portfolio is already perfect, no edits needed 😎",
                Tone.HEADING,
            )
        case CommandKind.GREP:
            return single(
                f"grep: try asking the AI instead! "
                f"It knows everything about {data.personal.handle.capitalize()}."
            )
        case CommandKind.MAN:
            return single(f"No manual entry for {args[0] if args else first_word}. Try: help")
        case CommandKind.GIT:
            return render_git(data)
        case CommandKind.NETWORK:
            return single(
                f"bash: {first_word}: network commands are not available in this terminal",
                Tone.ERROR,
            )
        case _:
            return with_hint(
                f"bash: {first_word}: command not found",
                "Type 'help' to see available commands or just ask me anything in plain English!",
            )


def _home(data: PortfolioData) -> str:
    return f"/home/{data.personal.handle}/portfolio"


def _format_date(now: datetime) -> str:
    """Format like a browser's Date.toString()."""
    local = now.astimezone()
    return local.strftime("%a %b %d %Y %H:%M:%S GMT%z (%Z)")


def _cat(data: PortfolioData, filename: str, suggester: FileSuggester) -> CommandOutput:
    """Read a virtual file, suggesting a near miss when the name is wrong."""
    if filename in ("projects", PROJECTS_DIR):
        return single("cat: projects/: Is a directory. Try: projects", Tone.ERROR)

    reader = FILE_READERS.get(filename)
    if reader:
        return reader(data)

    if not filename:
        return single("cat: missing file operand", Tone.ERROR)

    missing = f"cat: {filename}: No such file or directory"
    suggestion = suggester.suggest(filename, VIRTUAL_FILES)
    if suggestion:
        return with_hint(missing, f"💡 Did you mean: cat {suggestion}?")

    return with_hint(
        missing, f"📁 Available files: {', '.join(VIRTUAL_FILES)} — Try ls"
    )


def _cd(data: PortfolioData, target: str) -> CommandOutput:
    """Pretend to change directory on a read-only filesystem."""
    if not target:
        return single(_home(data), Tone.BRIGHT)

    if target in VIRTUAL_FILES:
        return with_hint(
            f"bash: cd: {target}: Not a directory", f"💡 Try: cat {target} to read it"
        )

    if target in ("projects", PROJECTS_DIR):
        return single("📂 projects/ — Use projects to view all projects")

    return with_hint(
        f"bash: cd: {target}: No such directory", "📁 Try ls to see available files"
    )


# =============================================================================
# Renderers
# =============================================================================


def render_help() -> CommandOutput:
    out = OutputBuilder()
    for usage, description in HELP_TOPICS:
        out.add(description, label=usage)
    out.blank()
    out.add("Tip: Use ↑↓ for history · Tab to autocomplete · Or just ask me anything!", Tone.HINT)
    return out.build()


def render_whoami(data: PortfolioData) -> CommandOutput:
    out = OutputBuilder()
    for row in WHOAMI_BANNER:
        out.add(row, Tone.ART)
    out.blank()
    out.add(data.summary)
    return out.build()


def render_skills(data: PortfolioData) -> CommandOutput:
    out = OutputBuilder()
    for category, items in data.skills.items():
        out.add(category, Tone.HEADING, bullet="▸")
        out.add(tags=tuple(items), indent=2)
        out.blank()
    return out.build()


def render_experience(data: PortfolioData, short: bool) -> CommandOutput:
    out = OutputBuilder()

    if short:
        for exp in data.experience:
            out.add(f"{exp.company} — {exp.role} [{exp.period}]")
        return out.build()

    for exp in data.experience:
        out.add(exp.company, Tone.HEADING)
        out.add(exp.role, Tone.BRIGHT)
        out.add(" · ".join(p for p in (exp.period, exp.location) if p), Tone.MUTED)
        for highlight in exp.highlights:
            out.add(highlight, bullet="▹", indent=2)
        out.blank()
    return out.build()


def render_projects(data: PortfolioData, list_only: bool) -> CommandOutput:
    out = OutputBuilder()

    if list_only:
        for project in data.projects:
            out.add(project.name, Tone.PROJECT, bullet="◆")
        return out.build()

    for project in data.projects:
        out.add(project.name, Tone.PROJECT)
        if project.tech:
            out.add(tags=tuple(project.tech), indent=2)
        for highlight in project.highlights:
            out.add(highlight, bullet="▹", indent=2)
        out.blank()
    return out.build()


def render_education(data: PortfolioData) -> CommandOutput:
    edu = data.education
    out = OutputBuilder()
    out.add(edu.degree, Tone.HEADING)
    out.add(edu.institution, Tone.BRIGHT)
    out.add(" · ".join(p for p in (edu.location, edu.period) if p), Tone.MUTED)
    return out.build()


def render_certifications(data: PortfolioData) -> CommandOutput:
    out = OutputBuilder()
    for cert in data.certifications:
        out.add(cert, bullet="✓")
    return out.build()


def render_contact(data: PortfolioData) -> CommandOutput:
    personal = data.personal
    rows = (
        ("📧 Email", personal.email, Tone.LINK),
        ("📱 Phone", personal.phone, Tone.BRIGHT),
        ("💼 LinkedIn", personal.linkedin, Tone.LINK),
        ("🐙 GitHub", personal.github, Tone.LINK),
        ("📍 Location", personal.location, Tone.BRIGHT),
    )
    out = OutputBuilder()
    for label, value, tone in rows:
        out.add(value, tone, label=label)
    return out.build()


def render_neofetch(data: PortfolioData) -> CommandOutput:
    """System-info card; the facts come from the portfolio where it has them."""
    handle = data.personal.handle
    role = data.experience[0].role if data.experience else "Software Engineer"
    stack = " · ".join(
        skill for items in list(data.skills.values())[1:3] for skill in items[:2]
    )

    info = (
        ("OS", f"{handle.capitalize()} OS v1.0 (Debian-based)"),
        ("Host", f"portfolio.{handle}.dev"),
        ("Kernel", "creativity 5.15.0-generic"),
        ("Uptime", "2 years, shipping in prod"),
        ("Shell", "/bin/python"),
        ("Role", role),
        ("Stack", stack or "—"),
        ("Location", data.personal.location or "—"),
        ("Status", "✓ Open to opportunities"),
    )

    out = OutputBuilder()
    for row in NEOFETCH_LOGO:
        out.add(row, Tone.ART)
    out.blank()
    for key, value in info:
        out.add(value, Tone.SUCCESS if key == "Status" else Tone.BRIGHT, label=key)
    return out.build()


def render_ls() -> CommandOutput:
    return CommandOutput(
        lines=(
            OutputLine(
                "  ".join(LS_LISTING),
                Tone.BRIGHT,
            ),
        )
    )


def render_history(history: list[str]) -> CommandOutput:
    out = OutputBuilder()
    for i, entry in enumerate(history, 1):
        out.add(entry, label=f"{i:>4}")
    return out.build()


def render_sudo_hire_me(data: PortfolioData) -> CommandOutput:
    personal = data.personal
    out = OutputBuilder()
    out.add("✓ sudo: privilege granted", Tone.SUCCESS)
    out.blank()
    out.add(personal.name, Tone.BRIGHT, label="→ Candidate")
    out.add("Full-Stack + DevOps + AI", Tone.BRIGHT, label="→ Stack")
    out.add("AVAILABLE", Tone.SUCCESS, label="→ Status")
    out.add(personal.email, Tone.BRIGHT, label="→ Email")
    out.add(personal.github, Tone.BRIGHT, label="→ GitHub")
    out.blank()
    out.add("No sudo password required to hire great engineers. 😄", Tone.HINT)
    return out.build(boxed=True)


def render_resume_link(data: PortfolioData) -> CommandOutput:
    url = data.personal.resume_url or DEFAULT_RESUME_URL
    out = OutputBuilder()
    out.add("200 OK", Tone.SUCCESS)
    out.add("Resume opened in your browser: resume.pdf")
    out.add(url, Tone.LINK, indent=2)
    return out.build(open_url=url)


def render_git(data: PortfolioData) -> CommandOutput:
    github = data.personal.github or "github.com"
    return CommandOutput(
        lines=(
            OutputLine("🔗 Check out the real repo:"),
            OutputLine(github, Tone.LINK, indent=2),
        )
    )


# Virtual file name -> renderer; keys match VIRTUAL_FILES
FILE_READERS: dict[str, Callable[[PortfolioData], CommandOutput]] = {
    "about.txt": render_whoami,
    "skills.json": render_skills,
    "experience.md": lambda data: render_experience(data, short=False),
    "contact.txt": render_contact,
    "certifications.txt": render_certifications,
}
