"""Structured output produced by the engine and rendered by the UI."""

from dataclasses import dataclass, field
from enum import Enum


class Tone(Enum):
    """Semantic style of an output line. The UI maps tones to theme styles."""

    PLAIN = "plain"
    MUTED = "muted"
    BRIGHT = "bright"
    HEADING = "heading"
    PROJECT = "project"
    SUCCESS = "success"
    ERROR = "error"
    HINT = "hint"
    LINK = "link"
    ART = "art"


@dataclass(frozen=True)
class OutputLine:
    """
    One line of command output.

    `label` is rendered before `text` in a fixed-width column (key/value rows),
    `tags` after it as chips, `bullet` as a leading marker.
    """

    text: str = ""
    tone: Tone = Tone.PLAIN
    label: str = ""
    bullet: str = ""
    tags: tuple[str, ...] = ()
    indent: int = 0


@dataclass(frozen=True)
class CommandOutput:
    """Finalized output of a CLI command."""

    lines: tuple[OutputLine, ...]
    open_url: str | None = None  # Opened by the session controller, never by the processor
    boxed: bool = False

    def plain_text(self) -> str:
        """Flatten to plain text (labels, bullets and tags included)."""
        rendered = []
        for line in self.lines:
            parts = []
            if line.label:
                parts.append(f"{line.label}:")
            if line.bullet:
                parts.append(line.bullet)
            if line.text:
                parts.append(line.text)
            if line.tags:
                parts.append(" ".join(f"[{tag}]" for tag in line.tags))
            rendered.append(" " * line.indent + " ".join(parts))
        return "\n".join(rendered)


class ClearSignal:
    """Returned by the processor for `clear`: discard the whole line log."""

    _instance: "ClearSignal | None" = None

    def __new__(cls) -> "ClearSignal":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CLEAR"


CLEAR = ClearSignal()


@dataclass(frozen=True)
class AIReply:
    """Resolved answer for an ai-mode entry."""

    message: str
    equivalent_command: str = ""
    open_url: str | None = None


@dataclass(frozen=True)
class AIFailure:
    """Connectivity failure for an ai-mode entry."""

    message: str = "Couldn't connect to the AI layer. Try a direct command instead."
    hint: str = "Type 'help' to see all available commands."


@dataclass(frozen=True)
class PendingReply:
    """Marker payload for an ai-mode entry still waiting on its answer."""


PENDING = PendingReply()

Payload = CommandOutput | AIReply | AIFailure | PendingReply


def single(text: str, tone: Tone = Tone.PLAIN) -> CommandOutput:
    """Output consisting of one line."""
    return CommandOutput(lines=(OutputLine(text, tone),))


def with_hint(message: str, hint: str, tone: Tone = Tone.ERROR) -> CommandOutput:
    """A message paired with a corrective hint."""
    return CommandOutput(lines=(OutputLine(message, tone), OutputLine(hint, Tone.HINT)))


@dataclass
class OutputBuilder:
    """Accumulate lines for multi-line output."""

    lines: list[OutputLine] = field(default_factory=list)

    def add(self, text: str = "", tone: Tone = Tone.PLAIN, **kwargs) -> "OutputBuilder":
        self.lines.append(OutputLine(text, tone, **kwargs))
        return self

    def blank(self) -> "OutputBuilder":
        self.lines.append(OutputLine())
        return self

    def build(self, open_url: str | None = None, boxed: bool = False) -> CommandOutput:
        # Drop a trailing blank separator
        lines = self.lines[:-1] if self.lines and self.lines[-1] == OutputLine() else self.lines
        return CommandOutput(lines=tuple(lines), open_url=open_url, boxed=boxed)
