"""Rich renderers for engine output - turns payloads into terminal renderables."""

from rich.cells import cell_len
from rich.console import Group, RenderableType
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from termfolio.engine.output import (
    AIFailure,
    AIReply,
    CommandOutput,
    OutputLine,
    Payload,
    PendingReply,
)
from termfolio.engine.session import LineEntry
from termfolio.ui.status import SYMBOLS, format_thinking
from termfolio.ui.theme import TONE_STYLES


def render_prompt_line(entry: LineEntry) -> Text:
    """The echoed input line: chevron plus what was typed."""
    text = Text()
    text.append(f"{SYMBOLS['prompt']} ", style="prompt.chevron")
    text.append(entry.text, style="prompt.text")
    return text


def _render_line(line: OutputLine, label_width: int) -> Text:
    text = Text(" " * line.indent)

    if line.label:
        padding = " " * max(1, label_width - cell_len(line.label))
        text.append(line.label, style="label")
        text.append(padding)

    if line.bullet:
        text.append(f"{line.bullet} ", style="bullet")

    if line.text:
        text.append(line.text, style=TONE_STYLES[line.tone])

    for i, tag in enumerate(line.tags):
        if i or line.text:
            text.append(" ")
        text.append(f" {tag} ", style="tag")

    return text


def render_output(output: CommandOutput) -> RenderableType:
    """Render a CLI command's output, aligning label columns."""
    labels = [cell_len(line.label) for line in output.lines if line.label]
    label_width = max(labels) + 2 if labels else 0

    body = Text("\n").join(_render_line(line, label_width) for line in output.lines)

    if output.boxed:
        return Panel(body, border_style="success", expand=False, padding=(0, 2))
    return Padding(body, (0, 0, 1, 0))


def render_ai_reply(reply: AIReply) -> RenderableType:
    text = Text()
    text.append(f"{SYMBOLS['ai']} ASSISTANT\n", style="ai.star")
    text.append(reply.message, style="ai.text")

    if reply.open_url:
        text.append("\n\n↗ Opened: ", style="muted")
        text.append(reply.open_url, style="link")

    if reply.equivalent_command:
        text.append("\n\nTry it yourself: ", style="muted")
        text.append(f"{SYMBOLS['prompt']} {reply.equivalent_command}", style="command")
        text.append("  (Ctrl+E to run)", style="muted")

    return Panel(text, border_style="ai.star", expand=True, padding=(0, 2))


def render_ai_failure(failure: AIFailure) -> RenderableType:
    text = Text()
    text.append(f"{SYMBOLS['ai']} ERROR\n", style="ai.error")
    text.append(failure.message, style="ai.text")
    text.append(f"\n{failure.hint}", style="hint")
    return Panel(text, border_style="error", expand=True, padding=(0, 2))


def render_payload(payload: Payload, question: str = "") -> RenderableType:
    match payload:
        case CommandOutput():
            return render_output(payload)
        case AIReply():
            return render_ai_reply(payload)
        case AIFailure():
            return render_ai_failure(payload)
        case PendingReply():
            return Text(format_thinking(question), style="warning")
        case _:
            raise TypeError(f"Unknown payload: {payload!r}")


def render_entry(entry: LineEntry) -> RenderableType:
    """Prompt line followed by the entry's current payload."""
    return Group(render_prompt_line(entry), render_payload(entry.payload, entry.text))
