"""Input classifier - decides whether a line is a command or a question."""

from enum import Enum

from termfolio.engine.commands import CommandKind, parse_kind

# Words that mark a line as a natural-language request
NL_INDICATORS = frozenset(
    {
        "tell", "show", "what", "who", "where", "how",
        "give", "list", "explain", "describe", "his", "your",
        "does", "did", "has", "have", "is", "are", "can",
    }
)


class InputMode(str, Enum):
    """Where a submitted line is routed."""

    CLI = "cli"
    AI = "ai"


def classify(raw: str) -> InputMode:
    """
    Route a non-empty line to the command processor or the AI responder.

    Precedence: a known command word first, then question words, then
    "more than one word", then the single-word fallback (which lets the
    processor print "command not found").
    """
    words = raw.strip().lower().split()

    if parse_kind(raw) is not CommandKind.UNKNOWN:
        return InputMode.CLI

    if any(word in NL_INDICATORS for word in words):
        return InputMode.AI

    if len(words) > 1:
        return InputMode.AI

    return InputMode.CLI
