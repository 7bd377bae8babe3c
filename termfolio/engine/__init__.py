"""Engine module - classifier, command processor, autocomplete and output types.

The session controller lives in termfolio.engine.session and is imported from
there directly; it depends on the service layer.
"""

from termfolio.engine.catalog import CATALOG, HELP_TOPICS, CatalogEntry, suggest
from termfolio.engine.classifier import InputMode, classify
from termfolio.engine.commands import (
    CommandKind,
    FileSuggester,
    StemSuggester,
    process,
)
from termfolio.engine.output import (
    CLEAR,
    PENDING,
    AIFailure,
    AIReply,
    ClearSignal,
    CommandOutput,
    OutputLine,
    Tone,
)

__all__ = [
    # Catalog
    "CATALOG",
    "HELP_TOPICS",
    "CatalogEntry",
    "suggest",
    # Classifier
    "InputMode",
    "classify",
    # Commands
    "CommandKind",
    "FileSuggester",
    "StemSuggester",
    "process",
    # Output
    "CLEAR",
    "PENDING",
    "AIFailure",
    "AIReply",
    "ClearSignal",
    "CommandOutput",
    "OutputLine",
    "Tone",
]
