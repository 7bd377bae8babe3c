"""
File-based debug logging.

The REPL owns the terminal, so nothing here ever writes to the console. Debug
output goes to ~/.termfolio/logs/ and is off unless `--debug` is passed.
Messages are tagged with a category so a session can be narrowed with
`--debug-filter "ai,session"` or `--debug-filter "!commands"`.
"""

import logging
import sys
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

LOGGER_NAME = "termfolio"

CATEGORIES = frozenset(
    {
        "api",  # portfolio data source
        "ai",  # AI collaborator calls
        "session",  # controller state changes
        "commands",  # processor dispatch
        "config",
    }
)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"


@dataclass
class _LogState:
    enabled: bool = False
    categories: frozenset[str] = field(default_factory=frozenset)
    log_file: Path | None = None
    handler: logging.Handler | None = None


_state = _LogState()


def parse_filter(debug_filter: str | None) -> frozenset[str]:
    """
    Resolve a filter expression to the set of enabled categories.

    A comma-separated list selects categories, `!name` removes one. With no
    positive selection every category is enabled.
    """
    included: set[str] = set()
    excluded: set[str] = set()

    for token in (debug_filter or "").split(","):
        token = token.strip()
        if not token:
            continue
        if token.startswith("!"):
            excluded.add(token[1:])
        else:
            included.add(token)

    return frozenset((included or CATEGORIES) - excluded)


def _writable_logs_dir(logs_dir: Path) -> Path:
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        return logs_dir
    except OSError as e:
        fallback = Path(tempfile.gettempdir()) / "termfolio_logs"
        print(f"Warning: Could not create {logs_dir} ({e}), logging to {fallback}", file=sys.stderr)
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def setup_logging(
    logs_dir: Path,
    debug: bool = False,
    debug_filter: str | None = None,
) -> Path:
    """
    Attach a file handler to the `termfolio` logger.

    Args:
        logs_dir: Directory for log files (~/.termfolio/logs/)
        debug: Record `log()` calls; without it only the file is prepared
        debug_filter: Category filter, e.g. "ai,session" or "!commands"

    Returns:
        Path to this run's log file
    """
    reset_logging()

    log_file = _writable_logs_dir(logs_dir) / f"termfolio_{datetime.now():%Y%m%d_%H%M%S}.log"
    categories = parse_filter(debug_filter)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    try:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        print(f"Warning: Could not open log file {log_file}: {e}", file=sys.stderr)
        return log_file

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)

    _state.enabled = debug
    _state.categories = categories
    _state.log_file = log_file
    _state.handler = handler

    if debug:
        logger.info("debug session started, categories=%s", ",".join(sorted(categories)))

    return log_file


def log(category: str, message: str, level: str = "debug", **kwargs: Any) -> None:
    """
    Record a message under `category` (api, ai, session, commands, config).

    Keyword arguments are appended as `key=value` context.
    """
    if not _state.enabled or category not in _state.categories:
        return

    if kwargs:
        context = " ".join(f"{key}={value!r}" for key, value in kwargs.items())
        message = f"{message} [{context}]"

    logger = logging.getLogger(f"{LOGGER_NAME}.{category}")
    logger.log(getattr(logging, level.upper(), logging.DEBUG), message)


def log_ai_call(backend: str, message: str, remaining: int | None = None) -> None:
    """Log an AI collaborator call."""
    preview = message if len(message) <= 60 else message[:57] + "..."
    log("ai", f"ASK {backend}", question=preview, remaining=remaining)


def log_command(kind: str, raw: str) -> None:
    """Log a dispatched command."""
    log("commands", f"DISPATCH {kind}", raw=raw)


def get_log_file() -> Path | None:
    return _state.log_file


def is_debug_enabled() -> bool:
    return _state.enabled


def reset_logging() -> None:
    """Detach the file handler and disable debug logging (useful for testing)."""
    global _state

    if _state.handler is not None:
        logging.getLogger(LOGGER_NAME).removeHandler(_state.handler)
        _state.handler.close()

    _state = _LogState()
