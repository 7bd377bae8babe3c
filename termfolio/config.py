"""
Configuration for termfolio.

Settings are resolved per field, highest precedence first: environment
variables (including a `.env` file), then ~/.termfolio/config.toml, then the
defaults below. Command-line options are applied on top with
`apply_overrides()`.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import tomli_w
import tomllib
from dotenv import load_dotenv

from termfolio.logging import log

DEFAULT_DATA_DIR = Path.home() / ".termfolio"

DEFAULT_API_URL = "http://localhost:8787"
DEFAULT_AI_BACKEND = "remote"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_LOG_LEVEL = "info"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_AI_DAILY_LIMIT = 5
DEFAULT_MAX_TOKENS = 1024
DEFAULT_SHOW_WELCOME = True

# Action name -> key, in config.toml notation
DEFAULT_KEYBINDINGS = {
    "run_equivalent": "ctrl+e",
    "clear_screen": "ctrl+l",
}

AI_BACKENDS = ("remote", "anthropic")


@dataclass
class Config:
    """Resolved settings for one run."""

    # Where portfolio data and AI answers come from
    api_url: str = DEFAULT_API_URL
    data_file: Path | None = None  # local JSON instead of GET /api/data
    ai_backend: str = DEFAULT_AI_BACKEND
    anthropic_api_key: str | None = None

    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    ai_daily_limit: int = DEFAULT_AI_DAILY_LIMIT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    show_welcome: bool = DEFAULT_SHOW_WELCOME

    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)
    keybindings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_KEYBINDINGS))

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.toml"

    def ensure_dirs(self) -> None:
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def validate(self) -> None:
        """Raise ConfigError for settings that cannot work together."""
        if self.ai_backend not in AI_BACKENDS:
            raise ConfigError(
                f"Unknown AI backend '{self.ai_backend}'. Choose one of: {', '.join(AI_BACKENDS)}"
            )

        if self.ai_backend == "anthropic" and not self.anthropic_api_key:
            raise ConfigError(
                "ANTHROPIC_API_KEY not found. The anthropic backend needs it in .env or the "
                "environment (keys: https://console.anthropic.com/), or use --backend remote."
            )


class ConfigError(Exception):
    """Invalid or incomplete configuration."""


# field -> (config.toml section, config.toml key, environment variable)
_SETTINGS: dict[str, tuple[str, str, str | None]] = {
    "api_url": ("general", "api_url", "TERMFOLIO_API_URL"),
    "data_file": ("general", "data_file", "TERMFOLIO_DATA_FILE"),
    "log_level": ("general", "log_level", "LOG_LEVEL"),
    "request_timeout": ("general", "request_timeout", None),
    "ai_backend": ("ai", "backend", "TERMFOLIO_AI_BACKEND"),
    "model": ("ai", "model", "MODEL"),
    "ai_daily_limit": ("ai", "daily_limit", None),
    "max_tokens": ("ai", "max_tokens", None),
    "show_welcome": ("display", "show_welcome", None),
}


def _env_files(data_dir: Path) -> Iterator[Path]:
    """Candidate .env files: the working directory wins over the data directory."""
    for candidate in (Path.cwd() / ".env", data_dir / ".env"):
        if candidate.exists():
            yield candidate
            return


def load_config(env_path: Path | None = None, data_dir: Path | None = None) -> Config:
    """
    Build the Config for this run.

    Args:
        env_path: Explicit .env file (skips the lookup in cwd and data_dir)
        data_dir: Home of config.toml and logs (default ~/.termfolio)
    """
    data_dir = data_dir or DEFAULT_DATA_DIR

    for env_file in [env_path] if env_path else _env_files(data_dir):
        load_dotenv(env_file)

    toml_config = _load_toml_config(data_dir / "config.toml")

    values: dict[str, Any] = {}
    for name, (section, key, env_var) in _SETTINGS.items():
        env_value = os.getenv(env_var) if env_var else None
        if env_value:
            values[name] = env_value
        elif key in toml_config.get(section, {}):
            values[name] = toml_config[section][key]

    if values.get("data_file"):
        values["data_file"] = Path(values["data_file"]).expanduser()
    if "api_url" in values:
        values["api_url"] = values["api_url"].rstrip("/")

    config = Config(
        **values,
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        data_dir=data_dir,
        keybindings={**DEFAULT_KEYBINDINGS, **toml_config.get("keybindings", {})},
    )
    config.validate()
    config.ensure_dirs()

    return config


def apply_overrides(config: Config, **overrides: Any) -> Config:
    """Return a copy with the non-None overrides applied, validated again."""
    changes = {name: value for name, value in overrides.items() if value is not None}
    if not changes:
        return config

    if "api_url" in changes:
        changes["api_url"] = changes["api_url"].rstrip("/")
    if "data_file" in changes:
        changes["data_file"] = Path(changes["data_file"]).expanduser()

    updated = replace(config, **changes)
    updated.validate()
    return updated


def _load_toml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config.toml at {config_path}: {e}") from e


def save_config_toml(config: Config) -> Path:
    """Write the settings that belong in config.toml (never the API key)."""
    document: dict[str, dict[str, Any]] = {}
    for name, (section, key, _) in _SETTINGS.items():
        value = getattr(config, name)
        if value is None:
            continue
        document.setdefault(section, {})[key] = str(value) if isinstance(value, Path) else value
    document["keybindings"] = dict(config.keybindings)

    config.data_dir.mkdir(parents=True, exist_ok=True)
    with open(config.config_path, "wb") as f:
        tomli_w.dump(document, f)

    log("config", f"Wrote {config.config_path}")
    return config.config_path


_config: Config | None = None


def get_config() -> Config:
    """Process-wide config, loaded on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    global _config
    _config = None
