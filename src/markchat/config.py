"""Configuration loading and validation for the markchat TUI."""

from __future__ import annotations

from copy import deepcopy
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from platformdirs import user_config_path, user_state_path
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .exceptions import ConfigValidationError

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

APP_NAME = "markchat"
CONFIG_DIR = user_config_path(APP_NAME)
CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_LOG_PATH = str(user_state_path(APP_NAME) / "app.log")

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _required_string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Expected a string value.")
    normalized = value.strip()
    if not normalized:
        raise ValueError("String value must not be empty.")
    return normalized


class AppConfig(BaseModel):
    """Application metadata."""

    title: str = "markchat"

    @field_validator("title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> str:
        return _required_string(value)


class CompletionConfig(BaseModel):
    """Remote chat-completion endpoint settings."""

    endpoint: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-3.5-turbo"
    system_prompt: str = "You are a helpful assistant."
    max_tokens: int = Field(default=300, ge=1, le=32_768)
    timeout: float = Field(default=60.0, gt=0, le=3600)
    api_key_env: str = "OPENAI_API_KEY"
    api_key: str = ""

    @field_validator("endpoint", mode="before")
    @classmethod
    def _validate_endpoint(cls, value: Any) -> str:
        normalized = _required_string(value)
        parsed = urlparse(normalized)
        if parsed.scheme.lower() not in {"http", "https"}:
            raise ValueError("completion.endpoint must use http or https scheme.")
        if not parsed.hostname:
            raise ValueError("completion.endpoint must include a hostname.")
        return normalized

    @field_validator("model", "system_prompt", "api_key_env", mode="before")
    @classmethod
    def _validate_required_string(cls, value: Any) -> str:
        return _required_string(value)

    @field_validator("api_key", mode="before")
    @classmethod
    def _normalize_api_key(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("api_key must be a string.")
        return value.strip()


class UIConfig(BaseModel):
    """Visual settings for Textual rendering."""

    code_theme: str = "monokai"
    copied_ack_seconds: float = Field(default=2.0, gt=0, le=60)
    input_max_height: int = Field(default=12, ge=1, le=100)
    show_welcome: bool = True

    @field_validator("code_theme", mode="before")
    @classmethod
    def _validate_theme(cls, value: Any) -> str:
        return _required_string(value)


class KeybindsConfig(BaseModel):
    """Keyboard action mapping."""

    clear_chat: str = "ctrl+l"
    quit: str = "ctrl+q"
    scroll_up: str = "ctrl+up"
    scroll_down: str = "ctrl+down"

    @field_validator("*", mode="before")
    @classmethod
    def _validate_keybind(cls, value: Any) -> str:
        return _required_string(value)


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = DEFAULT_LOG_PATH

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        level = _required_string(value).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {sorted(VALID_LOG_LEVELS)}.")
        return level

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        return _required_string(value)


class Config(BaseModel):
    """Root configuration model for all sections."""

    model_config = ConfigDict(populate_by_name=True)
    app: AppConfig = AppConfig()
    completion: CompletionConfig = CompletionConfig()
    ui: UIConfig = UIConfig()
    keybinds: KeybindsConfig = KeybindsConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Create the config directory if needed and return it."""
    target = CONFIG_DIR if config_dir is None else config_dir
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Could not create config directory %s: %s", target, exc)
    return target


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` layered on top, section by section."""
    result: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


def _enforce_private_permissions(path: Path) -> None:
    """Restrict the config file to its owner; it may hold an API key."""
    if os.name != "posix" or not path.exists():
        return
    try:
        path.chmod(0o600)
    except OSError as exc:
        LOGGER.warning("Could not restrict permissions on %s: %s", path, exc)


def _safe_default_config() -> dict[str, dict[str, Any]]:
    return deepcopy(DEFAULT_CONFIG)


def _describe_errors(exc: ValidationError) -> str:
    # Field values are omitted so a malformed api_key never reaches the log.
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged data, falling back to defaults on invalid values."""
    try:
        return Config.model_validate(raw).model_dump()
    except ValidationError as exc:
        LOGGER.warning(
            "Invalid configuration, using defaults: %s", _describe_errors(exc)
        )
        return _safe_default_config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def _read_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    _enforce_private_permissions(path)
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        LOGGER.warning("Ignoring unreadable config at %s: %s", path, exc)
        return {}


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Read ``config.toml``, layer it over the defaults and validate the result.

    ``config_path`` overrides the platform config location; it is only read,
    never created.
    """
    path = config_path
    if path is None:
        ensure_config_dir()
        path = CONFIG_PATH
    return _validate_config(_deep_merge(DEFAULT_CONFIG, _read_toml(path)))


def resolve_api_key(
    completion_config: dict[str, Any], environ: dict[str, str] | None = None
) -> str:
    """Return the bearer credential from the environment, then the config file."""
    env = os.environ if environ is None else environ
    env_name = str(completion_config.get("api_key_env", "OPENAI_API_KEY"))
    from_env = env.get(env_name, "").strip()
    if from_env:
        return from_env
    return str(completion_config.get("api_key", "")).strip()
