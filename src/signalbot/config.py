"""Configuration loading and logging setup.

Settings come from the process environment, optionally pre-populated
from a ``.env`` file in the working directory::

    SIGNAL_PHONE_NUMBER=+15551234567   # required: the bot's own account
    SIGNAL_DATA_DIR=./signal-data      # signal-cli --config directory
    BOT_COMMAND_PREFIX=!
    LOG_LEVEL=info
    SIGNAL_CLI_PATH=signal-cli

Empty variables are treated as unset.  The resolved :class:`BotConfig`
is frozen and passed explicitly to every component that needs it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from signalbot.validation import is_valid_phone_number, mask_phone_number

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path(".env")
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class BotConfig(BaseSettings):
    """Process-wide bot settings, read once at startup."""

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
        str_strip_whitespace=True,
    )

    phone_number: str = Field(default="", validation_alias="SIGNAL_PHONE_NUMBER")
    data_dir: str = Field(default="./signal-data", validation_alias="SIGNAL_DATA_DIR")
    command_prefix: str = Field(
        default="!", min_length=1, validation_alias="BOT_COMMAND_PREFIX"
    )
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")
    signal_cli: str = Field(default="signal-cli", validation_alias="SIGNAL_CLI_PATH")


def load_config(
    *,
    env_file: Path | None = DEFAULT_ENV_FILE,
    data_dir_override: str | None = None,
    prefix_override: str | None = None,
    log_level_override: str | None = None,
) -> BotConfig:
    """Resolve configuration from CLI overrides, environment, and ``.env``.

    Resolution order: overrides, then environment variables, then
    *env_file* (skipped when ``None`` or missing), then defaults.

    Raises :class:`SystemExit` when ``SIGNAL_PHONE_NUMBER`` is missing
    or a value fails validation.
    """
    if env_file is not None and not env_file.exists():
        logger.info("No %s file found, using environment variables", env_file)
        env_file = None

    overrides = {
        k: v
        for k, v in [
            ("SIGNAL_DATA_DIR", data_dir_override),
            ("BOT_COMMAND_PREFIX", prefix_override),
            ("LOG_LEVEL", log_level_override),
        ]
        if v
    }
    try:
        config = BotConfig(_env_file=env_file, **overrides)  # pyright: ignore[reportCallIssue]
    except ValidationError as exc:
        raise SystemExit(f"Invalid configuration:\n{exc}") from exc

    if not config.phone_number:
        raise SystemExit("SIGNAL_PHONE_NUMBER is required")
    if not is_valid_phone_number(config.phone_number):
        logger.warning(
            "SIGNAL_PHONE_NUMBER %s does not look like +<digits>; "
            "signal-cli may reject it",
            mask_phone_number(config.phone_number),
        )
    return config


def configure_logging(level: str) -> None:
    """Configure the root logger from a level name such as ``info``."""
    resolved = _LOG_LEVELS.get(level.strip().lower())
    logging.basicConfig(
        level=resolved or logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )
    if resolved is None:
        logger.warning("Unknown log level %r, using info", level)
