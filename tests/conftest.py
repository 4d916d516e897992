"""Shared test fixtures for signal-bot."""

from __future__ import annotations

import pytest

from signalbot.config import BotConfig

_ENV_VARS = (
    "SIGNAL_PHONE_NUMBER",
    "SIGNAL_DATA_DIR",
    "BOT_COMMAND_PREFIX",
    "LOG_LEVEL",
    "SIGNAL_CLI_PATH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's environment out of config resolution."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config() -> BotConfig:
    return BotConfig(
        _env_file=None,  # pyright: ignore[reportCallIssue]
        SIGNAL_PHONE_NUMBER="+15550000000",  # pyright: ignore[reportCallIssue]
    )
