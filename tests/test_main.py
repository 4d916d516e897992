"""Tests for the signal-bot CLI entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from signalbot.__main__ import app
from signalbot.config import BotConfig
from signalbot.signal_cli import Destination, SendError

runner = CliRunner()

_CONFIG = BotConfig.model_construct(phone_number="+15550000000")


class TestVersionCommand:
    def test_prints_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "signal-bot" in result.output


class TestRunCommand:
    @patch("signalbot.__main__.configure_logging")
    @patch("signalbot.__main__.Bot")
    @patch("signalbot.__main__.load_config", return_value=_CONFIG)
    def test_runs_bot(
        self,
        _mock_config: MagicMock,
        mock_bot: MagicMock,
        mock_logging: MagicMock,
    ) -> None:
        mock_bot.return_value.run.return_value = 0
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        mock_bot.assert_called_once_with(_CONFIG)
        mock_bot.return_value.run.assert_called_once()
        mock_logging.assert_called_once_with("info")

    @patch("signalbot.__main__.configure_logging")
    @patch("signalbot.__main__.Bot")
    @patch("signalbot.__main__.load_config", return_value=_CONFIG)
    def test_passes_overrides(
        self,
        mock_config: MagicMock,
        mock_bot: MagicMock,
        _mock_logging: MagicMock,
    ) -> None:
        mock_bot.return_value.run.return_value = 0
        runner.invoke(
            app,
            [
                "run",
                "--env-file",
                "/etc/signal-bot.env",
                "--data-dir",
                "/srv/signal",
                "--prefix",
                "/",
                "--log-level",
                "debug",
            ],
        )
        kwargs = mock_config.call_args.kwargs
        assert kwargs["env_file"] == Path("/etc/signal-bot.env")
        assert kwargs["data_dir_override"] == "/srv/signal"
        assert kwargs["prefix_override"] == "/"
        assert kwargs["log_level_override"] == "debug"

    @patch("signalbot.__main__.configure_logging")
    @patch("signalbot.__main__.Bot")
    @patch("signalbot.__main__.load_config", return_value=_CONFIG)
    def test_defaults_to_no_overrides(
        self,
        mock_config: MagicMock,
        mock_bot: MagicMock,
        _mock_logging: MagicMock,
    ) -> None:
        mock_bot.return_value.run.return_value = 0
        runner.invoke(app, ["run"])
        kwargs = mock_config.call_args.kwargs
        assert kwargs["env_file"] == Path(".env")
        assert kwargs["data_dir_override"] is None
        assert kwargs["prefix_override"] is None

    def test_missing_phone_number_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["run", "--env-file", str(tmp_path / ".env")])
        assert result.exit_code != 0
        assert isinstance(result.exception, SystemExit)


class TestReplyCommand:
    def test_ping(self) -> None:
        result = runner.invoke(app, ["reply", "!ping"])
        assert result.exit_code == 0
        assert "Pong!" in result.output

    def test_echo(self) -> None:
        result = runner.invoke(app, ["reply", "!echo hello world"])
        assert result.output == "hello world\n"

    def test_custom_prefix(self) -> None:
        result = runner.invoke(app, ["reply", "/ping", "--prefix", "/"])
        assert "Pong!" in result.output

    def test_non_command_prints_nothing(self) -> None:
        result = runner.invoke(app, ["reply", "hello"])
        assert result.exit_code == 0
        assert result.output == ""


class TestSendCommand:
    @patch("signalbot.__main__.configure_logging")
    @patch("signalbot.__main__.Bot")
    @patch("signalbot.__main__.load_config", return_value=_CONFIG)
    def test_direct(
        self, _mock_config: MagicMock, mock_bot: MagicMock, _mock_logging: MagicMock
    ) -> None:
        result = runner.invoke(app, ["send", "+15551234567", "hello"])
        assert result.exit_code == 0
        mock_bot.return_value.client.send.assert_called_once_with(
            Destination("+15551234567"), "hello"
        )

    @patch("signalbot.__main__.configure_logging")
    @patch("signalbot.__main__.Bot")
    @patch("signalbot.__main__.load_config", return_value=_CONFIG)
    def test_group(
        self, _mock_config: MagicMock, mock_bot: MagicMock, _mock_logging: MagicMock
    ) -> None:
        runner.invoke(app, ["send", "Z3JvdXA=", "hello", "--group"])
        mock_bot.return_value.client.send.assert_called_once_with(
            Destination("Z3JvdXA=", is_group=True), "hello"
        )

    @patch("signalbot.__main__.configure_logging")
    @patch("signalbot.__main__.Bot")
    @patch("signalbot.__main__.load_config", return_value=_CONFIG)
    def test_failure_exits_nonzero(
        self, _mock_config: MagicMock, mock_bot: MagicMock, _mock_logging: MagicMock
    ) -> None:
        mock_bot.return_value.client.send.side_effect = SendError("boom")
        result = runner.invoke(app, ["send", "+15551234567", "hello"])
        assert result.exit_code == 1
        assert "boom" in result.output


class TestDoctorCommand:
    @patch("signalbot.doctor.check_environment", return_value=0)
    def test_passes(self, mock_check: MagicMock) -> None:
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 0
        mock_check.assert_called_once_with(Path(".env"))

    @patch("signalbot.doctor.check_environment", return_value=1)
    def test_fails(self, _mock_check: MagicMock) -> None:
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 1
