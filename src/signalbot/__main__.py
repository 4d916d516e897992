"""signal-bot CLI entry point.

Provides ``signal-bot run``, ``signal-bot reply``, ``signal-bot send``,
``signal-bot doctor``, and ``signal-bot version``.
"""

from __future__ import annotations

import logging
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Annotated

import typer

from signalbot.bot import Bot
from signalbot.commands import CommandHandler
from signalbot.config import DEFAULT_ENV_FILE, configure_logging, load_config
from signalbot.models import Message
from signalbot.signal_cli import Destination, SendError
from signalbot.validation import mask_phone_number

app = typer.Typer(help="signal-bot: answers !commands over Signal via signal-cli.")

logger = logging.getLogger(__name__)

EnvFileOption = Annotated[
    Path,
    typer.Option(help="Settings file loaded before the environment is read."),
]


@app.command()
def version() -> None:
    """Print the signal-bot version."""
    print(f"signal-bot {pkg_version('signal-bot')}")


@app.command()
def run(
    env_file: EnvFileOption = DEFAULT_ENV_FILE,
    data_dir: Annotated[
        str | None,
        typer.Option(help="signal-cli state directory. Overrides SIGNAL_DATA_DIR."),
    ] = None,
    prefix: Annotated[
        str | None,
        typer.Option(help="Command prefix. Overrides BOT_COMMAND_PREFIX."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(help="debug, info, warn or error. Overrides LOG_LEVEL."),
    ] = None,
) -> None:
    """Start the bot and answer commands until interrupted."""
    config = load_config(
        env_file=env_file,
        data_dir_override=data_dir,
        prefix_override=prefix,
        log_level_override=log_level,
    )
    configure_logging(config.log_level)
    logger.info(
        "Bot configured for account %s", mask_phone_number(config.phone_number)
    )
    logger.info("Command prefix: %s", config.command_prefix)

    code = Bot(config).run()
    if code:
        raise typer.Exit(code=code)


@app.command()
def reply(
    text: Annotated[str, typer.Argument(help="Message text, e.g. '!ping'.")],
    prefix: Annotated[str, typer.Option(help="Command prefix.")] = "!",
) -> None:
    """Print the bot's reply to TEXT without contacting Signal."""
    response = CommandHandler(prefix).handle(Message(text=text))
    if response:
        print(response)


@app.command()
def send(
    recipient: Annotated[str, typer.Argument(help="Phone number or group ID.")],
    message: Annotated[str, typer.Argument(help="Message text.")],
    group: Annotated[
        bool, typer.Option("--group", help="Treat RECIPIENT as a group ID.")
    ] = False,
    env_file: EnvFileOption = DEFAULT_ENV_FILE,
) -> None:
    """Send a single message from the bot's account."""
    config = load_config(env_file=env_file)
    configure_logging(config.log_level)
    bot = Bot(config)
    try:
        bot.client.send(Destination(recipient=recipient, is_group=group), message)
    except SendError as exc:
        print(exc)
        raise typer.Exit(code=1) from exc
    print("Sent.")


@app.command()
def doctor(env_file: EnvFileOption = DEFAULT_ENV_FILE) -> None:
    """Check signal-cli and the bot's configuration."""
    from signalbot.doctor import check_environment

    code = check_environment(env_file)
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
