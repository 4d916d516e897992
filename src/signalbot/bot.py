"""The bot: receive, dispatch, reply.

Ties the pieces together on a single ingestion thread::

    signal-cli receive --> consume() --> Bot.handle_message()
                                           |-- CommandHandler.handle()
                                           +-- SignalCli.send()

Sending is synchronous; the next inbound line is not read until the
current reply's ``signal-cli send`` has returned.
"""

from __future__ import annotations

import logging

from signalbot.commands import CommandHandler
from signalbot.config import BotConfig
from signalbot.ingest import consume
from signalbot.models import Message
from signalbot.signal_cli import Destination, SendError, SignalCli
from signalbot.supervisor import Supervisor
from signalbot.validation import mask_phone_number

logger = logging.getLogger(__name__)


class Bot:
    """A command-responding Signal bot for one account."""

    def __init__(self, config: BotConfig, client: SignalCli | None = None) -> None:
        self.config = config
        self.client = client or SignalCli(
            account=config.phone_number,
            data_dir=config.data_dir,
            executable=config.signal_cli,
        )
        self.commands = CommandHandler(config.command_prefix)

    def log_message(self, message: Message) -> None:
        sender = mask_phone_number(message.sender)
        if message.is_group:
            logger.info("[Group: %s] %s: %s", message.group_id, sender, message.text)
        else:
            logger.info("[Direct] %s: %s", sender, message.text)

    def handle_message(self, message: Message) -> str:
        """Log *message*, dispatch it, and send the reply if there is one.

        Send failures are logged and the reply is dropped.  Returns the
        reply text (``""`` when nothing was sent or attempted).
        """
        self.log_message(message)
        reply = self.commands.handle(message)
        if not reply:
            return ""
        destination = Destination.for_message(message)
        try:
            self.client.send(destination, reply)
        except SendError as exc:
            logger.warning("Failed to send response to %s: %s", destination, exc)
        else:
            logger.info("Sent response: %s", reply)
        return reply

    def run(self) -> int:
        """Receive and answer messages until the stream closes.

        Raises :class:`SystemExit` on an unrecoverable read error.
        """
        supervisor = Supervisor(self.client.receive_args())
        proc = supervisor.start()
        supervisor.install_signal_handlers()
        logger.info("Bot is now listening for messages (Ctrl+C to stop)")

        if proc.stdout is None:
            msg = "signal-cli stdout is not piped"
            raise RuntimeError(msg)
        try:
            consume(proc.stdout, self.handle_message)
        except OSError as exc:
            if not supervisor.shutdown_requested:
                logger.critical("Error reading from signal-cli: %s", exc)
                supervisor.finish()
                supervisor.request_shutdown()
                supervisor.join_shutdown()
                raise SystemExit(1) from exc
        supervisor.finish()
        logger.debug("signal-cli output closed")

        if supervisor.shutdown_requested:
            supervisor.join_shutdown()
            return 0
        returncode = supervisor.wait()
        if returncode != 0:
            logger.warning("signal-cli exited with status %d", returncode)
        return 0
