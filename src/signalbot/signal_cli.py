"""Thin wrapper over the ``signal-cli`` executable.

``signal-cli`` owns the Signal protocol; the bot only builds argument
lists for it.  Receiving is a long-running child process (see
:mod:`signalbot.supervisor`); sending is one synchronous invocation per
reply.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass

from signalbot.models import Message
from signalbot.validation import (
    is_valid_identifier,
    is_valid_phone_number,
    mask_phone_number,
)

logger = logging.getLogger(__name__)

SEND_DELAY_SECONDS = 0.1


class SendError(Exception):
    """A reply could not be delivered."""


class InvalidDestinationError(SendError):
    """The destination failed validation; ``signal-cli`` was not invoked."""


@dataclass(frozen=True)
class Destination:
    """Where a reply goes: a group id or a phone number."""

    recipient: str
    is_group: bool = False

    @classmethod
    def for_message(cls, message: Message) -> Destination:
        """Reply to the group the message came from, else to its sender."""
        if message.group_id:
            return cls(recipient=message.group_id, is_group=True)
        return cls(recipient=message.sender)

    def validate(self) -> None:
        """Raise :class:`InvalidDestinationError` if the recipient is malformed."""
        if self.is_group:
            if not is_valid_identifier(self.recipient):
                msg = f"Invalid group ID: {self.recipient!r}"
                raise InvalidDestinationError(msg)
        elif not is_valid_phone_number(self.recipient):
            msg = f"Invalid phone number: {mask_phone_number(self.recipient)}"
            raise InvalidDestinationError(msg)

    def __str__(self) -> str:
        if self.is_group:
            return f"group {self.recipient}"
        return mask_phone_number(self.recipient)


@dataclass(frozen=True)
class SignalCli:
    """Argument builder and sender for one ``signal-cli`` account."""

    account: str
    data_dir: str
    executable: str = "signal-cli"
    send_delay: float = SEND_DELAY_SECONDS

    def base_args(self) -> list[str]:
        return [self.executable, "-a", self.account, "--config", self.data_dir]

    def receive_args(self) -> list[str]:
        """Stream incoming messages as JSON Lines until killed."""
        return [*self.base_args(), "--output=json", "receive", "--timeout", "-1"]

    def send_args(self, destination: Destination, text: str) -> list[str]:
        if destination.is_group:
            target = ["-g", destination.recipient]
        else:
            target = [destination.recipient]
        return [*self.base_args(), "send", *target, "-m", text]

    def send(self, destination: Destination, text: str) -> None:
        """Send *text* once, after a short pause to avoid rate limiting.

        Raises :class:`InvalidDestinationError` before anything runs if
        the destination is malformed, and :class:`SendError` if
        ``signal-cli`` cannot be run or exits non-zero.  Never retries.
        """
        destination.validate()
        time.sleep(self.send_delay)
        try:
            result = subprocess.run(  # noqa: S603
                self.send_args(destination, text),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as exc:
            msg = f"signal-cli not found: {self.executable}"
            raise SendError(msg) from exc
        except (OSError, ValueError) as exc:
            # ValueError: arguments containing NUL bytes
            msg = f"signal-cli send could not run: {exc}"
            raise SendError(msg) from exc
        if result.returncode != 0:
            msg = (
                f"signal-cli send failed: exit status {result.returncode}, "
                f"output: {result.stdout.strip()}"
            )
            raise SendError(msg)
        logger.debug("Sent %d chars to %s", len(text), destination)
