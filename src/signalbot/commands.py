"""Command parsing and reply builders.

A command is a message whose text starts with the configured prefix,
e.g. ``!echo hello``.  Everything else is ordinary conversation and
produces no reply.  Handlers are pure string builders; dispatch is
total, so every input maps to a reply (possibly empty).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from importlib.metadata import version as pkg_version

from signalbot.models import Message

PONG = "\U0001f3d3 Pong!"  # 🏓
ECHO_PROMPT = "Please provide a message to echo!"


def parse_command(text: str, prefix: str) -> tuple[str, list[str]] | None:
    """Split ``<prefix>name arg...`` into a lower-cased name and arguments.

    Returns ``None`` when *text* is not a command or is only the prefix.
    """
    if not text.startswith(prefix):
        return None
    parts = text[len(prefix) :].split()
    if not parts:
        return None
    return parts[0].lower(), parts[1:]


class CommandHandler:
    """Maps a :class:`Message` to a reply string."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._commands: dict[str, Callable[[Sequence[str]], str]] = {
            "help": lambda _args: self.help(),
            "ping": lambda _args: self.ping(),
            "echo": self.echo,
            "about": lambda _args: self.about(),
        }

    @property
    def command_names(self) -> list[str]:
        return list(self._commands)

    def handle(self, message: Message) -> str:
        """Return the reply for *message*, or ``""`` if there is none."""
        parsed = parse_command(message.text, self.prefix)
        if parsed is None:
            return ""
        name, args = parsed
        command = self._commands.get(name)
        if command is None:
            return self.unknown(name)
        return command(args)

    # -- Replies --

    def help(self) -> str:
        p = self.prefix
        return (
            "Available commands:\n"
            f"{p}help - Show this help message\n"
            f"{p}ping - Check if bot is alive\n"
            f"{p}echo <text> - Echo back your message\n"
            f"{p}about - Information about this bot"
        )

    def ping(self) -> str:
        return PONG

    def echo(self, args: Sequence[str]) -> str:
        if not args:
            return ECHO_PROMPT
        return " ".join(args)

    def about(self) -> str:
        return (
            f"Signal Bot v{pkg_version('signal-bot')}\n"
            "A simple Signal bot written in Python\n"
            f"Type {self.prefix}help for available commands"
        )

    def unknown(self, name: str) -> str:
        return f"Unknown command: {name}\nType {self.prefix}help for available commands"
