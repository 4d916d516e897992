"""signal-bot: a command-responding bot for Signal.

Listens to ``signal-cli`` in streaming JSON mode, answers ``!help``,
``!ping``, ``!echo`` and ``!about``, and replies through ``signal-cli send``.
"""

from __future__ import annotations
