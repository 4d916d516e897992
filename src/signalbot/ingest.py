"""Decode ``signal-cli`` JSON Lines into messages.

Each line of ``signal-cli --output=json receive`` is one JSON record.
Malformed lines are logged and skipped; records without a data message
(receipts, typing indicators, sync messages) are accepted but ignored.
Errors raised while *reading* the stream are not handled here: they
end the loop and are the caller's to deal with.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import ValidationError

from signalbot.models import Message, SignalRecord

logger = logging.getLogger(__name__)

_PREVIEW_LEN = 80


def decode_record(line: str) -> SignalRecord:
    """Strictly decode one JSON line.  Raises :class:`ValidationError`."""
    return SignalRecord.model_validate_json(line)


def to_message(record: SignalRecord) -> Message | None:
    """Normalize a data-message record, or ``None`` for anything else."""
    envelope = record.envelope
    if envelope is None or envelope.data_message is None:
        return None
    data = envelope.data_message
    group_id = data.group_info.group_id if data.group_info is not None else None
    return Message(
        sender=envelope.source_number or "",
        text=data.message or "",
        timestamp=data.timestamp,
        group_id=group_id or None,
    )


def consume(lines: Iterable[str], on_message: Callable[[Message], None]) -> int:
    """Feed every data message in *lines* to *on_message*.

    Returns the number of messages delivered once *lines* is exhausted.
    """
    delivered = 0
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        try:
            record = decode_record(stripped)
        except ValidationError as exc:
            logger.warning(
                "Failed to parse message (%d errors): %s",
                exc.error_count(),
                stripped[:_PREVIEW_LEN],
            )
            continue
        message = to_message(record)
        if message is None:
            logger.debug("Skipping non-data record")
            continue
        on_message(message)
        delivered += 1
    return delivered
