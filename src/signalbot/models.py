"""Data models for inbound Signal traffic.

Two layers live here:

- The **wire record** (:class:`SignalRecord` and friends) mirrors the
  JSON Lines emitted by ``signal-cli receive``.  Every nested level is
  optional and typed ``X | None``; unknown keys are ignored so new
  ``signal-cli`` releases don't break decoding.
- The **message** (:class:`Message`) is the normalized, immutable value
  the rest of the bot works with.

All models are frozen pydantic models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    """Base for ``signal-cli`` JSON shapes (camelCase keys, extras ignored)."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class GroupInfo(_WireModel):
    group_id: str = Field(default="", alias="groupId")
    type: str | None = None


class DataMessage(_WireModel):
    """A user-authored message.

    ``message`` is ``null`` for attachment-only messages and reactions.
    """

    timestamp: int = 0
    message: str | None = None
    group_info: GroupInfo | None = Field(default=None, alias="groupInfo")


class SentMessage(_WireModel):
    """A message sent from another linked device of the same account."""

    timestamp: int = 0
    message: str | None = None
    destination: str | None = None
    destination_number: str | None = Field(default=None, alias="destinationNumber")
    group_info: GroupInfo | None = Field(default=None, alias="groupInfo")


class SyncMessage(_WireModel):
    sent_message: SentMessage | None = Field(default=None, alias="sentMessage")


class Envelope(_WireModel):
    source: str | None = None
    source_number: str | None = Field(default=None, alias="sourceNumber")
    source_uuid: str | None = Field(default=None, alias="sourceUuid")
    source_name: str | None = Field(default=None, alias="sourceName")
    source_device: int | None = Field(default=None, alias="sourceDevice")
    timestamp: int = 0
    data_message: DataMessage | None = Field(default=None, alias="dataMessage")
    sync_message: SyncMessage | None = Field(default=None, alias="syncMessage")


class SignalRecord(_WireModel):
    """One line of ``signal-cli --output=json receive`` output."""

    envelope: Envelope | None = None
    account: str | None = None


class Message(BaseModel):
    """An inbound message, normalized from a data-message envelope.

    Created once per decoded record and discarded after handling.
    Replies go to the group when ``group_id`` is set, otherwise
    directly to ``sender``.
    """

    model_config = ConfigDict(frozen=True)

    sender: str = ""
    text: str = ""
    timestamp: int = 0
    group_id: str | None = None

    @property
    def is_group(self) -> bool:
        """True when the message arrived in a group conversation."""
        return bool(self.group_id)
