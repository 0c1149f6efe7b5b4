"""Shared data models: sender, keyboards, attachments and outbound commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, model_validator

if TYPE_CHECKING:
    from messenger_driver.templates.base import Template


class Sender(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str


# --- Keyboards ---


class ReplyButton(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    payload: str | None = None

    def to_quick_reply(self) -> dict[str, Any]:
        return {
            "content_type": "text",
            "title": self.label,
            "payload": self.payload if self.payload is not None else self.label,
        }


class RequestLocationButton(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_quick_reply(self) -> dict[str, Any]:
        return {"content_type": "location"}


Button = ReplyButton | RequestLocationButton


class Keyboard(BaseModel):
    model_config = ConfigDict(frozen=True)

    buttons: list[Button] = []

    def to_quick_replies(self) -> list[dict[str, Any]]:
        return [button.to_quick_reply() for button in self.buttons]


# --- Attachments ---


class AttachmentType(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"


class Attachment(BaseModel):
    """Outbound attachment: a local file to upload or a URL to reference."""

    model_config = ConfigDict(frozen=True)

    type: AttachmentType
    path: str | None = None
    url: str | None = None
    is_reusable: bool = False

    @model_validator(mode="after")
    def _exactly_one_source(self) -> Attachment:
        if (self.path is None) == (self.url is None):
            raise ValueError("Attachment needs exactly one of path or url")
        return self

    @property
    def is_upload(self) -> bool:
        return self.path is not None


# --- Commands ---


@dataclass(frozen=True)
class SendText:
    recipient: Sender
    text: str
    keyboard: Keyboard | None = None


@dataclass(frozen=True)
class SendAttachment:
    recipient: Sender
    attachment: Attachment


@dataclass(frozen=True)
class SendTemplate:
    recipient: Sender
    template: Template


# Receipts are sent as a template command carrying a ReceiptTemplate.
SendReceipt = SendTemplate

OutboundCommand = SendText | SendAttachment | SendTemplate
