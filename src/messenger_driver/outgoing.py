"""Outbound payload builder: commands to Send API wire requests."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from messenger_driver.models import (
    OutboundCommand,
    SendAttachment,
    SendTemplate,
    SendText,
    Sender,
)

MESSAGES_PATH = "me/messages"
UPLOAD_FIELD = "filedata"


@dataclass(frozen=True)
class WireRequest:
    """One POST to the Send API.

    Exactly one of ``form_fields`` and ``multipart_fields`` is set.
    ``upload_path`` names a local file to stream as the ``filedata`` part.
    """

    path: str
    form_fields: dict[str, str] | None = None
    multipart_fields: dict[str, str] | None = None
    upload_path: str | None = None

    @property
    def is_multipart(self) -> bool:
        return self.multipart_fields is not None


def _encode(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _recipient(recipient: Sender) -> str:
    return _encode({"id": recipient.id})


def build_text(command: SendText) -> WireRequest:
    message: dict[str, Any] = {"text": command.text}
    if command.keyboard is not None and command.keyboard.buttons:
        message["quick_replies"] = command.keyboard.to_quick_replies()
    return WireRequest(
        path=MESSAGES_PATH,
        form_fields={
            "recipient": _recipient(command.recipient),
            "message": _encode(message),
        },
    )


def build_attachment(command: SendAttachment) -> WireRequest:
    attachment = command.attachment
    payload: dict[str, Any] = {}
    if not attachment.is_upload:
        payload = {"url": attachment.url, "is_reusable": attachment.is_reusable}

    message = {"attachment": {"type": attachment.type.value, "payload": payload}}
    return WireRequest(
        path=MESSAGES_PATH,
        multipart_fields={
            "recipient": _recipient(command.recipient),
            "message": _encode(message),
        },
        upload_path=attachment.path,
    )


def build_template(command: SendTemplate) -> WireRequest:
    return WireRequest(
        path=MESSAGES_PATH,
        form_fields={
            "recipient": _recipient(command.recipient),
            "message": _encode(command.template.transform()),
        },
    )


def build(command: OutboundCommand) -> WireRequest:
    if isinstance(command, SendText):
        return build_text(command)
    if isinstance(command, SendAttachment):
        return build_attachment(command)
    if isinstance(command, SendTemplate):
        return build_template(command)
    raise TypeError(f"Unsupported command: {type(command).__name__}")
