"""Read-only view over an inbound ``message`` object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _as_object(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class ReceivedAttachment:
    type: str
    url: str | None = None


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


class ReceivedMessage:
    """Message sent by the user: text, quick reply, attachments or location."""

    def __init__(self, message: dict[str, Any] | None) -> None:
        self._message = message or {}

    @property
    def raw(self) -> dict[str, Any]:
        return self._message

    @property
    def text(self) -> str | None:
        return self._message.get("text")

    @property
    def quick_reply_payload(self) -> str | None:
        return _as_object(self._message.get("quick_reply")).get("payload")

    def _attachment_items(self) -> list[dict[str, Any]]:
        items = self._message.get("attachments")
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    @property
    def attachments(self) -> list[ReceivedAttachment]:
        result: list[ReceivedAttachment] = []
        for item in self._attachment_items():
            if item.get("type") == "location":
                continue
            payload = _as_object(item.get("payload"))
            result.append(ReceivedAttachment(type=item.get("type", ""), url=payload.get("url")))
        return result

    @property
    def has_attachment(self) -> bool:
        return bool(self.attachments)

    @property
    def location(self) -> Location | None:
        for item in self._attachment_items():
            if item.get("type") != "location":
                continue
            coordinates = _as_object(_as_object(item.get("payload")).get("coordinates"))
            if "lat" in coordinates and "long" in coordinates:
                return Location(
                    latitude=float(coordinates["lat"]),
                    longitude=float(coordinates["long"]),
                )
        return None
