"""Inbound webhook envelope and its typed view.

An envelope is one webhook invocation: the decoded body, the request headers
and the raw bytes the signature was computed over. Field access goes through
pydantic models instead of dotted string paths.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError


class Participant(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, coerce_numbers_to_str=True)

    id: str = ""


class MessagingEvent(BaseModel):
    """A single ``entry[].messaging[]`` item.

    Only ``sender`` is typed; the other fields are kept as sent so a bad
    value in one of them cannot hide the sender or the message.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    sender: Participant | None = None
    recipient: Any = None
    timestamp: Any = None
    message: Any = None
    postback: Any = None


def _lower_headers(headers: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
    normalized: dict[str, list[str]] = {}
    for name, value in headers.items():
        values = [value] if isinstance(value, str) else list(value)
        normalized.setdefault(name.lower(), []).extend(values)
    return normalized


@dataclass(frozen=True, eq=False)
class InboundEnvelope:
    """Immutable view of one inbound webhook request.

    Equality and hashing are by identity: two requests with the same body
    are still two requests.
    """

    payload: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, Sequence[str]] = field(default_factory=dict)
    raw_body: bytes = b""
    query: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(_lower_headers(self.headers)))
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))

    @classmethod
    def from_request(
        cls,
        body: bytes,
        headers: Mapping[str, str | list[str]] | None = None,
        query: Mapping[str, str] | None = None,
    ) -> InboundEnvelope:
        """Build an envelope from raw request parts.

        Non-JSON or non-object bodies decode to an empty payload; the
        verifier reports the missing fields.
        """
        payload: dict[str, Any] = {}
        if body:
            try:
                decoded = json.loads(body)
            except (json.JSONDecodeError, UnicodeDecodeError):
                decoded = None
            if isinstance(decoded, dict):
                payload = decoded

        return cls(
            payload=payload,
            headers=headers or {},
            raw_body=body,
            query=dict(query or {}),
        )

    def header(self, name: str) -> str | None:
        values = self.headers.get(name.lower())
        return values[0] if values else None

    @property
    def messaging(self) -> MessagingEvent | None:
        """Parsed ``entry[0].messaging[0]`` or None if absent."""
        entries = self.payload.get("entry")
        if not isinstance(entries, list) or not entries:
            return None
        first = entries[0]
        if not isinstance(first, dict):
            return None
        events = first.get("messaging")
        if not isinstance(events, list) or not events or not isinstance(events[0], dict):
            return None
        try:
            return MessagingEvent.model_validate(events[0])
        except ValidationError:
            return None

    @property
    def sender_id(self) -> str | None:
        event = self.messaging
        if event is None or event.sender is None or not event.sender.id:
            return None
        return event.sender.id

    @property
    def message(self) -> dict[str, Any] | None:
        event = self.messaging
        if event is None or not isinstance(event.message, dict):
            return None
        return event.message

    def _hub_field(self, name: str) -> str | None:
        # Facebook sends "hub.mode"; some form parsers rewrite it to "hub_mode".
        for key in (f"hub_{name}", f"hub.{name}"):
            if key in self.query:
                return self.query[key]
        for key in (f"hub_{name}", f"hub.{name}"):
            value = self.payload.get(key)
            if value is not None:
                return str(value)
        return None

    @property
    def hub_mode(self) -> str | None:
        return self._hub_field("mode")

    @property
    def hub_verify_token(self) -> str | None:
        return self._hub_field("verify_token")

    @property
    def hub_challenge(self) -> str | None:
        return self._hub_field("challenge")
