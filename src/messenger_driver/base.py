"""Capability contract every messaging-platform driver implements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from messenger_driver.envelope import InboundEnvelope
from messenger_driver.models import OutboundCommand, Sender
from messenger_driver.received import ReceivedMessage


@runtime_checkable
class MessagingDriver(Protocol):
    def verify_request(self, envelope: InboundEnvelope) -> None: ...

    def is_verification_request(self, envelope: InboundEnvelope) -> bool: ...

    def verify_webhook(self, envelope: InboundEnvelope) -> str: ...

    async def get_user(self, envelope: InboundEnvelope) -> Sender: ...

    def get_message(self, envelope: InboundEnvelope) -> ReceivedMessage: ...

    async def handle(self, command: OutboundCommand) -> None: ...
