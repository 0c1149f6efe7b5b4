"""Webhook verification: HMAC signature, payload shape and subscription challenge."""

from __future__ import annotations

import hashlib
import hmac
import logging

from messenger_driver.envelope import InboundEnvelope
from messenger_driver.exceptions import (
    InvalidSignature,
    InvalidVerifyToken,
    MalformedPayload,
)

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-hub-signature"
_SIGNATURE_PREFIX = "sha1="


def compute_signature(raw_body: bytes, app_secret: str) -> str:
    """Return the ``sha1=<hex>`` value Facebook sends for ``raw_body``."""
    digest = hmac.new(app_secret.encode(), raw_body, hashlib.sha1).hexdigest()
    return f"{_SIGNATURE_PREFIX}{digest}"


def verify_signature(envelope: InboundEnvelope, app_secret: str | None) -> None:
    """Check x-hub-signature against the raw body.

    A falsy ``app_secret`` disables the check.
    """
    if not app_secret:
        logger.warning(
            "Facebook app secret not configured; skipping webhook signature check",
        )
        return

    header = envelope.header(SIGNATURE_HEADER)
    if not header:
        raise InvalidSignature("Header signature is not provided")

    expected = compute_signature(envelope.raw_body, app_secret)
    if not hmac.compare_digest(header.encode(), expected.encode()):
        raise InvalidSignature("Invalid signature header")


def verify(envelope: InboundEnvelope, app_secret: str | None) -> None:
    """Validate an inbound message webhook.

    Raises InvalidSignature when the HMAC check fails and MalformedPayload
    when ``entry[0].messaging[0]`` lacks a sender id or a message.
    """
    verify_signature(envelope, app_secret)

    if envelope.sender_id is None or envelope.message is None:
        raise MalformedPayload("Invalid payload")


def is_challenge(envelope: InboundEnvelope) -> bool:
    return envelope.hub_mode == "subscribe" and envelope.hub_verify_token is not None


def respond_to_challenge(envelope: InboundEnvelope, verify_token: str) -> str:
    """Return hub_challenge unchanged if the verify token matches."""
    token = envelope.hub_verify_token
    if token is None or not hmac.compare_digest(token.encode(), verify_token.encode()):
        raise InvalidVerifyToken("Invalid verify token")
    return envelope.hub_challenge or ""
