"""Errors raised by the Messenger driver."""

from __future__ import annotations


class InvalidRequest(Exception):  # noqa: N818
    """Inbound webhook request failed authentication or validation."""


class InvalidSignature(InvalidRequest):
    """The x-hub-signature header is missing or does not match the body."""


class MalformedPayload(InvalidRequest):
    """The payload lacks a sender id or a message."""


class InvalidVerifyToken(InvalidRequest):
    """Subscription challenge carried the wrong verify token."""


class ProfileUnavailable(InvalidRequest):
    """The sender's profile could not be fetched or decoded."""
