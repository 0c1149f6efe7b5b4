"""Facebook Messenger driver: webhook verification and Send API payloads."""

from messenger_driver.config import DriverConfig
from messenger_driver.driver import FacebookDriver
from messenger_driver.envelope import InboundEnvelope
from messenger_driver.exceptions import (
    InvalidRequest,
    InvalidSignature,
    InvalidVerifyToken,
    MalformedPayload,
    ProfileUnavailable,
)

__all__ = [
    "DriverConfig",
    "FacebookDriver",
    "InboundEnvelope",
    "InvalidRequest",
    "InvalidSignature",
    "InvalidVerifyToken",
    "MalformedPayload",
    "ProfileUnavailable",
]
