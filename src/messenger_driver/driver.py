"""Facebook Messenger driver."""

from __future__ import annotations

import logging
import mimetypes
import os

import httpx

from messenger_driver import outgoing, verifier
from messenger_driver.audit import AuditEventType, AuditLogger, AuditOutcome
from messenger_driver.config import DriverConfig
from messenger_driver.envelope import InboundEnvelope
from messenger_driver.exceptions import InvalidRequest, ProfileUnavailable
from messenger_driver.models import OutboundCommand, Sender
from messenger_driver.outgoing import UPLOAD_FIELD, WireRequest
from messenger_driver.profile import SenderResolver
from messenger_driver.received import ReceivedAttachment, ReceivedMessage

logger = logging.getLogger(__name__)


class FacebookDriver:
    """Verifies Messenger webhooks and sends commands through the Send API.

    The HTTP client is injected or created on first use, then reused for
    every call this driver makes.
    """

    def __init__(
        self,
        config: DriverConfig,
        client: httpx.AsyncClient | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._audit = audit_logger
        self._resolver: SenderResolver | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout, verify=True)
        return self._client

    def _get_resolver(self) -> SenderResolver:
        if self._resolver is None:
            self._resolver = SenderResolver(
                self._get_client(), self.config.api_url, self.config.page_token,
            )
        return self._resolver

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._resolver = None

    # --- Inbound ---

    def verify_request(self, envelope: InboundEnvelope) -> None:
        """Raise InvalidRequest unless the envelope is signed and well formed."""
        try:
            verifier.verify(envelope, self.config.app_secret)
        except InvalidRequest as exc:
            logger.info("Rejected Facebook webhook: %s", exc)
            self._log_event(
                AuditEventType.WEBHOOK_REJECTED, "verify_request", AuditOutcome.FAILURE,
                sender_id=envelope.sender_id,
                details={"reason": type(exc).__name__},
            )
            raise
        self._log_event(
            AuditEventType.WEBHOOK_VERIFIED, "verify_request", AuditOutcome.SUCCESS,
            sender_id=envelope.sender_id,
        )

    def is_verification_request(self, envelope: InboundEnvelope) -> bool:
        return verifier.is_challenge(envelope)

    def verify_webhook(self, envelope: InboundEnvelope) -> str:
        try:
            challenge = verifier.respond_to_challenge(envelope, self.config.verify_token)
        except InvalidRequest:
            self._log_event(AuditEventType.CHALLENGE_REJECTED, "verify_webhook", AuditOutcome.FAILURE)
            raise
        self._log_event(AuditEventType.CHALLENGE_ACCEPTED, "verify_webhook", AuditOutcome.SUCCESS)
        return challenge

    async def get_user(self, envelope: InboundEnvelope) -> Sender:
        try:
            return await self._get_resolver().resolve(envelope)
        except ProfileUnavailable:
            self._log_event(
                AuditEventType.PROFILE_UNAVAILABLE, "get_user", AuditOutcome.FAILURE,
                sender_id=envelope.sender_id,
            )
            raise

    def get_message(self, envelope: InboundEnvelope) -> ReceivedMessage:
        return ReceivedMessage(envelope.message)

    async def download_attachment(self, attachment: ReceivedAttachment) -> bytes:
        if not attachment.url:
            raise ValueError("Attachment has no URL")
        resp = await self._get_client().get(attachment.url)
        resp.raise_for_status()
        return resp.content

    # --- Outbound ---

    async def handle(self, command: OutboundCommand) -> None:
        """Send one command. HTTP and transport errors propagate unchanged."""
        request = outgoing.build(command)
        resp = await self._post(request)
        resp.raise_for_status()
        logger.debug("Sent %s to %s", type(command).__name__, command.recipient.id)
        self._log_event(
            AuditEventType.MESSAGE_SENT, type(command).__name__, AuditOutcome.SUCCESS,
            sender_id=command.recipient.id,
            details={"status_code": resp.status_code},
        )

    async def _post(self, request: WireRequest) -> httpx.Response:
        url = f"{self.config.api_url}{request.path}"
        params = {"access_token": self.config.page_token}
        client = self._get_client()

        if not request.is_multipart:
            return await client.post(url, params=params, data=request.form_fields)

        if request.upload_path is None:
            # httpx only encodes multipart when a file part is present.
            files = {
                name: (None, value.encode())
                for name, value in (request.multipart_fields or {}).items()
            }
            return await client.post(url, params=params, files=files)

        mime_type = mimetypes.guess_type(request.upload_path)[0] or "application/octet-stream"
        with open(request.upload_path, "rb") as fh:
            files = {UPLOAD_FIELD: (os.path.basename(request.upload_path), fh, mime_type)}
            return await client.post(
                url, params=params, data=request.multipart_fields, files=files,
            )

    def _log_event(
        self,
        event_type: AuditEventType,
        action: str,
        outcome: AuditOutcome,
        sender_id: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        if self._audit:
            self._audit.record(event_type, action, outcome, sender_id=sender_id, details=details)
