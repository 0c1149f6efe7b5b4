"""Sender profile lookup with a per-envelope cache."""

from __future__ import annotations

import logging
from weakref import WeakKeyDictionary

import httpx

from messenger_driver.envelope import InboundEnvelope
from messenger_driver.exceptions import MalformedPayload, ProfileUnavailable
from messenger_driver.models import Sender

logger = logging.getLogger(__name__)


class SenderResolver:
    """Resolves the envelope's sender through the Graph user-profile endpoint.

    At most one lookup is made per envelope; the cached Sender lives as long
    as the envelope does.
    """

    def __init__(self, client: httpx.AsyncClient, api_url: str, page_token: str) -> None:
        self._client = client
        self._api_url = api_url
        self._page_token = page_token
        self._cache: WeakKeyDictionary[InboundEnvelope, Sender] = WeakKeyDictionary()

    async def resolve(self, envelope: InboundEnvelope) -> Sender:
        cached = self._cache.get(envelope)
        if cached is not None:
            return cached

        sender_id = envelope.sender_id
        if sender_id is None:
            raise MalformedPayload("Invalid payload")

        try:
            resp = await self._client.get(
                f"{self._api_url}{sender_id}",
                params={"access_token": self._page_token},
            )
            resp.raise_for_status()
            profile = resp.json()
            display_name = f"{profile['first_name']} {profile['last_name']}"
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Profile lookup failed for sender %s: %s", sender_id, exc)
            raise ProfileUnavailable("Can not get user profile") from exc

        sender = Sender(id=sender_id, display_name=display_name)
        self._cache[envelope] = sender
        return sender
