"""FastAPI webhook endpoint for the Facebook driver."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from messenger_driver.audit import AuditLogger
from messenger_driver.config import DriverConfig
from messenger_driver.driver import FacebookDriver
from messenger_driver.envelope import InboundEnvelope
from messenger_driver.exceptions import InvalidRequest, ProfileUnavailable
from messenger_driver.models import OutboundCommand

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook/facebook"

MessageHandler = Callable[
    [FacebookDriver, InboundEnvelope],
    Awaitable[Iterable[OutboundCommand] | None],
]


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    config = DriverConfig.from_env()
    audit_logger = (
        AuditLogger.from_env(config.audit_log_path) if config.audit_log_path else None
    )
    return create_app(FacebookDriver(config, audit_logger=audit_logger))


def create_app(
    driver: FacebookDriver,
    on_message: MessageHandler | None = None,
) -> FastAPI:
    """Create the webhook app.

    ``on_message`` receives each verified envelope and may return commands,
    which are sent through the driver in order.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        await driver.aclose()

    app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(WEBHOOK_PATH)
    async def challenge(request: Request) -> Response:
        envelope = InboundEnvelope.from_request(
            b"", dict(request.headers), dict(request.query_params),
        )
        if not driver.is_verification_request(envelope):
            return JSONResponse({"error": "Not a verification request"}, status_code=400)
        try:
            return PlainTextResponse(driver.verify_webhook(envelope))
        except InvalidRequest:
            return JSONResponse({"error": "Invalid verify token"}, status_code=403)

    @app.post(WEBHOOK_PATH)
    async def webhook(request: Request) -> Response:
        body = await request.body()
        envelope = InboundEnvelope.from_request(
            body, dict(request.headers), dict(request.query_params),
        )
        try:
            driver.verify_request(envelope)
        except InvalidRequest as exc:
            return JSONResponse({"error": str(exc)}, status_code=401)

        if on_message is not None:
            try:
                commands = await on_message(driver, envelope)
            except ProfileUnavailable:
                return JSONResponse({"error": "Can not get user profile"}, status_code=502)
            for command in commands or ():
                await driver.handle(command)

        return JSONResponse({"status": "ok"})

    return app
