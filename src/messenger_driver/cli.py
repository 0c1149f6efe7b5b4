"""Click CLI for sending test messages and checking webhook artifacts."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from messenger_driver.audit import AuditLogger, validate_audit_chain
from messenger_driver.config import DEFAULT_API_URL, DriverConfig
from messenger_driver.driver import FacebookDriver
from messenger_driver.models import (
    Attachment,
    AttachmentType,
    Keyboard,
    OutboundCommand,
    ReplyButton,
    SendAttachment,
    SendText,
    Sender,
)
from messenger_driver.verifier import compute_signature


@click.group()
@click.option("--page-token", envvar="FACEBOOK_PAGE_TOKEN", default=None, help="Page access token.")
@click.option("--api-url", envvar="FACEBOOK_API_URL", default=DEFAULT_API_URL, help="Graph API base URL.")
@click.option("--audit-log", envvar="AUDIT_LOG_PATH", default=None, help="Audit log file path.")
@click.pass_context
def cli(ctx: click.Context, page_token: str | None, api_url: str, audit_log: str | None) -> None:
    """Facebook Messenger driver CLI."""
    ctx.ensure_object(dict)
    ctx.obj["page_token"] = page_token
    ctx.obj["api_url"] = api_url
    ctx.obj["audit_log"] = audit_log


def _send(ctx: click.Context, command: OutboundCommand) -> None:
    page_token = ctx.obj["page_token"]
    if not page_token:
        raise click.UsageError("--page-token (or FACEBOOK_PAGE_TOKEN) is required to send")
    config = DriverConfig(
        page_token=page_token,
        verify_token="",
        api_url=ctx.obj["api_url"],
    )
    audit_log = ctx.obj["audit_log"]
    driver = FacebookDriver(config, audit_logger=AuditLogger(audit_log) if audit_log else None)

    async def run() -> None:
        try:
            await driver.handle(command)
        finally:
            await driver.aclose()

    asyncio.run(run())


@cli.command("send-text")
@click.argument("recipient")
@click.argument("text")
@click.option("--reply", "replies", multiple=True, help="Quick reply label (repeatable).")
@click.pass_context
def send_text(ctx: click.Context, recipient: str, text: str, replies: tuple[str, ...]) -> None:
    """Send a text message, optionally with quick replies."""
    keyboard = Keyboard(buttons=[ReplyButton(label=r) for r in replies]) if replies else None
    _send(ctx, SendText(
        recipient=Sender(id=recipient, display_name=""),
        text=text,
        keyboard=keyboard,
    ))
    click.echo(f"Sent text to {recipient}")


@cli.command("send-attachment")
@click.argument("recipient")
@click.argument("kind", type=click.Choice([t.value for t in AttachmentType]))
@click.option("--path", "path", default=None, type=click.Path(exists=True, dir_okay=False))
@click.option("--url", "url", default=None)
@click.pass_context
def send_attachment(
    ctx: click.Context, recipient: str, kind: str, path: str | None, url: str | None,
) -> None:
    """Upload a local file or reference a URL as an attachment."""
    if (path is None) == (url is None):
        raise click.UsageError("Pass exactly one of --path or --url")
    attachment = Attachment(type=AttachmentType(kind), path=path, url=url)
    _send(ctx, SendAttachment(
        recipient=Sender(id=recipient, display_name=""),
        attachment=attachment,
    ))
    click.echo(f"Sent {kind} to {recipient}")


@cli.command()
@click.argument("body_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--app-secret", envvar="FACEBOOK_APP_SECRET", required=True)
def sign(body_file: str, app_secret: str) -> None:
    """Print the x-hub-signature value for a webhook body."""
    click.echo(compute_signature(Path(body_file).read_bytes(), app_secret))


@cli.command("verify-audit")
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False))
def verify_audit(log_file: str) -> None:
    """Check the hash chain of an audit log."""
    result = validate_audit_chain(Path(log_file))
    if result.valid:
        click.echo(f"Audit chain valid ({result.entries} entries)")
        return
    click.echo(f"Audit chain broken at line {result.broken_at_line}", err=True)
    sys.exit(1)
