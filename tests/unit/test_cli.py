"""Tests for the driver CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from messenger_driver.audit import AuditEvent, AuditEventType, AuditLogger
from messenger_driver.cli import cli
from messenger_driver.models import AttachmentType, SendAttachment, SendText
from messenger_driver.verifier import compute_signature


def _mock_driver() -> MagicMock:
    driver = MagicMock()
    driver.handle = AsyncMock()
    driver.aclose = AsyncMock()
    return driver


def test_send_text_dispatches_one_command() -> None:
    driver = _mock_driver()
    with patch("messenger_driver.cli.FacebookDriver", return_value=driver) as driver_cls:
        result = CliRunner().invoke(cli, [
            "--page-token", "tok",
            "send-text", "12345", "hello", "--reply", "Yes", "--reply", "No",
        ])

    assert result.exit_code == 0, result.output
    assert "Sent text to 12345" in result.output
    assert driver_cls.call_args[0][0].page_token == "tok"
    driver.handle.assert_awaited_once()
    command = driver.handle.call_args[0][0]
    assert isinstance(command, SendText)
    assert command.recipient.id == "12345"
    assert [b.label for b in command.keyboard.buttons] == ["Yes", "No"]
    driver.aclose.assert_awaited_once()


def test_send_requires_page_token(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.delenv("FACEBOOK_PAGE_TOKEN", raising=False)
    result = CliRunner().invoke(cli, ["send-text", "12345", "hello"])
    assert result.exit_code != 0
    assert "page-token" in result.output


def test_send_attachment_by_url() -> None:
    driver = _mock_driver()
    with patch("messenger_driver.cli.FacebookDriver", return_value=driver):
        result = CliRunner().invoke(cli, [
            "--page-token", "tok",
            "send-attachment", "12345", "image", "--url", "https://example.com/a.png",
        ])

    assert result.exit_code == 0, result.output
    command = driver.handle.call_args[0][0]
    assert isinstance(command, SendAttachment)
    assert command.attachment.type == AttachmentType.IMAGE
    assert command.attachment.url == "https://example.com/a.png"


def test_send_attachment_needs_one_source() -> None:
    result = CliRunner().invoke(cli, ["--page-token", "tok", "send-attachment", "12345", "image"])
    assert result.exit_code != 0


def test_driver_closed_when_send_fails() -> None:
    driver = _mock_driver()
    driver.handle.side_effect = RuntimeError("boom")
    with patch("messenger_driver.cli.FacebookDriver", return_value=driver):
        result = CliRunner().invoke(cli, ["--page-token", "tok", "send-text", "1", "hi"])
    assert result.exit_code != 0
    driver.aclose.assert_awaited_once()


def test_sign_prints_signature(tmp_path: Path) -> None:
    body_file = tmp_path / "body.json"
    body_file.write_bytes(b'{"object":"page"}')
    result = CliRunner().invoke(cli, ["sign", str(body_file), "--app-secret", "s3cret"])
    assert result.exit_code == 0
    assert result.output.strip() == compute_signature(b'{"object":"page"}', "s3cret")


def test_verify_audit_valid_and_broken(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(str(log_file))
    for i in range(2):
        logger.log(AuditEvent(
            event_type=AuditEventType.MESSAGE_SENT, action=f"send_{i}", result="success",
        ))

    runner = CliRunner()
    result = runner.invoke(cli, ["verify-audit", str(log_file)])
    assert result.exit_code == 0
    assert "valid (2 entries)" in result.output

    lines = log_file.read_text().splitlines()
    first = json.loads(lines[0])
    first["action"] = "tampered"
    lines[0] = json.dumps(first, separators=(",", ":"))
    log_file.write_text("\n".join(lines) + "\n")

    result = runner.invoke(cli, ["verify-audit", str(log_file)])
    assert result.exit_code == 1
