"""Webhook audit trail: append-only JSON Lines with a SHA-256 hash chain.

Each line carries ``prev_hash``, the digest of the line before it. A file
starts a fresh chain, so a rotated backup validates on its own.
"""

from __future__ import annotations

import fcntl
import hashlib
import json
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    WEBHOOK_VERIFIED = "webhook_verified"
    WEBHOOK_REJECTED = "webhook_rejected"
    CHALLENGE_ACCEPTED = "challenge_accepted"
    CHALLENGE_REJECTED = "challenge_rejected"
    PROFILE_UNAVAILABLE = "profile_unavailable"
    MESSAGE_SENT = "message_sent"


class AuditOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _chain_hash(line: str | None) -> str | None:
    return hashlib.sha256(line.encode()).hexdigest() if line is not None else None


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    sender_id: str | None = None
    action: str
    result: AuditOutcome
    details: dict[str, object] | None = None


@dataclass
class ChainValidationResult:
    valid: bool
    broken_at_line: int | None = None
    entries: int = 0


def validate_audit_chain(log_path: Path) -> ChainValidationResult:
    """Walk the file and check each ``prev_hash`` against the line above."""
    previous: str | None = None
    entries = 0
    for number, line in enumerate(log_path.read_text().splitlines(), start=1):
        if not line.strip():
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            return ChainValidationResult(valid=False, broken_at_line=number, entries=entries)
        if not isinstance(entry, dict) or entry.get("prev_hash") != _chain_hash(previous):
            return ChainValidationResult(valid=False, broken_at_line=number, entries=entries)
        previous = line
        entries += 1
    return ChainValidationResult(valid=True, entries=entries)


def _last_line(path: Path) -> str | None:
    if not path.exists():
        return None
    lines = [line for line in path.read_text().splitlines() if line.strip()]
    return lines[-1] if lines else None


class AuditLogger:
    """Appends driver audit events, rotating the file once it reaches ``max_bytes``."""

    def __init__(
        self,
        log_path: str,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
    ) -> None:
        self.log_path = Path(log_path)
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._last_line = _last_line(self.log_path)

    @classmethod
    def from_env(cls, log_path: str) -> AuditLogger:
        return cls(
            log_path=log_path,
            max_bytes=int(os.environ.get("AUDIT_LOG_MAX_BYTES", "10485760")),
            backup_count=int(os.environ.get("AUDIT_LOG_BACKUP_COUNT", "5")),
        )

    def record(
        self,
        event_type: AuditEventType,
        action: str,
        outcome: AuditOutcome,
        sender_id: str | None = None,
        details: dict[str, object] | None = None,
    ) -> AuditEvent:
        """Build an event from driver vocabulary and append it."""
        event = AuditEvent(
            event_type=event_type,
            sender_id=sender_id,
            action=action,
            result=outcome,
            details=details,
        )
        self.log(event)
        return event

    def log(self, event: AuditEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = self.log_path.parent / f".{self.log_path.name}.lock"
        with open(lock_file, "w") as lf:
            fcntl.flock(lf, fcntl.LOCK_EX)
            try:
                if self._rotate_if_full():
                    self._last_line = None
                data = event.model_dump(mode="json")
                data["prev_hash"] = _chain_hash(self._last_line)
                line = json.dumps(data, separators=(",", ":"))
                with open(self.log_path, "a") as f:
                    f.write(line + "\n")
            finally:
                fcntl.flock(lf, fcntl.LOCK_UN)
        self._last_line = line

    def _backup(self, index: int) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{index}")

    def _rotate_if_full(self) -> bool:
        if not self.log_path.exists() or self.log_path.stat().st_size < self._max_bytes:
            return False
        if self._backup_count < 1:
            self.log_path.unlink()
            return True
        # Shift .N-1 -> .N down to live file -> .1; replace() drops the oldest.
        for index in range(self._backup_count, 0, -1):
            source = self.log_path if index == 1 else self._backup(index - 1)
            if source.exists():
                source.replace(self._backup(index))
        return True
