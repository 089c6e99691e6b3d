"""Crash-safe JSON history of per-session usage.

The history lives in one JSON document::

    {"version": 1, "sessions": [{"session_id": ..., "cost": ..., ...}, ...]}

Writes go to a sibling temp file which is fsynced, re-read and validated
before ``os.replace`` moves it over the primary, so readers only ever see
a complete document. Before each swap the current (valid) primary is
copied to ``<primary>.bak``, keeping the backup one generation behind.

Concurrent writers are not serialized: two overlapping read-modify-write
cycles can lose one insert. Renames keep each file whole, nothing more.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

from ccstatus.types.records import RecoveryOutcome, SessionRecord

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class StoreCorruptedError(Exception):
    """Raised when the history file exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Corrupt usage history {path}: {reason}")
        self.path = path
        self.reason = reason


def decode_history(text: str) -> list[SessionRecord]:
    """Parse a history document. Raises ValueError if it is malformed."""
    try:
        data = json.loads(text)
    except RecursionError as exc:
        raise ValueError("document is nested too deeply") from exc
    if not isinstance(data, dict):
        raise ValueError("top level is not an object")
    version = data.get("version", SCHEMA_VERSION)
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise ValueError(f"unsupported version {version!r}")
    sessions = data.get("sessions")
    if not isinstance(sessions, list):
        raise ValueError("'sessions' is not a list")
    records: list[SessionRecord] = []
    for entry in sessions:
        if not isinstance(entry, dict):
            raise ValueError("session entry is not an object")
        records.append(SessionRecord.from_dict(entry))
    return records


def encode_history(records: list[SessionRecord]) -> bytes:
    document: dict[str, Any] = {
        "version": SCHEMA_VERSION,
        "sessions": [r.to_dict() for r in records],
    }
    return (json.dumps(document, indent=2) + "\n").encode("utf-8")


class RecordStore:
    """Usage history keyed by session id, one record per id."""

    def __init__(self, path: Path, *, clock: Callable[[], float] = time.time) -> None:
        self._path = path
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    @property
    def backup_path(self) -> Path:
        return self._path.with_name(self._path.name + ".bak")

    def _temp_for(self, target: Path) -> Path:
        return target.with_name(f"{target.name}.{os.getpid()}.tmp")

    # -- Reading ----------------------------------------------------------

    def load_all(self) -> list[SessionRecord]:
        """Return every stored record; an absent file is an empty history.

        Raises :class:`StoreCorruptedError` if the file cannot be parsed;
        callers should run :meth:`recover` and retry.
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as exc:
            raise StoreCorruptedError(self._path, str(exc)) from exc
        try:
            return decode_history(text)
        except (ValueError, TypeError) as exc:
            raise StoreCorruptedError(self._path, str(exc)) from exc

    def _read_valid_bytes(self, path: Path) -> bytes | None:
        """Return the file's bytes if they hold a valid history, else None."""
        try:
            payload = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            return None
        try:
            decode_history(payload.decode("utf-8"))
        except (ValueError, TypeError):
            return None
        return payload

    # -- Recovery ---------------------------------------------------------

    def recover(self) -> RecoveryOutcome:
        """Make the primary file usable before anything else touches it.

        A valid or missing primary is left alone. Otherwise the backup is
        copied over it byte for byte if it parses, or the history is reset
        to empty. Corrupt content never raises.
        """
        try:
            self.load_all()
            return RecoveryOutcome.READY
        except StoreCorruptedError as exc:
            logger.warning("%s", exc)

        backup = self._read_valid_bytes(self.backup_path)
        if backup is not None:
            outcome, payload = RecoveryOutcome.RESTORED, backup
        else:
            outcome, payload = RecoveryOutcome.REINITIALIZED, encode_history([])

        try:
            self._write_atomic(self._path, payload)
        except OSError as exc:
            logger.error("Failed to rewrite %s during recovery: %s", self._path, exc)
        else:
            logger.warning("Usage history %s: %s", outcome.value, self._path)
        return outcome

    # -- Writing ----------------------------------------------------------

    def upsert(self, record: SessionRecord, *, stamp: bool = True) -> bool:
        """Insert *record*, replacing any earlier record with the same id.

        The record's timestamp is set to the write time unless *stamp* is
        False. Returns False (and writes nothing) for unidentifiable
        sessions. Raises OSError if the write fails, in which case the
        primary file is unchanged.
        """
        if not record.is_persistable:
            logger.debug("Not persisting session without an id")
            return False
        if stamp:
            record = replace(record, timestamp=self._clock())

        records = [r for r in self.load_all() if r.session_id != record.session_id]
        records.append(record)
        self._commit(records)
        return True

    def prune(
        self,
        *,
        keep: int | None = None,
        max_age_days: float | None = None,
        now: float | None = None,
    ) -> int:
        """Drop old records. Returns how many were removed.

        ``keep`` retains the N most recent records by timestamp;
        ``max_age_days`` removes records older than that. Both may be given.
        """
        records = self.load_all()
        survivors = sorted(records, key=lambda r: r.timestamp, reverse=True)

        if max_age_days is not None and max_age_days > 0:
            cutoff = (now if now is not None else self._clock()) - max_age_days * 86400
            survivors = [r for r in survivors if r.timestamp >= cutoff]
        if keep is not None and keep >= 0:
            survivors = survivors[:keep]

        removed = len(records) - len(survivors)
        if removed:
            survivors.sort(key=lambda r: r.timestamp)
            self._commit(survivors)
            logger.info("Pruned %d records from %s", removed, self._path)
        return removed

    def _commit(self, records: list[SessionRecord]) -> None:
        """Refresh the backup, then atomically replace the primary."""
        payload = encode_history(records)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._stage(self._path, payload)
        try:
            self._refresh_backup()
            os.replace(tmp, self._path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def _refresh_backup(self) -> None:
        current = self._read_valid_bytes(self._path)
        if current is None:
            return
        self._write_atomic(self.backup_path, current)

    def _write_atomic(self, target: Path, payload: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._stage(target, payload)
        try:
            os.replace(tmp, target)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def _stage(self, target: Path, payload: bytes) -> Path:
        """Write *payload* next to *target* and verify it reads back intact."""
        tmp = self._temp_for(target)
        try:
            with open(tmp, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            written = tmp.read_bytes()
            if written != payload:
                raise OSError(f"Short write to {tmp}")
            decode_history(written.decode("utf-8"))
        except ValueError as exc:
            tmp.unlink(missing_ok=True)
            raise OSError(f"Refusing to install invalid history: {exc}") from exc
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        return tmp
