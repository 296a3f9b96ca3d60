"""
Glow record store: validation, normalization and persistence of per-object
glow data keyed by object UUID.

Every operation validates its input before touching storage and returns a
StoreResult. Storage failures are caught here, logged against the operation
and object id, and reported as STORAGE_UNAVAILABLE.
"""

import sqlite3
from datetime import datetime, timezone
from typing import Optional

from .config import get_upsert_conflict_retries
from .db import get_db, GLOW_TABLE
from .schema import GlowRecord, UpsertOutcome, DeleteOutcome, ErrorKind, StoreResult
from .validation import is_valid_object_id, is_valid_glow_data, normalize_object_id
from ..util.logging import logger


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _check_object_id(operation: str, object_id: Optional[str]) -> Optional[ErrorKind]:
    if is_valid_object_id(object_id):
        return None
    logger.log_glow_operation(operation, repr(object_id), "invalid",
                              details={"reason": "Invalid UUID format"})
    return ErrorKind.INVALID_IDENTIFIER


def get_glow(object_id: str) -> StoreResult[GlowRecord]:
    """Get the glow record for an object id."""
    error = _check_object_id("get", object_id)
    if error:
        return StoreResult.failure(error)

    normalized_id = normalize_object_id(object_id)
    try:
        with get_db() as conn:
            row = conn.execute(
                f"SELECT object_id, data, updated_at FROM {GLOW_TABLE} WHERE object_id = ?",
                (normalized_id,)
            ).fetchone()

        if row is None:
            logger.log_glow_operation("get", normalized_id, "not_found")
            return StoreResult.failure(ErrorKind.NOT_FOUND)

        record = GlowRecord(
            object_id=row["object_id"],
            data=row["data"],
            updated_at=_parse_timestamp(row["updated_at"])
        )
    except Exception as e:
        logger.log_glow_operation("get", normalized_id, "failed", details={"error": type(e).__name__})
        logger.error(f"Failed to get glow record '{normalized_id}': {e}", exc_info=True)
        return StoreResult.failure(ErrorKind.STORAGE_UNAVAILABLE)

    logger.log_glow_operation("get", normalized_id)
    return StoreResult.success(record)


def _write_record(object_id: str, data: str) -> UpsertOutcome:
    """Find-then-write for one object id inside a single write transaction.

    BEGIN IMMEDIATE takes the database write lock up front, so concurrent
    upserts for the same id serialize and the later one sees the earlier row.
    """
    with get_db() as conn:
        conn.execute("BEGIN IMMEDIATE")
        try:
            row = conn.execute(
                f"SELECT updated_at FROM {GLOW_TABLE} WHERE object_id = ?",
                (object_id,)
            ).fetchone()

            now = _utcnow()
            if row is not None:
                # never move the timestamp backwards, even if the clock did
                updated_at = max(now, _parse_timestamp(row["updated_at"]))
                conn.execute(
                    f"UPDATE {GLOW_TABLE} SET data = ?, updated_at = ? WHERE object_id = ?",
                    (data, updated_at.isoformat(), object_id)
                )
            else:
                updated_at = now
                conn.execute(
                    f"INSERT INTO {GLOW_TABLE} (object_id, data, updated_at) VALUES (?, ?, ?)",
                    (object_id, data, updated_at.isoformat())
                )
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise

    return UpsertOutcome(object_id=object_id, updated_at=updated_at, created=row is None)


def upsert_glow(object_id: str, data: Optional[str]) -> StoreResult[UpsertOutcome]:
    """Create or replace the glow data for an object id.

    An insert that loses a race to another writer fails on the primary key;
    it is retried, and the retry finds the row and updates it.
    """
    error = _check_object_id("upsert", object_id)
    if error:
        return StoreResult.failure(error)

    if not is_valid_glow_data(data):
        logger.log_glow_operation("upsert", object_id, "invalid",
                                  data=data if isinstance(data, str) else repr(data),
                                  details={"reason": "Invalid data format"})
        return StoreResult.failure(ErrorKind.INVALID_DATA_FORMAT)

    normalized_id = normalize_object_id(object_id)
    attempts = get_upsert_conflict_retries()
    try:
        for attempt in range(1, attempts + 1):
            try:
                outcome = _write_record(normalized_id, data)
            except sqlite3.IntegrityError as e:
                logger.log_glow_operation("upsert", normalized_id, "conflict",
                                          details={"attempt": attempt, "error": str(e)})
                continue

            logger.log_glow_operation("upsert", normalized_id, data=data,
                                      details={"operation": "create" if outcome.created else "update"})
            return StoreResult.success(outcome)
    except Exception as e:
        logger.log_glow_operation("upsert", normalized_id, "failed", details={"error": type(e).__name__})
        logger.error(f"Failed to save glow record '{normalized_id}': {e}", exc_info=True)
        return StoreResult.failure(ErrorKind.STORAGE_UNAVAILABLE)

    logger.log_glow_operation("upsert", normalized_id, "failed",
                              details={"reason": f"Conflict persisted after {attempts} attempts"})
    return StoreResult.failure(ErrorKind.CONFLICT)


def delete_glow(object_id: str) -> StoreResult[DeleteOutcome]:
    """Permanently remove the glow record for an object id."""
    error = _check_object_id("delete", object_id)
    if error:
        return StoreResult.failure(error)

    normalized_id = normalize_object_id(object_id)
    try:
        with get_db() as conn:
            cursor = conn.execute(
                f"DELETE FROM {GLOW_TABLE} WHERE object_id = ?",
                (normalized_id,)
            )
            deleted = cursor.rowcount
    except Exception as e:
        logger.log_glow_operation("delete", normalized_id, "failed", details={"error": type(e).__name__})
        logger.error(f"Failed to delete glow record '{normalized_id}': {e}", exc_info=True)
        return StoreResult.failure(ErrorKind.STORAGE_UNAVAILABLE)

    if not deleted:
        logger.log_glow_operation("delete", normalized_id, "not_found")
        return StoreResult.failure(ErrorKind.NOT_FOUND)

    logger.log_glow_operation("delete", normalized_id)
    return StoreResult.success(DeleteOutcome(object_id=normalized_id))
