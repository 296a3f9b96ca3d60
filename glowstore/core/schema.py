"""
Typed results for the glow store.
Store operations return a StoreResult instead of raising; the HTTP layer maps
error kinds to status codes.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class GlowRecord:
    object_id: str
    data: str
    updated_at: datetime


@dataclass(frozen=True)
class UpsertOutcome:
    object_id: str
    updated_at: datetime
    created: bool


@dataclass(frozen=True)
class DeleteOutcome:
    object_id: str


class ErrorKind(str, Enum):
    INVALID_IDENTIFIER = "invalid_identifier"
    INVALID_DATA_FORMAT = "invalid_data_format"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"  # insert lost a race and every retry-as-update failed
    STORAGE_UNAVAILABLE = "storage_unavailable"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind) -> "StoreResult[T]":
        return cls(error=error)
