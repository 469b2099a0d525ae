"""Two-case outcome returned by store-backed operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class StoreErrorKind(str, Enum):
    """Broad categories of store failures."""

    TRANSPORT = "transport"
    PERMISSION = "permission"
    CONSTRAINT = "constraint"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class NotificationStoreError:
    """Description of why a store operation did not complete."""

    kind: StoreErrorKind
    operation: str
    message: str


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: NotificationStoreError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise RuntimeError(f"{self.error.operation} failed: {self.error.message}")

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Success[T], Failure]


__all__ = [
    "Failure",
    "NotificationStoreError",
    "Result",
    "StoreErrorKind",
    "Success",
]
