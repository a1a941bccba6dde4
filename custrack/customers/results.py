"""
Result variants returned by the customers access layer.

Storage failures never surface as exceptions. Each operation returns one
of the types below so callers can tell expected outcomes (not found, no
addresses, duplicate) from storage failures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class Stage(str, Enum):
    """Where a statement failed."""
    PREPARE = "prepare"
    BIND = "bind"
    EXECUTE = "execute"


@dataclass(frozen=True)
class Found:
    value: Any


@dataclass(frozen=True)
class NotFound:
    key: Any = None


@dataclass(frozen=True)
class NoRelationship:
    """The customer exists but owns no addresses."""
    customer_id: int


@dataclass(frozen=True)
class Duplicate:
    key: str


@dataclass(frozen=True)
class Declined:
    """Operator answered no to a confirmation."""


@dataclass(frozen=True)
class Count:
    value: int


@dataclass(frozen=True)
class Done:
    rowcount: int = 0
    lastrowid: Optional[int] = None


@dataclass(frozen=True)
class StorageError:
    stage: Stage
    detail: str

    def __str__(self) -> str:
        return f"{self.stage.value} error: {self.detail}"


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of the two-statement customer delete."""
    addresses: Union[Done, StorageError]
    customer: Union[Done, StorageError, None]
    rolled_back: bool = False

    @property
    def ok(self) -> bool:
        return isinstance(self.addresses, Done) and isinstance(self.customer, Done)


def succeeded(result: Any) -> bool:
    """True for the success variants."""
    if isinstance(result, CascadeResult):
        return result.ok
    return isinstance(result, (Found, Count, Done))
