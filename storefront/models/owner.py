"""Cart owner identity"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OwnerKind(str, Enum):
    """Which credential a cart is partitioned by"""
    USER = "user"
    SESSION = "session"


@dataclass(frozen=True)
class OwnerKey:
    """
    Identity that partitions cart state.

    Exactly one of an authenticated user id or an anonymous session id,
    tagged by ``kind``. Hashable, so it doubles as a lock/dict key.
    """
    kind: OwnerKind
    id: str

    def __post_init__(self):
        if not self.id:
            raise ValueError("Owner id must be a non-empty string")

    @classmethod
    def user(cls, user_id: str) -> "OwnerKey":
        return cls(OwnerKind.USER, user_id)

    @classmethod
    def session(cls, session_id: str) -> "OwnerKey":
        return cls(OwnerKind.SESSION, session_id)

    @property
    def is_user(self) -> bool:
        return self.kind == OwnerKind.USER

    @property
    def user_id(self) -> Optional[str]:
        return self.id if self.kind == OwnerKind.USER else None

    @property
    def session_id(self) -> Optional[str]:
        return self.id if self.kind == OwnerKind.SESSION else None

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"
