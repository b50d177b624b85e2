"""Caller identity as handed over by the upstream auth collaborator.

The core never authenticates anyone; it only compares user ids and roles.
"""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """An already-authenticated caller."""

    user_id: str
    role: str = Role.USER.value
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
