"""User directory used to resolve assignee ids into display names.

The engine never owns users: tasks carry opaque ``assigned_to`` /
``created_by`` ids and whatever directory the host application provides is
consulted only for searching and sorting by assignee name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol


@dataclass(frozen=True)
class UserProfile:
    id: str
    name: str
    email: str = ""
    avatar: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name


class UserDirectory(Protocol):
    def resolve(self, user_id: str) -> Optional[UserProfile]:
        ...


class InMemoryUserDirectory:
    """Dict-backed :class:`UserDirectory`."""

    def __init__(self, users: Iterable[UserProfile] = ()) -> None:
        self._users: dict[str, UserProfile] = {u.id: u for u in users}

    def resolve(self, user_id: str) -> Optional[UserProfile]:
        return self._users.get(user_id)

    def add(self, user: UserProfile) -> None:
        self._users[user.id] = user

    def __len__(self) -> int:
        return len(self._users)

    @classmethod
    def with_sample_users(cls) -> "InMemoryUserDirectory":
        return cls(SAMPLE_USERS)


SAMPLE_USERS: tuple[UserProfile, ...] = (
    UserProfile(id="1", name="John Doe", email="john@example.com"),
    UserProfile(id="2", name="Jane Smith", email="jane@example.com"),
    UserProfile(id="3", name="Mike Johnson", email="mike@example.com"),
    UserProfile(id="4", name="Sarah Wilson", email="sarah@example.com"),
    UserProfile(id="5", name="David Brown", email="david@example.com"),
)
