"""Abstract interface for user storage."""

from abc import ABC, abstractmethod

from srecha.core.entities.user import User


class IUserStore(ABC):
    """Interface for user persistence."""

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None:
        pass

    @abstractmethod
    async def create_user(self, user: User) -> User:
        pass

    @abstractmethod
    async def count_users(self) -> int:
        pass
