"""User repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from datadesk.models import User


class UserRepository:
    """Lookup and creation of user accounts."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address."""
        async with self._sessionmaker() as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def create(self, name: str, email: str, password_hash: str, role: str) -> User:
        """Create a user account."""
        user = User(name=name, email=email, password_hash=password_hash, role=role)
        async with self._sessionmaker() as session:
            session.add(user)
            await session.commit()
        return user
