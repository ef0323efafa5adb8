from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import User
from repositories.applications import storage_errors
from schemas.user import UserRecord


class UserRepository(Protocol):
    async def get(self, user_id: int) -> Optional[UserRecord]: ...

    async def get_by_username(self, username: str) -> Optional[UserRecord]: ...

    async def add(self, username: str) -> UserRecord: ...


class SqlAlchemyUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: int) -> Optional[UserRecord]:
        with storage_errors("loading user"):
            user = await self.session.get(User, user_id)
            return UserRecord.model_validate(user) if user else None

    async def get_by_username(self, username: str) -> Optional[UserRecord]:
        with storage_errors("loading user"):
            result = await self.session.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()
            return UserRecord.model_validate(user) if user else None

    async def add(self, username: str) -> UserRecord:
        with storage_errors("creating user"):
            user = User(username=username, created_at=datetime.now(timezone.utc))
            self.session.add(user)
            await self.session.flush()
            return UserRecord.model_validate(user)
