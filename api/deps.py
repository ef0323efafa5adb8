from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from errors import Unauthorized
from repositories import SqlAlchemyApplicationRepository, SqlAlchemyUserRepository, UserRepository
from schemas.user import UserRecord
from services.applications import ApplicationLifecycleManager


def get_application_manager(db: AsyncSession = Depends(get_db)) -> ApplicationLifecycleManager:
    return ApplicationLifecycleManager(
        SqlAlchemyApplicationRepository(db),
        annual_rate=settings.annual_interest_rate,
    )


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return SqlAlchemyUserRepository(db)


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    users: UserRepository = Depends(get_user_repository),
) -> Optional[UserRecord]:
    """Resolve the caller from X-User-Id. No header means anonymous; a bad id is rejected."""
    if x_user_id is None or not x_user_id.strip():
        return None
    try:
        user_id = int(x_user_id)
    except ValueError as e:
        raise Unauthorized("Invalid session") from e
    user = await users.get(user_id)
    if user is None:
        raise Unauthorized("Invalid session")
    return user


async def require_user(user: Optional[UserRecord] = Depends(get_current_user)) -> UserRecord:
    if user is None:
        raise Unauthorized("Authentication required")
    return user
