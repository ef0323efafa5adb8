from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import InternalError
from models import LoanApplication
from schemas.application import ApplicationRecord


class ApplicationRepository(Protocol):
    """Storage for loan applications. Owns every record; callers get copies."""

    async def add(self, values: dict[str, Any]) -> ApplicationRecord: ...

    async def get(self, application_id: int) -> Optional[ApplicationRecord]: ...

    async def list_all(self) -> list[ApplicationRecord]: ...

    async def list_by_owner(self, owner_id: int) -> list[ApplicationRecord]: ...

    async def update(self, application_id: int, changes: dict[str, Any]) -> Optional[ApplicationRecord]: ...


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise driver/ORM failures as InternalError."""
    try:
        yield
    except SQLAlchemyError as e:
        raise InternalError(f"Storage failure while {action}") from e


class SqlAlchemyApplicationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, values: dict[str, Any]) -> ApplicationRecord:
        with storage_errors("creating application"):
            app = LoanApplication(**values)
            self.session.add(app)
            await self.session.flush()
            await self.session.refresh(app)
            return ApplicationRecord.model_validate(app)

    async def get(self, application_id: int) -> Optional[ApplicationRecord]:
        with storage_errors("loading application"):
            app = await self.session.get(LoanApplication, application_id)
            return ApplicationRecord.model_validate(app) if app else None

    async def list_all(self) -> list[ApplicationRecord]:
        with storage_errors("listing applications"):
            result = await self.session.execute(select(LoanApplication).order_by(LoanApplication.id))
            return [ApplicationRecord.model_validate(a) for a in result.scalars().all()]

    async def list_by_owner(self, owner_id: int) -> list[ApplicationRecord]:
        with storage_errors("listing applications"):
            result = await self.session.execute(
                select(LoanApplication)
                .where(LoanApplication.owner_id == owner_id)
                .order_by(LoanApplication.id)
            )
            return [ApplicationRecord.model_validate(a) for a in result.scalars().all()]

    async def update(self, application_id: int, changes: dict[str, Any]) -> Optional[ApplicationRecord]:
        """Apply all changes in a single flush (one UPDATE statement)."""
        with storage_errors("updating application"):
            app = await self.session.get(LoanApplication, application_id)
            if not app:
                return None
            for field, value in changes.items():
                setattr(app, field, value)
            await self.session.flush()
            return ApplicationRecord.model_validate(app)
