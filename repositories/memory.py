"""
Dict-backed repositories. Each instance owns its own storage; nothing is shared at
module level. Records are validated on the way in and copied on the way out.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from schemas.application import ApplicationRecord
from schemas.user import UserRecord


class InMemoryApplicationRepository:
    def __init__(self) -> None:
        self._records: dict[int, ApplicationRecord] = {}
        self._next_id = 1

    async def add(self, values: dict[str, Any]) -> ApplicationRecord:
        record = ApplicationRecord.model_validate({**values, "id": self._next_id})
        self._records[record.id] = record
        self._next_id += 1
        return record.model_copy(deep=True)

    async def get(self, application_id: int) -> Optional[ApplicationRecord]:
        record = self._records.get(application_id)
        return record.model_copy(deep=True) if record else None

    async def list_all(self) -> list[ApplicationRecord]:
        return [self._records[k].model_copy(deep=True) for k in sorted(self._records)]

    async def list_by_owner(self, owner_id: int) -> list[ApplicationRecord]:
        return [r for r in await self.list_all() if r.owner_id == owner_id]

    async def update(self, application_id: int, changes: dict[str, Any]) -> Optional[ApplicationRecord]:
        record = self._records.get(application_id)
        if record is None:
            return None
        updated = ApplicationRecord.model_validate({**record.model_dump(), **changes})
        self._records[application_id] = updated
        return updated.model_copy(deep=True)


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._users: dict[int, UserRecord] = {}

    async def get(self, user_id: int) -> Optional[UserRecord]:
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> Optional[UserRecord]:
        return next((u for u in self._users.values() if u.username == username), None)

    async def add(self, username: str) -> UserRecord:
        user = UserRecord(id=len(self._users) + 1, username=username, created_at=datetime.now(timezone.utc))
        self._users[user.id] = user
        return user
