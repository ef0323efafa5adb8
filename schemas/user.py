from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserRecord(BaseModel):
    id: int
    username: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
