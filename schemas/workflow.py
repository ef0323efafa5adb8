"""
Request bodies for the administrative workflow endpoints.
Fields are optional here; the lifecycle manager decides what is missing or illegal.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class StepAdvanceRequest(BaseModel):
    step: Optional[int] = None


class LenderAssignRequest(BaseModel):
    lender_id: Optional[str] = Field(None, alias="lenderId")
    lender_name: Optional[str] = Field(None, alias="lenderName")

    model_config = {"populate_by_name": True}


class LenderResponseRequest(BaseModel):
    response: Optional[Any] = None
    message: Optional[str] = None


class AccountNumberRequest(BaseModel):
    account_number: Optional[str] = Field(None, alias="accountNumber")

    model_config = {"populate_by_name": True}


class StatusUpdateRequest(BaseModel):
    status: Optional[Any] = None
