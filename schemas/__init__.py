from schemas.application import ApplicationCreate, ApplicationRecord
from schemas.enums import ApplicationStatus, EmploymentStatus, IncomeBracket, LenderDecision, LoanPurpose
from schemas.quote import QuoteRequest, QuoteResponse
from schemas.user import UserRecord
from schemas.workflow import (
    AccountNumberRequest,
    LenderAssignRequest,
    LenderResponseRequest,
    StatusUpdateRequest,
    StepAdvanceRequest,
)

__all__ = [
    "ApplicationCreate",
    "ApplicationRecord",
    "ApplicationStatus",
    "EmploymentStatus",
    "IncomeBracket",
    "LenderDecision",
    "LoanPurpose",
    "QuoteRequest",
    "QuoteResponse",
    "UserRecord",
    "AccountNumberRequest",
    "LenderAssignRequest",
    "LenderResponseRequest",
    "StatusUpdateRequest",
    "StepAdvanceRequest",
]
