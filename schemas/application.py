from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from schemas.enums import ApplicationStatus, EmploymentStatus, IncomeBracket, LenderDecision, LoanPurpose
from schemas.quote import MAX_AMOUNT, MAX_DURATION, MIN_AMOUNT, MIN_DURATION


class ApplicationCreate(BaseModel):
    """Submitted loan application as sent by the multi-step form."""

    amount: int = Field(..., ge=MIN_AMOUNT, le=MAX_AMOUNT)
    duration: int = Field(..., ge=MIN_DURATION, le=MAX_DURATION)
    purpose: LoanPurpose

    first_name: str = Field(..., alias="firstName", min_length=2)
    last_name: str = Field(..., alias="lastName", min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    date_of_birth: date = Field(..., alias="dateOfBirth")

    employment_status: EmploymentStatus = Field(..., alias="employmentStatus")
    monthly_income: IncomeBracket = Field(..., alias="monthlyIncome")
    monthly_expenses: Optional[int] = Field(None, alias="monthlyExpenses", ge=0)

    terms_accepted: bool = Field(..., alias="termsAccepted")
    credit_check_accepted: bool = Field(..., alias="creditCheckAccepted")
    marketing_accepted: bool = Field(False, alias="marketingAccepted")

    # Client-side preview figures; recomputed server-side and never stored
    monthly_payment: Optional[Any] = Field(None, alias="monthlyPayment")
    total_cost: Optional[Any] = Field(None, alias="totalCost")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True, "use_enum_values": True}

    @field_validator("terms_accepted")
    @classmethod
    def _terms_must_be_accepted(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must accept the terms and conditions")
        return v

    @field_validator("credit_check_accepted")
    @classmethod
    def _credit_check_must_be_accepted(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must accept the credit check")
        return v

    @field_validator("marketing_accepted", mode="before")
    @classmethod
    def _marketing_defaults_to_false(cls, v: Any) -> Any:
        return False if v is None else v

    def to_storage_dict(self) -> dict[str, Any]:
        """Applicant and loan fields, snake_case, enums as plain values."""
        return self.model_dump(exclude={"monthly_payment", "total_cost"})


class ApplicationRecord(BaseModel):
    """A stored application, serialized with camelCase keys for the client."""

    id: int
    owner_id: Optional[int] = None

    amount: int
    duration: int
    purpose: str
    monthly_payment: str
    total_cost: str

    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: date
    employment_status: str
    monthly_income: str
    monthly_expenses: Optional[int] = None

    terms_accepted: bool
    credit_check_accepted: bool
    marketing_accepted: bool = False

    status: ApplicationStatus = ApplicationStatus.PENDING
    current_step: int = 0
    step1_completed_at: Optional[datetime] = None
    step2_completed_at: Optional[datetime] = None
    step3_completed_at: Optional[datetime] = None
    step4_completed_at: Optional[datetime] = None
    step5_completed_at: Optional[datetime] = None
    step6_completed_at: Optional[datetime] = None
    step7_completed_at: Optional[datetime] = None

    lender_id: Optional[str] = None
    lender_name: Optional[str] = None
    lender_response: Optional[LenderDecision] = None
    lender_message: Optional[str] = None
    account_number: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @field_validator(
        "created_at",
        "updated_at",
        "step1_completed_at",
        "step2_completed_at",
        "step3_completed_at",
        "step4_completed_at",
        "step5_completed_at",
        "step6_completed_at",
        "step7_completed_at",
    )
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive datetimes; everything is written in UTC
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def step_completed_at(self, step: int) -> Optional[datetime]:
        return getattr(self, step_timestamp_field(step))

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def step_timestamp_field(step: int) -> str:
    return f"step{step}_completed_at"
