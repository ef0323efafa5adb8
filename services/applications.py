"""
Lifecycle of a stored loan application: creation with a server-side quote, the
seven-step administrative workflow, lender assignment and decision, account number
and status changes.

Every operation goes through the repository; nothing is cached between calls.
Arguments are checked before anything is read, and each mutation is a single
repository update carrying every changed field plus ``updated_at``.

Policies:
- steps only move forward; a smaller step than the current one is rejected,
  and a completed application accepts no further step;
- a step completion timestamp is written once and kept on re-advance;
- the lender decision does not change ``status``; use ``set_status`` for that.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from errors import InvalidArgument, NotFound, ValidationError
from repositories.applications import ApplicationRepository
from schemas.application import ApplicationCreate, ApplicationRecord, step_timestamp_field
from schemas.enums import ApplicationStatus, LenderDecision
from services.calculator import DEFAULT_ANNUAL_RATE, compute_schedule

FIRST_STEP = 1
LAST_STEP = 7

# Statuses an administrator may set directly; step labels and "completed"
# only come from advance_step.
SETTABLE_STATUSES = frozenset({ApplicationStatus.PENDING, ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})

_STEP_STATUSES = {
    1: ApplicationStatus.STEP1,
    2: ApplicationStatus.STEP2,
    3: ApplicationStatus.STEP3,
    4: ApplicationStatus.STEP4,
    5: ApplicationStatus.STEP5,
    6: ApplicationStatus.STEP6,
    7: ApplicationStatus.COMPLETED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def status_for_step(step: int) -> ApplicationStatus:
    """Status reached by completing ``step``; the last step completes the application."""
    return _STEP_STATUSES[step]


def _require_text(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{name} is required")
    return value.strip()


class ApplicationLifecycleManager:
    def __init__(
        self,
        repository: ApplicationRepository,
        annual_rate: Decimal = DEFAULT_ANNUAL_RATE,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repository = repository
        self.annual_rate = annual_rate
        self.clock = clock

    async def create(
        self,
        payload: Union[ApplicationCreate, Mapping[str, Any]],
        owner_id: Optional[int] = None,
    ) -> ApplicationRecord:
        """
        Validate a submission, stamp the authoritative quote and persist it as pending.
        Client-supplied monthlyPayment/totalCost are ignored.
        """
        if isinstance(payload, ApplicationCreate):
            data = payload
        else:
            try:
                data = ApplicationCreate.model_validate(payload)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e) from e

        schedule = compute_schedule(data.amount, data.duration, self.annual_rate)
        now = self.clock()
        values = {
            **data.to_storage_dict(),
            "owner_id": owner_id,
            "monthly_payment": str(schedule.periodic_payment),
            "total_cost": str(schedule.total_repayment),
            "status": ApplicationStatus.PENDING.value,
            "current_step": 0,
            "created_at": now,
            "updated_at": now,
        }
        return await self.repository.add(values)

    async def get(self, application_id: int) -> ApplicationRecord:
        record = await self.repository.get(application_id)
        if record is None:
            raise NotFound(f"Loan application {application_id} not found")
        return record

    async def list_all(self) -> list[ApplicationRecord]:
        return await self.repository.list_all()

    async def list_by_owner(self, owner_id: int) -> list[ApplicationRecord]:
        return await self.repository.list_by_owner(owner_id)

    async def advance_step(self, application_id: int, step: Any) -> ApplicationRecord:
        if isinstance(step, bool) or not isinstance(step, int) or not FIRST_STEP <= step <= LAST_STEP:
            raise InvalidArgument(f"step must be an integer between {FIRST_STEP} and {LAST_STEP}")
        record = await self.get(application_id)
        if record.status == ApplicationStatus.COMPLETED:
            raise InvalidArgument(f"Loan application {application_id} is already completed")
        if step < record.current_step:
            raise InvalidArgument(f"step {step} is behind the current step {record.current_step}")

        now = self.clock()
        changes: dict[str, Any] = {
            "current_step": step,
            "status": status_for_step(step).value,
            "updated_at": now,
        }
        if record.step_completed_at(step) is None:
            changes[step_timestamp_field(step)] = now
        return await self._update(application_id, changes)

    async def assign_lender(self, application_id: int, lender_id: Any, lender_name: Any) -> ApplicationRecord:
        lender_id = _require_text(lender_id, "lenderId")
        lender_name = _require_text(lender_name, "lenderName")
        await self.get(application_id)
        return await self._update(
            application_id,
            {"lender_id": lender_id, "lender_name": lender_name, "updated_at": self.clock()},
        )

    async def record_lender_response(
        self,
        application_id: int,
        response: Any,
        message: Optional[str] = None,
    ) -> ApplicationRecord:
        try:
            decision = LenderDecision(response)
        except ValueError as e:
            allowed = ", ".join(d.value for d in LenderDecision)
            raise InvalidArgument(f"response must be one of: {allowed}") from e
        if message is not None and not isinstance(message, str):
            raise InvalidArgument("message must be text")
        await self.get(application_id)
        return await self._update(
            application_id,
            {
                "lender_response": decision.value,
                "lender_message": message.strip() if message and message.strip() else None,
                "updated_at": self.clock(),
            },
        )

    async def set_account_number(self, application_id: int, account_number: Any) -> ApplicationRecord:
        account_number = _require_text(account_number, "accountNumber")
        await self.get(application_id)
        return await self._update(
            application_id,
            {"account_number": account_number, "updated_at": self.clock()},
        )

    async def set_status(self, application_id: int, status: Any) -> ApplicationRecord:
        try:
            new_status = ApplicationStatus(status)
        except ValueError:
            new_status = None
        if new_status not in SETTABLE_STATUSES:
            allowed = ", ".join(sorted(s.value for s in SETTABLE_STATUSES))
            raise InvalidArgument(f"Invalid status; expected one of: {allowed}")
        await self.get(application_id)
        return await self._update(
            application_id,
            {"status": new_status.value, "updated_at": self.clock()},
        )

    async def _update(self, application_id: int, changes: dict[str, Any]) -> ApplicationRecord:
        record = await self.repository.update(application_id, changes)
        if record is None:
            # Deleted between the read and the write
            raise NotFound(f"Loan application {application_id} not found")
        return record
