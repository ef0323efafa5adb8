from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from api.deps import get_application_manager, get_current_user, require_user
from config import settings
from errors import Unauthorized
from logging_config import get_audit_logger
from schemas.user import UserRecord
from schemas.workflow import (
    AccountNumberRequest,
    LenderAssignRequest,
    LenderResponseRequest,
    StatusUpdateRequest,
    StepAdvanceRequest,
)
from services.applications import ApplicationLifecycleManager

router = APIRouter(prefix="/api/loan-applications", tags=["loan-applications"])

logger = logging.getLogger(__name__)
audit = get_audit_logger()


@router.get("")
async def list_applications(
    owner_id: Optional[int] = Query(None, alias="ownerId"),
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    if owner_id is not None:
        records = await manager.list_by_owner(owner_id)
    else:
        records = await manager.list_all()
    return [r.to_response() for r in records]


@router.get("/mine")
async def list_my_applications(
    user: UserRecord = Depends(require_user),
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    records = await manager.list_by_owner(user.id)
    return [r.to_response() for r in records]


@router.get("/{application_id}")
async def get_application(
    application_id: int,
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    return (await manager.get(application_id)).to_response()


@router.post("", status_code=201)
async def create_application(
    payload: dict[str, Any] = Body(...),
    user: Optional[UserRecord] = Depends(get_current_user),
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    # Validation is done by the manager so schema errors come back as field-level 400s
    if user is None and settings.require_authenticated_applicant:
        raise Unauthorized("Authentication required")
    record = await manager.create(payload, owner_id=user.id if user else None)
    logger.info(
        "Loan application %s created amount=%s duration=%s owner=%s",
        record.id,
        record.amount,
        record.duration,
        record.owner_id,
    )
    return record.to_response()


@router.patch("/{application_id}/step")
async def advance_step(
    application_id: int,
    body: StepAdvanceRequest,
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    record = await manager.advance_step(application_id, body.step)
    audit.info("Application %s advanced to step %s (status=%s)", record.id, record.current_step, record.status.value)
    return record.to_response()


@router.patch("/{application_id}/lender")
async def assign_lender(
    application_id: int,
    body: LenderAssignRequest,
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    record = await manager.assign_lender(application_id, body.lender_id, body.lender_name)
    audit.info("Application %s assigned to lender %s", record.id, record.lender_id)
    return record.to_response()


@router.patch("/{application_id}/lender-response")
async def record_lender_response(
    application_id: int,
    body: LenderResponseRequest,
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    record = await manager.record_lender_response(application_id, body.response, body.message)
    audit.info("Application %s lender response %s", record.id, record.lender_response.value)
    return record.to_response()


@router.patch("/{application_id}/account-number")
async def set_account_number(
    application_id: int,
    body: AccountNumberRequest,
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    record = await manager.set_account_number(application_id, body.account_number)
    audit.info("Application %s account number issued", record.id)
    return record.to_response()


@router.patch("/{application_id}/status")
async def update_status(
    application_id: int,
    body: StatusUpdateRequest,
    manager: ApplicationLifecycleManager = Depends(get_application_manager),
):
    record = await manager.set_status(application_id, body.status)
    audit.info("Application %s status set to %s", record.id, record.status.value)
    return record.to_response()
