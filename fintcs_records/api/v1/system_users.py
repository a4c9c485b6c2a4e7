"""System user endpoints - staff records keyed by EDP number"""

import time
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from fintcs_records.api.v1.schemas import SystemUserCreate, SystemUserResponse
from fintcs_records.api.dependencies import ensure_society_exists, get_request_id
from fintcs_records.api.errors import domain_errors_as_http
from fintcs_records.infrastructure.database.session import get_db
from fintcs_records.infrastructure.database.repositories import SystemUserRepository
from fintcs_records.infrastructure.observability.metrics import record_created
from fintcs_records.infrastructure.observability.logging import log_record_created

router = APIRouter()


@router.post("/system-users", response_model=SystemUserResponse, status_code=201)
def create_system_user(body: SystemUserCreate, request: Request, db: Session = Depends(get_db)):
    """Register a system user; an EDP number already on file returns 409"""
    start_time = time.time()
    request_id = get_request_id(request)
    ensure_society_exists(db, body.society_id)

    with domain_errors_as_http(db, "system_user", request_id):
        user = SystemUserRepository(db).create_system_user(body.model_dump())
        db.commit()

    record_created("system_user")
    log_record_created(
        request_id, "system_user", user.edp_no, str(user.society_id) if user.society_id else None,
        (time.time() - start_time) * 1000,
    )
    return SystemUserResponse.model_validate(user)


@router.get("/system-users", response_model=List[SystemUserResponse])
def list_system_users(
    society_id: Optional[uuid.UUID] = Query(None, description="Restrict to one society"),
    db: Session = Depends(get_db),
):
    return [SystemUserResponse.model_validate(u) for u in SystemUserRepository(db).list_system_users(society_id)]


@router.get("/system-users/{edp_no}", response_model=SystemUserResponse)
def get_system_user(edp_no: str, db: Session = Depends(get_db)):
    user = SystemUserRepository(db).get_by_edp_no(edp_no)
    if not user:
        raise HTTPException(status_code=404, detail="System user not found")
    return SystemUserResponse.model_validate(user)
