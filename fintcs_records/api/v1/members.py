"""Member endpoints - creation assigns the next MEM_nnn number"""

import time
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from fintcs_records.api.v1.schemas import MemberCreate, MemberResponse, MemberUpdate, NextNumberResponse
from fintcs_records.api.dependencies import ensure_society_exists, get_request_id, parse_record_id
from fintcs_records.api.errors import domain_errors_as_http
from fintcs_records.infrastructure.database.session import get_db
from fintcs_records.infrastructure.database.repositories import MemberRepository
from fintcs_records.infrastructure.observability.metrics import record_created
from fintcs_records.infrastructure.observability.logging import log_record_changed, log_record_created

router = APIRouter()


@router.post("/members", response_model=MemberResponse, status_code=201)
def create_member(body: MemberCreate, request: Request, db: Session = Depends(get_db)):
    """
    Create a member.

    When mem_no is omitted the next number after the highest stored MEM_nnn
    is assigned; a colliding concurrent insert triggers a retry with a fresh
    number. A supplied mem_no that already exists returns 409.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    ensure_society_exists(db, body.society_id)

    with domain_errors_as_http(db, "member", request_id):
        member = MemberRepository(db).create_member(body.model_dump(exclude={"mem_no"}), mem_no=body.mem_no)
        db.commit()

    record_created("member")
    log_record_created(
        request_id, "member", member.mem_no, str(member.society_id) if member.society_id else None,
        (time.time() - start_time) * 1000,
    )
    return MemberResponse.model_validate(member)


@router.get("/members/next-number", response_model=NextNumberResponse)
def preview_member_number(request: Request, db: Session = Depends(get_db)):
    """Number the next member would receive; not reserved"""
    with domain_errors_as_http(db, "member", get_request_id(request)):
        number = MemberRepository(db).next_member_number()
    return NextNumberResponse(entity="member", number=number)


@router.get("/members", response_model=List[MemberResponse])
def list_members(
    society_id: Optional[uuid.UUID] = Query(None, description="Restrict to one society"),
    db: Session = Depends(get_db),
):
    return [MemberResponse.model_validate(m) for m in MemberRepository(db).list_members(society_id)]


@router.get("/members/{member_id}", response_model=MemberResponse)
def get_member(member_id: str, db: Session = Depends(get_db)):
    member = MemberRepository(db).get_member(parse_record_id(member_id, "member"))
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return MemberResponse.model_validate(member)


@router.put("/members/{member_id}", response_model=MemberResponse)
def update_member(member_id: str, body: MemberUpdate, request: Request, db: Session = Depends(get_db)):
    """
    Change member details.

    mem_no is not accepted here: once issued, a member number never changes,
    so a body carrying it is rejected with 422.
    """
    request_id = get_request_id(request)
    repo = MemberRepository(db)
    member = repo.get_member(parse_record_id(member_id, "member"))
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    changes = body.model_dump(exclude_unset=True)
    ensure_society_exists(db, changes.get("society_id"))
    with domain_errors_as_http(db, "member", request_id):
        member = repo.update_member(member, changes)
        db.commit()

    log_record_changed(request_id, "member", str(member.id), "updated", sorted(changes))
    return MemberResponse.model_validate(member)
