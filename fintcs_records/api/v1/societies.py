"""Society endpoints - the tenants every record is scoped to"""

import time
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from fintcs_records.api.v1.schemas import SocietyCreate, SocietyResponse, SocietyUpdate
from fintcs_records.api.dependencies import get_request_id, parse_record_id
from fintcs_records.api.errors import domain_errors_as_http
from fintcs_records.infrastructure.database.session import get_db
from fintcs_records.infrastructure.database.repositories import SocietyRepository
from fintcs_records.infrastructure.observability.metrics import record_created
from fintcs_records.infrastructure.observability.logging import log_record_changed, log_record_created

router = APIRouter()


@router.post("/societies", response_model=SocietyResponse, status_code=201)
def create_society(body: SocietyCreate, request: Request, db: Session = Depends(get_db)):
    start_time = time.time()
    request_id = get_request_id(request)

    with domain_errors_as_http(db, "society", request_id):
        society = SocietyRepository(db).create_society(**body.model_dump())
        db.commit()

    record_created("society")
    log_record_created(request_id, "society", None, str(society.id), (time.time() - start_time) * 1000)
    return SocietyResponse.model_validate(society)


@router.get("/societies", response_model=List[SocietyResponse])
def list_societies(db: Session = Depends(get_db)):
    return [SocietyResponse.model_validate(s) for s in SocietyRepository(db).list_societies()]


@router.get("/societies/{society_id}", response_model=SocietyResponse)
def get_society(society_id: str, db: Session = Depends(get_db)):
    society = SocietyRepository(db).get_society(parse_record_id(society_id, "society"))
    if not society:
        raise HTTPException(status_code=404, detail="Society not found")
    return SocietyResponse.model_validate(society)


@router.put("/societies/{society_id}", response_model=SocietyResponse)
def update_society(society_id: str, body: SocietyUpdate, request: Request, db: Session = Depends(get_db)):
    """Change the fields present in the body; the rest are left as stored"""
    request_id = get_request_id(request)
    repo = SocietyRepository(db)
    society = repo.get_society(parse_record_id(society_id, "society"))
    if not society:
        raise HTTPException(status_code=404, detail="Society not found")

    changes = body.model_dump(exclude_unset=True)
    with domain_errors_as_http(db, "society", request_id):
        society = repo.update_society(society, changes)
        db.commit()

    log_record_changed(request_id, "society", str(society.id), "updated", sorted(changes))
    return SocietyResponse.model_validate(society)
