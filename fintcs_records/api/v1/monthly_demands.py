"""Monthly demand endpoints - per-EDP dues statements for a month"""

import time
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from fintcs_records.api.v1.schemas import MonthlyDemandCreate, MonthlyDemandResponse, MonthlyDemandUpdate
from fintcs_records.api.dependencies import ensure_society_exists, get_request_id, parse_record_id
from fintcs_records.api.errors import domain_errors_as_http
from fintcs_records.infrastructure.database.models import MonthlyDemand
from fintcs_records.infrastructure.database.session import get_db
from fintcs_records.infrastructure.database.repositories import MonthlyDemandRepository
from fintcs_records.infrastructure.observability.metrics import record_created
from fintcs_records.infrastructure.observability.logging import log_record_changed, log_record_created

router = APIRouter()


def _load_demand(repo: MonthlyDemandRepository, demand_id: str) -> MonthlyDemand:
    demand = repo.get_demand(parse_record_id(demand_id, "monthly demand"))
    if not demand:
        raise HTTPException(status_code=404, detail="Monthly demand not found")
    return demand


@router.post("/monthly-demands", response_model=MonthlyDemandResponse, status_code=201)
def create_monthly_demand(body: MonthlyDemandCreate, request: Request, db: Session = Depends(get_db)):
    start_time = time.time()
    request_id = get_request_id(request)
    ensure_society_exists(db, body.society_id)

    with domain_errors_as_http(db, "monthly_demand", request_id):
        demand = MonthlyDemandRepository(db).create_demand(body.model_dump())
        db.commit()

    record_created("monthly_demand")
    log_record_created(
        request_id, "monthly_demand", None, str(demand.society_id) if demand.society_id else None,
        (time.time() - start_time) * 1000,
    )
    return MonthlyDemandResponse.model_validate(demand)


@router.get("/monthly-demands", response_model=List[MonthlyDemandResponse])
def list_monthly_demands(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2099),
    society_id: Optional[uuid.UUID] = Query(None, description="Restrict to one society"),
    db: Session = Depends(get_db),
):
    """Demands for one month, ordered by EDP number"""
    demands = MonthlyDemandRepository(db).list_for_period(month, year, society_id)
    return [MonthlyDemandResponse.model_validate(d) for d in demands]


@router.get("/monthly-demands/{demand_id}", response_model=MonthlyDemandResponse)
def get_monthly_demand(demand_id: str, db: Session = Depends(get_db)):
    return MonthlyDemandResponse.model_validate(_load_demand(MonthlyDemandRepository(db), demand_id))


@router.put("/monthly-demands/{demand_id}", response_model=MonthlyDemandResponse)
def update_monthly_demand(
    demand_id: str,
    body: MonthlyDemandUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    request_id = get_request_id(request)
    repo = MonthlyDemandRepository(db)
    demand = _load_demand(repo, demand_id)

    changes = body.model_dump(exclude_unset=True)
    ensure_society_exists(db, changes.get("society_id"))
    with domain_errors_as_http(db, "monthly_demand", request_id):
        demand = repo.update_demand(demand, changes)
        db.commit()

    log_record_changed(request_id, "monthly_demand", str(demand.id), "updated", sorted(changes))
    return MonthlyDemandResponse.model_validate(demand)


@router.delete("/monthly-demands/{demand_id}", status_code=204)
def delete_monthly_demand(demand_id: str, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    repo = MonthlyDemandRepository(db)
    demand = _load_demand(repo, demand_id)
    record_id = str(demand.id)

    with domain_errors_as_http(db, "monthly_demand", request_id):
        repo.delete_demand(demand)
        db.commit()

    log_record_changed(request_id, "monthly_demand", record_id, "deleted", [])
    return Response(status_code=204)
