"""Loan endpoints - figures are derived server side, numbers are L{yy}nnn"""

import time
import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from fintcs_records.api.v1.schemas import (
    LoanCreate,
    LoanFiguresRequest,
    LoanFiguresResponse,
    LoanResponse,
    NextNumberResponse,
)
from fintcs_records.api.dependencies import ensure_society_exists, get_request_id, get_today, parse_record_id
from fintcs_records.api.errors import domain_errors_as_http
from fintcs_records.infrastructure.database.session import get_db
from fintcs_records.infrastructure.database.repositories import LoanRepository
from fintcs_records.domain.loans import compute_loan_figures
from fintcs_records.infrastructure.observability.metrics import record_created
from fintcs_records.infrastructure.observability.logging import log_record_created

router = APIRouter()


@router.post("/loans", response_model=LoanResponse, status_code=201)
def create_loan(
    body: LoanCreate,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Create a loan.

    Flow:
    1. Derive net loan and installment amount (client values are never trusted)
    2. Generate the next loan number for this year unless one was supplied
    3. Persist and commit
    """
    start_time = time.time()
    request_id = get_request_id(request)
    ensure_society_exists(db, body.society_id)

    figures = compute_loan_figures(body.loan_amount, body.previous_loan, body.number_of_installments)

    with domain_errors_as_http(db, "loan", request_id):
        loan = LoanRepository(db).create_loan(
            body.model_dump(exclude={"loan_no"}),
            figures=figures,
            today=today,
            loan_no=body.loan_no,
        )
        db.commit()

    record_created("loan")
    log_record_created(
        request_id, "loan", loan.loan_no, str(loan.society_id) if loan.society_id else None,
        (time.time() - start_time) * 1000,
    )
    return LoanResponse.model_validate(loan)


@router.post("/loans/figures", response_model=LoanFiguresResponse)
def calculate_loan_figures(body: LoanFiguresRequest):
    """Net loan and installment amount for a draft loan; nothing is stored"""
    figures = compute_loan_figures(body.loan_amount, body.previous_loan, body.number_of_installments)
    return LoanFiguresResponse(net_loan=figures.net_loan, installment_amount=figures.installment_amount)


@router.get("/loans/next-number", response_model=NextNumberResponse)
def preview_loan_number(
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Number the next loan would receive; not reserved"""
    with domain_errors_as_http(db, "loan", get_request_id(request)):
        number = LoanRepository(db).next_loan_number(today)
    return NextNumberResponse(entity="loan", number=number)


@router.get("/loans", response_model=List[LoanResponse])
def list_loans(
    society_id: Optional[uuid.UUID] = Query(None, description="Restrict to one society"),
    db: Session = Depends(get_db),
):
    return [LoanResponse.model_validate(loan) for loan in LoanRepository(db).list_loans(society_id)]


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(loan_id: str, db: Session = Depends(get_db)):
    loan = LoanRepository(db).get_loan(parse_record_id(loan_id, "loan"))
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return LoanResponse.model_validate(loan)
