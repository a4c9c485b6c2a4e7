"""Dashboard endpoints - headline counts and the latest loans"""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fintcs_records.api.v1.schemas import DashboardStatsResponse, LoanResponse
from fintcs_records.infrastructure.database.session import get_db
from fintcs_records.infrastructure.database.repositories import (
    LoanRepository,
    MemberRepository,
    SocietyRepository,
)

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(db: Session = Depends(get_db)):
    return DashboardStatsResponse(
        total_societies=SocietyRepository(db).count_societies(),
        active_members=MemberRepository(db).count_active_members(),
        total_loan_amount=LoanRepository(db).total_loan_amount(),
    )


@router.get("/dashboard/recent-loans", response_model=List[LoanResponse])
def get_recent_loans(limit: int = Query(5, ge=1, le=50), db: Session = Depends(get_db)):
    return [LoanResponse.model_validate(loan) for loan in LoanRepository(db).list_loans(limit=limit)]
