"""Voucher endpoints - only balanced vouchers are persisted"""

import time
import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from fintcs_records.api.v1.schemas import (
    NextNumberResponse,
    VoucherBalanceRequest,
    VoucherBalanceResponse,
    VoucherCreate,
    VoucherResponse,
    VoucherType,
)
from fintcs_records.api.dependencies import ensure_society_exists, get_request_id, get_today, parse_record_id
from fintcs_records.api.errors import domain_errors_as_http
from fintcs_records.infrastructure.database.session import get_db
from fintcs_records.infrastructure.database.repositories import VoucherRepository
from fintcs_records.domain.exceptions import UnbalancedVoucherError
from fintcs_records.domain.models import VoucherEntry
from fintcs_records.domain.vouchers import ensure_balanced, voucher_totals
from fintcs_records.infrastructure.observability.metrics import record_created, voucher_rejected_counter
from fintcs_records.infrastructure.observability.logging import log_record_created, log_voucher_rejected

router = APIRouter()


def _to_entries(body: VoucherBalanceRequest) -> List[VoucherEntry]:
    return [VoucherEntry(particulars=e.particulars, debit=e.debit, credit=e.credit) for e in body.entries]


@router.post("/vouchers", response_model=VoucherResponse, status_code=201)
def create_voucher(
    body: VoucherCreate,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Create a voucher.

    Flow:
    1. Sum debits and credits; reject with 422 unless equal and non-zero
    2. Generate the next number for the voucher type unless one was supplied
    3. Persist entries with the computed totals
    """
    start_time = time.time()
    request_id = get_request_id(request)
    ensure_society_exists(db, body.society_id)

    entries = _to_entries(body)
    try:
        totals = ensure_balanced(entries)
    except UnbalancedVoucherError as e:
        voucher_rejected_counter.inc()
        log_voucher_rejected(request_id, body.voucher_type, str(e.total_debit), str(e.total_credit))
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Total debit must equal total credit and be greater than zero",
                "total_debit": str(e.total_debit),
                "total_credit": str(e.total_credit),
            },
        )

    fields = body.model_dump(exclude={"voucher_no", "voucher_type", "entries"})
    with domain_errors_as_http(db, "voucher", request_id):
        voucher = VoucherRepository(db).create_voucher(
            body.voucher_type,
            entries,
            totals,
            fields,
            today=today,
            voucher_no=body.voucher_no,
        )
        db.commit()

    record_created("voucher")
    log_record_created(
        request_id, "voucher", voucher.voucher_no, str(voucher.society_id) if voucher.society_id else None,
        (time.time() - start_time) * 1000,
    )
    return VoucherResponse.model_validate(voucher)


@router.post("/vouchers/balance", response_model=VoucherBalanceResponse)
def check_voucher_balance(body: VoucherBalanceRequest):
    """Totals for a draft voucher, for display before submission"""
    totals = voucher_totals(_to_entries(body))
    return VoucherBalanceResponse(
        total_debit=totals.total_debit,
        total_credit=totals.total_credit,
        balanced=totals.balanced,
    )


@router.get("/vouchers/next-number", response_model=NextNumberResponse)
def preview_voucher_number(
    request: Request,
    voucher_type: VoucherType = Query(..., description="payment, receipt, journal, contra, adjustment or others"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Number the next voucher of this type would receive; not reserved"""
    with domain_errors_as_http(db, "voucher", get_request_id(request)):
        number = VoucherRepository(db).next_voucher_number(voucher_type, today)
    return NextNumberResponse(entity="voucher", number=number)


@router.get("/vouchers", response_model=List[VoucherResponse])
def list_vouchers(
    society_id: Optional[uuid.UUID] = Query(None, description="Restrict to one society"),
    db: Session = Depends(get_db),
):
    return [VoucherResponse.model_validate(v) for v in VoucherRepository(db).list_vouchers(society_id)]


@router.get("/vouchers/{voucher_id}", response_model=VoucherResponse)
def get_voucher(voucher_id: str, db: Session = Depends(get_db)):
    voucher = VoucherRepository(db).get_voucher(parse_record_id(voucher_id, "voucher"))
    if not voucher:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return VoucherResponse.model_validate(voucher)
