"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

LoanType = Literal["general", "personal", "housing", "vehicle", "education", "others"]
VoucherType = Literal["payment", "receipt", "journal", "contra", "adjustment", "others"]
PaymentMode = Literal["cash", "cheque", "opening"]
MemberStatus = Literal["active", "inactive"]


def money_field(default: Any = ..., **constraints: Any) -> Any:
    """Decimal field matching the NUMERIC(15, 2) columns"""
    return Field(default, max_digits=15, decimal_places=2, **constraints)


# Societies

class SocietyCreate(BaseModel):
    """Request body for POST /v1/societies"""

    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    registration_number: Optional[str] = None


class SocietyUpdate(BaseModel):
    """Request body for PUT /v1/societies/{id}; only fields sent are changed"""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(None, min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    registration_number: Optional[str] = None
    is_active: bool = None


class SocietyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    registration_number: Optional[str] = None
    is_active: bool
    created_at: datetime


# Members

class MemberCreate(BaseModel):
    """Request body for POST /v1/members; mem_no is generated when omitted"""

    mem_no: Optional[str] = Field(None, min_length=1, description="MEM_ followed by at least three digits")
    name: str = Field(..., min_length=1)
    father_husband_name: Optional[str] = None
    designation: Optional[str] = None
    branch: Optional[str] = None
    city: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    office_address: Optional[str] = None
    residence_address: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_joining_society: Optional[date] = None
    nominee: Optional[str] = None
    nominee_relation: Optional[str] = None
    opening_balance_share: Decimal = money_field(Decimal("0"), ge=0)
    opening_balance_type: Optional[Literal["Cr", "Dr", "CD"]] = None
    bank_name: Optional[str] = None
    bank_account_no: Optional[str] = None
    status: MemberStatus = "active"
    society_id: Optional[uuid.UUID] = None


class MemberUpdate(BaseModel):
    """Request body for PUT /v1/members/{id}; mem_no is immutable and refused"""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(None, min_length=1)
    father_husband_name: Optional[str] = None
    designation: Optional[str] = None
    branch: Optional[str] = None
    city: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    office_address: Optional[str] = None
    residence_address: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_joining_society: Optional[date] = None
    nominee: Optional[str] = None
    nominee_relation: Optional[str] = None
    opening_balance_share: Decimal = money_field(None, ge=0)
    opening_balance_type: Optional[Literal["Cr", "Dr", "CD"]] = None
    bank_name: Optional[str] = None
    bank_account_no: Optional[str] = None
    status: MemberStatus = None
    society_id: Optional[uuid.UUID] = None


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    mem_no: str
    name: str
    father_husband_name: Optional[str] = None
    designation: Optional[str] = None
    branch: Optional[str] = None
    city: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    office_address: Optional[str] = None
    residence_address: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_joining_society: Optional[date] = None
    nominee: Optional[str] = None
    nominee_relation: Optional[str] = None
    opening_balance_share: Decimal
    opening_balance_type: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_no: Optional[str] = None
    status: str
    society_id: Optional[uuid.UUID] = None
    created_at: datetime


# Loans

class LoanFiguresRequest(BaseModel):
    """Request body for POST /v1/loans/figures"""

    loan_amount: Decimal = money_field(gt=0)
    previous_loan: Decimal = money_field(Decimal("0"), ge=0)
    number_of_installments: int = Field(..., ge=0)


class LoanFiguresResponse(BaseModel):
    net_loan: Decimal
    installment_amount: Decimal


class LoanCreate(LoanFiguresRequest):
    """Request body for POST /v1/loans; net_loan and installment_amount are always computed"""

    loan_no: Optional[str] = Field(None, min_length=1, description="L, two-digit year, at least three digits")
    loan_type: LoanType
    loan_date: date
    edp_no: str = Field(..., min_length=1, description="EDP number of the borrowing employee")
    member_name: str = Field(..., min_length=1)
    purpose: Optional[str] = None
    authorized_by: Optional[str] = None
    payment_mode: PaymentMode
    bank_name: Optional[str] = None
    cheque_no: Optional[str] = None
    cheque_date: Optional[date] = None
    society_id: Optional[uuid.UUID] = None


class LoanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    loan_no: str
    loan_type: str
    loan_date: date
    edp_no: str
    member_name: str
    loan_amount: Decimal
    previous_loan: Decimal
    net_loan: Decimal
    number_of_installments: int
    installment_amount: Decimal
    purpose: Optional[str] = None
    authorized_by: Optional[str] = None
    payment_mode: str
    bank_name: Optional[str] = None
    cheque_no: Optional[str] = None
    cheque_date: Optional[date] = None
    society_id: Optional[uuid.UUID] = None
    is_active: bool
    created_at: datetime


# Vouchers

class VoucherEntrySchema(BaseModel):
    """One debit/credit line"""

    particulars: str = ""
    debit: Decimal = money_field(Decimal("0"), ge=0)
    credit: Decimal = money_field(Decimal("0"), ge=0)


class VoucherBalanceRequest(BaseModel):
    """Request body for POST /v1/vouchers/balance"""

    entries: List[VoucherEntrySchema]


class VoucherBalanceResponse(BaseModel):
    total_debit: Decimal
    total_credit: Decimal
    balanced: bool


class VoucherCreate(VoucherBalanceRequest):
    """Request body for POST /v1/vouchers; rejected with 422 unless balanced"""

    voucher_no: Optional[str] = Field(None, min_length=1, description="Type initial, two-digit year, at least three digits")
    voucher_type: VoucherType
    voucher_date: date
    cheque_no: Optional[str] = None
    cheque_date: Optional[date] = None
    narration: Optional[str] = None
    remarks: Optional[str] = None
    pass_date: Optional[date] = None
    society_id: Optional[uuid.UUID] = None


class VoucherResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    voucher_no: str
    voucher_type: str
    voucher_date: date
    entries: List[VoucherEntrySchema]
    total_debit: Decimal
    total_credit: Decimal
    cheque_no: Optional[str] = None
    cheque_date: Optional[date] = None
    narration: Optional[str] = None
    remarks: Optional[str] = None
    pass_date: Optional[date] = None
    society_id: Optional[uuid.UUID] = None
    is_active: bool
    created_at: datetime


class NextNumberResponse(BaseModel):
    """Preview of the identifier the next create call would generate"""

    entity: Literal["member", "loan", "voucher"]
    number: str


# System users

class SystemUserCreate(BaseModel):
    """Request body for POST /v1/system-users"""

    edp_no: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    designation: Optional[str] = None
    address_office: Optional[str] = None
    address_residence: Optional[str] = None
    phone_office: Optional[str] = None
    phone_residence: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    society_id: Optional[uuid.UUID] = None


class SystemUserResponse(SystemUserCreate):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    is_active: bool
    created_at: datetime


# Monthly demands

class MonthlyDemandUpdate(BaseModel):
    """Request body for PUT /v1/monthly-demands/{id}; only fields sent are changed"""

    model_config = ConfigDict(extra="forbid")

    month: int = Field(None, ge=1, le=12)
    year: int = Field(None, ge=2000, le=2099)
    edp_no: str = Field(None, min_length=1)
    member_name: str = Field(None, min_length=1)
    loan_amount: Decimal = money_field(None)
    cd: Decimal = money_field(None)
    loan: Decimal = money_field(None)
    interest: Decimal = money_field(None)
    e_loan: Decimal = money_field(None)
    e_interest: Decimal = money_field(None)
    net: Decimal = money_field(None)
    int_due: Decimal = money_field(None)
    p_int: Decimal = money_field(None)
    p_ded: Decimal = money_field(None)
    las: Decimal = money_field(None)
    las_int_due: Decimal = money_field(None)
    total_amount: Decimal = money_field(None)
    society_id: Optional[uuid.UUID] = None


class MonthlyDemandCreate(BaseModel):
    """Request body for POST /v1/monthly-demands; amounts default to 0"""

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2099)
    edp_no: str = Field(..., min_length=1)
    member_name: str = Field(..., min_length=1)
    loan_amount: Decimal = money_field(Decimal("0"))
    cd: Decimal = money_field(Decimal("0"))
    loan: Decimal = money_field(Decimal("0"))
    interest: Decimal = money_field(Decimal("0"))
    e_loan: Decimal = money_field(Decimal("0"))
    e_interest: Decimal = money_field(Decimal("0"))
    net: Decimal = money_field(Decimal("0"))
    int_due: Decimal = money_field(Decimal("0"))
    p_int: Decimal = money_field(Decimal("0"))
    p_ded: Decimal = money_field(Decimal("0"))
    las: Decimal = money_field(Decimal("0"))
    las_int_due: Decimal = money_field(Decimal("0"))
    total_amount: Decimal = money_field(Decimal("0"))
    society_id: Optional[uuid.UUID] = None


class MonthlyDemandResponse(MonthlyDemandCreate):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime


class DashboardStatsResponse(BaseModel):
    total_societies: int
    active_members: int
    total_loan_amount: Decimal
