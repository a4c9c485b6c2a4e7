"""Data access layer for society records"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fintcs_records.infrastructure.database.models import (
    Society,
    Member,
    Loan,
    Voucher,
    SystemUser,
    MonthlyDemand,
)
from fintcs_records.infrastructure.database.sequencing import (
    insert_with_identifier,
    is_identifier_collision,
    last_identifier,
)
from fintcs_records.domain.exceptions import DuplicateIdentifierError
from fintcs_records.domain.models import LoanFigures, VoucherEntry, VoucherTotals
from fintcs_records.domain.numbering import (
    MEMBER_PREFIX,
    check_loan_number,
    check_member_number,
    check_voucher_number,
    loan_number_prefix,
    voucher_number_prefix,
    next_member_number,
    next_loan_number,
    next_voucher_number,
)
from fintcs_records.utils.money import to_money


def apply_changes(db: Session, record: Any, changes: Dict[str, Any]) -> Any:
    """Copy changed fields onto a loaded record and flush"""
    for field, value in changes.items():
        setattr(record, field, value)
    db.flush()
    return record


class SocietyRepository:
    """Repository for societies"""

    def __init__(self, db: Session):
        self.db = db

    def create_society(self, **fields: Any) -> Society:
        db_society = Society(**fields)
        self.db.add(db_society)
        self.db.flush()
        return db_society

    def get_society(self, society_id: uuid.UUID) -> Optional[Society]:
        return self.db.query(Society).filter(Society.id == society_id).first()

    def list_societies(self) -> List[Society]:
        return self.db.query(Society).order_by(Society.name.asc()).all()

    def count_societies(self) -> int:
        return self.db.query(func.count(Society.id)).scalar()

    def update_society(self, society: Society, changes: Dict[str, Any]) -> Society:
        return apply_changes(self.db, society, changes)


class MemberRepository:
    """Repository for members"""

    def __init__(self, db: Session):
        self.db = db

    def last_member_number(self) -> Optional[str]:
        return last_identifier(self.db, Member.mem_no, MEMBER_PREFIX)

    def next_member_number(self) -> str:
        return next_member_number(self.last_member_number())

    def create_member(self, fields: Dict[str, Any], mem_no: Optional[str] = None) -> Member:
        """Persist member, generating mem_no when the caller left it out"""
        if mem_no is not None:
            check_member_number(mem_no)
        return insert_with_identifier(
            self.db,
            "member",
            Member.mem_no,
            build=lambda number: Member(mem_no=number, **fields),
            generate=self.next_member_number,
            explicit=mem_no,
        )

    def get_member(self, member_id: uuid.UUID) -> Optional[Member]:
        return self.db.query(Member).filter(Member.id == member_id).first()

    def list_members(self, society_id: Optional[uuid.UUID] = None) -> List[Member]:
        query = self.db.query(Member)
        if society_id is not None:
            query = query.filter(Member.society_id == society_id)
        return query.order_by(Member.mem_no.asc()).all()

    def count_active_members(self) -> int:
        return self.db.query(func.count(Member.id)).filter(Member.status == "active").scalar()

    def update_member(self, member: Member, changes: Dict[str, Any]) -> Member:
        """mem_no is never part of `changes`; it stays as issued"""
        return apply_changes(self.db, member, changes)


class LoanRepository:
    """Repository for loans"""

    def __init__(self, db: Session):
        self.db = db

    def last_loan_number(self, today: date) -> Optional[str]:
        return last_identifier(self.db, Loan.loan_no, loan_number_prefix(today))

    def next_loan_number(self, today: date) -> str:
        return next_loan_number(self.last_loan_number(today), today)

    def create_loan(
        self,
        fields: Dict[str, Any],
        figures: LoanFigures,
        today: date,
        loan_no: Optional[str] = None,
    ) -> Loan:
        """Persist loan with server-computed figures"""
        if loan_no is not None:
            check_loan_number(loan_no)
        return insert_with_identifier(
            self.db,
            "loan",
            Loan.loan_no,
            build=lambda number: Loan(
                loan_no=number,
                net_loan=figures.net_loan,
                installment_amount=figures.installment_amount,
                **fields,
            ),
            generate=lambda: self.next_loan_number(today),
            explicit=loan_no,
        )

    def get_loan(self, loan_id: uuid.UUID) -> Optional[Loan]:
        return self.db.query(Loan).filter(Loan.id == loan_id).first()

    def list_loans(self, society_id: Optional[uuid.UUID] = None, limit: Optional[int] = None) -> List[Loan]:
        query = self.db.query(Loan)
        if society_id is not None:
            query = query.filter(Loan.society_id == society_id)
        query = query.order_by(Loan.loan_date.desc(), Loan.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def total_loan_amount(self) -> Decimal:
        """Sum of sanctioned amounts across all loans, 0.00 when there are none"""
        return to_money(self.db.query(func.coalesce(func.sum(Loan.loan_amount), 0)).scalar())


class VoucherRepository:
    """Repository for vouchers"""

    def __init__(self, db: Session):
        self.db = db

    def last_voucher_number(self, voucher_type: str, today: date) -> Optional[str]:
        # The type initial is part of the prefix; every number under it blocks the sequence
        return last_identifier(self.db, Voucher.voucher_no, voucher_number_prefix(voucher_type, today))

    def next_voucher_number(self, voucher_type: str, today: date) -> str:
        return next_voucher_number(voucher_type, self.last_voucher_number(voucher_type, today), today)

    def create_voucher(
        self,
        voucher_type: str,
        entries: Iterable[VoucherEntry],
        totals: VoucherTotals,
        fields: Dict[str, Any],
        today: date,
        voucher_no: Optional[str] = None,
    ) -> Voucher:
        """Persist an already balanced voucher"""
        if voucher_no is not None:
            check_voucher_number(voucher_type, voucher_no)
        stored_entries = [
            {"particulars": e.particulars, "debit": str(to_money(e.debit)), "credit": str(to_money(e.credit))}
            for e in entries
        ]
        return insert_with_identifier(
            self.db,
            "voucher",
            Voucher.voucher_no,
            build=lambda number: Voucher(
                voucher_no=number,
                voucher_type=voucher_type,
                entries=stored_entries,
                total_debit=totals.total_debit,
                total_credit=totals.total_credit,
                **fields,
            ),
            generate=lambda: self.next_voucher_number(voucher_type, today),
            explicit=voucher_no,
        )

    def get_voucher(self, voucher_id: uuid.UUID) -> Optional[Voucher]:
        return self.db.query(Voucher).filter(Voucher.id == voucher_id).first()

    def list_vouchers(self, society_id: Optional[uuid.UUID] = None) -> List[Voucher]:
        query = self.db.query(Voucher)
        if society_id is not None:
            query = query.filter(Voucher.society_id == society_id)
        return query.order_by(Voucher.voucher_date.desc(), Voucher.created_at.desc()).all()


class SystemUserRepository:
    """Repository for EDP-numbered system users"""

    def __init__(self, db: Session):
        self.db = db

    def create_system_user(self, fields: Dict[str, Any]) -> SystemUser:
        """
        Persist a system user.

        Raises:
            DuplicateIdentifierError: If the EDP number is already registered
        """
        db_user = SystemUser(**fields)
        self.db.add(db_user)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            if is_identifier_collision(e, SystemUser.edp_no):
                raise DuplicateIdentifierError(f"EDP number {fields['edp_no']} already exists") from e
            raise
        return db_user

    def get_by_edp_no(self, edp_no: str) -> Optional[SystemUser]:
        return self.db.query(SystemUser).filter(SystemUser.edp_no == edp_no).first()

    def list_system_users(self, society_id: Optional[uuid.UUID] = None) -> List[SystemUser]:
        query = self.db.query(SystemUser)
        if society_id is not None:
            query = query.filter(SystemUser.society_id == society_id)
        return query.order_by(SystemUser.edp_no.asc()).all()


class MonthlyDemandRepository:
    """Repository for monthly demand statements"""

    def __init__(self, db: Session):
        self.db = db

    def create_demand(self, fields: Dict[str, Any]) -> MonthlyDemand:
        db_demand = MonthlyDemand(**fields)
        self.db.add(db_demand)
        self.db.flush()
        return db_demand

    def get_demand(self, demand_id: uuid.UUID) -> Optional[MonthlyDemand]:
        return self.db.query(MonthlyDemand).filter(MonthlyDemand.id == demand_id).first()

    def list_for_period(
        self,
        month: int,
        year: int,
        society_id: Optional[uuid.UUID] = None,
    ) -> List[MonthlyDemand]:
        query = self.db.query(MonthlyDemand).filter(MonthlyDemand.month == month, MonthlyDemand.year == year)
        if society_id is not None:
            query = query.filter(MonthlyDemand.society_id == society_id)
        return query.order_by(MonthlyDemand.edp_no.asc()).all()

    def update_demand(self, demand: MonthlyDemand, changes: Dict[str, Any]) -> MonthlyDemand:
        return apply_changes(self.db, demand, changes)

    def delete_demand(self, demand: MonthlyDemand) -> None:
        self.db.delete(demand)
        self.db.flush()
