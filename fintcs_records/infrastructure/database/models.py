"""SQLAlchemy ORM models for societies and their records"""

import uuid
from sqlalchemy import Column, Boolean, DateTime, Date, Index, Integer, ForeignKey, MetaData, Numeric, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

# Named so an IntegrityError can be traced back to the identifier column
Base = declarative_base(metadata=MetaData(naming_convention={"ix": "ix_%(column_0_label)s", "uq": "uq_%(table_name)s_%(column_0_name)s"}))

# Every amount is stored fixed-point with 2 decimal places
Money = Numeric(15, 2, asdecimal=True)


class Society(Base):
    """Cooperative credit society - the tenant every record belongs to"""

    __tablename__ = "society"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    registration_number = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    members = relationship("Member", back_populates="society")
    loans = relationship("Loan", back_populates="society")
    vouchers = relationship("Voucher", back_populates="society")
    system_users = relationship("SystemUser", back_populates="society")
    monthly_demands = relationship("MonthlyDemand", back_populates="society")


class Member(Base):
    """Society member"""

    __tablename__ = "member"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    mem_no = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    father_husband_name = Column(Text, nullable=True)
    designation = Column(Text, nullable=True)
    branch = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    mobile = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    office_address = Column(Text, nullable=True)
    residence_address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_joining_society = Column(Date, nullable=True)
    nominee = Column(Text, nullable=True)
    nominee_relation = Column(Text, nullable=True)
    opening_balance_share = Column(Money, nullable=False, default=0)
    opening_balance_type = Column(Text, nullable=True)  # Cr | Dr | CD
    bank_name = Column(Text, nullable=True)
    bank_account_no = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="active")
    society_id = Column(UUID(as_uuid=True), ForeignKey("society.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    society = relationship("Society", back_populates="members")


class Loan(Base):
    """Loan sanctioned to a member"""

    __tablename__ = "loan"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_no = Column(Text, nullable=False, unique=True)
    loan_type = Column(Text, nullable=False)
    loan_date = Column(Date, nullable=False)
    edp_no = Column(Text, nullable=False)
    member_name = Column(Text, nullable=False)
    loan_amount = Column(Money, nullable=False)
    previous_loan = Column(Money, nullable=False, default=0)
    net_loan = Column(Money, nullable=False)
    number_of_installments = Column(Integer, nullable=False)
    installment_amount = Column(Money, nullable=False)
    purpose = Column(Text, nullable=True)
    authorized_by = Column(Text, nullable=True)
    payment_mode = Column(Text, nullable=False)
    bank_name = Column(Text, nullable=True)
    cheque_no = Column(Text, nullable=True)
    cheque_date = Column(Date, nullable=True)
    society_id = Column(UUID(as_uuid=True), ForeignKey("society.id"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    society = relationship("Society", back_populates="loans")


class Voucher(Base):
    """Double-entry voucher; entries hold decimal strings"""

    __tablename__ = "voucher"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    voucher_no = Column(Text, nullable=False, unique=True)
    voucher_type = Column(Text, nullable=False, index=True)
    voucher_date = Column(Date, nullable=False)
    entries = Column(JSON, nullable=False)
    total_debit = Column(Money, nullable=False)
    total_credit = Column(Money, nullable=False)
    cheque_no = Column(Text, nullable=True)
    cheque_date = Column(Date, nullable=True)
    narration = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)
    pass_date = Column(Date, nullable=True)
    society_id = Column(UUID(as_uuid=True), ForeignKey("society.id"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    society = relationship("Society", back_populates="vouchers")


class SystemUser(Base):
    """Society staff known by EDP number; loans and demands reference the same number"""

    __tablename__ = "system_user"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    edp_no = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    designation = Column(Text, nullable=True)
    address_office = Column(Text, nullable=True)
    address_residence = Column(Text, nullable=True)
    phone_office = Column(Text, nullable=True)
    phone_residence = Column(Text, nullable=True)
    mobile = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    society_id = Column(UUID(as_uuid=True), ForeignKey("society.id"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    society = relationship("Society", back_populates="system_users")


class MonthlyDemand(Base):
    """Dues statement line for one EDP number in one month"""

    __tablename__ = "monthly_demand"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)
    edp_no = Column(Text, nullable=False)
    member_name = Column(Text, nullable=False)
    loan_amount = Column(Money, nullable=False, default=0)
    cd = Column(Money, nullable=False, default=0)
    loan = Column(Money, nullable=False, default=0)
    interest = Column(Money, nullable=False, default=0)
    e_loan = Column(Money, nullable=False, default=0)
    e_interest = Column(Money, nullable=False, default=0)
    net = Column(Money, nullable=False, default=0)
    int_due = Column(Money, nullable=False, default=0)
    p_int = Column(Money, nullable=False, default=0)
    p_ded = Column(Money, nullable=False, default=0)
    las = Column(Money, nullable=False, default=0)
    las_int_due = Column(Money, nullable=False, default=0)
    total_amount = Column(Money, nullable=False, default=0)
    society_id = Column(UUID(as_uuid=True), ForeignKey("society.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    society = relationship("Society", back_populates="monthly_demands")

    __table_args__ = (Index("ix_monthly_demand_period", "year", "month"),)
