"""Integration tests for identifier lookup and conflict retries"""

import pytest
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import Mock, patch
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fintcs_records.domain.exceptions import SequenceConflictError, SequenceStalledError
from fintcs_records.domain.models import LoanFigures
from fintcs_records.infrastructure.database.models import Loan, Member
from fintcs_records.infrastructure.database.repositories import LoanRepository, MemberRepository
from fintcs_records.infrastructure.database.sequencing import (
    insert_with_identifier,
    is_identifier_collision,
    last_identifier,
    unique_constraint_name,
)


def add_members(db: Session, *numbers: str) -> None:
    for number in numbers:
        db.add(Member(mem_no=number, name=f"Member {number}"))
    db.commit()


def test_last_identifier_orders_by_length_then_value(db: Session):
    """MEM_1000 sorts after MEM_999 despite string ordering"""
    add_members(db, "MEM_998", "MEM_1000", "MEM_999")

    assert last_identifier(db, Member.mem_no, "MEM_") == "MEM_1000"
    assert MemberRepository(db).next_member_number() == "MEM_1001"


def test_last_identifier_escapes_like_wildcards(db: Session):
    """The underscore in MEM_ must not match arbitrary characters"""
    add_members(db, "MEMX900")

    assert last_identifier(db, Member.mem_no, "MEM_") is None


def test_last_identifier_empty(db: Session):
    assert MemberRepository(db).last_member_number() is None
    assert MemberRepository(db).next_member_number() == "MEM_001"


def test_generated_number_collision_is_retried(db: Session):
    """A concurrent insert that claimed the number forces a fresh one"""
    add_members(db, "MEM_001")
    repo = MemberRepository(db)

    with patch.object(MemberRepository, "next_member_number", side_effect=["MEM_001", "MEM_002"]):
        member = repo.create_member({"name": "Late arrival"})
        db.commit()

    assert member.mem_no == "MEM_002"


def test_collisions_exhaust_attempts(db: Session):
    """Each retry sees a fresh number, but concurrent inserts keep winning"""
    add_members(db, "MEM_001", "MEM_002", "MEM_003")
    generate = Mock(side_effect=["MEM_001", "MEM_002", "MEM_003"])

    with pytest.raises(SequenceConflictError):
        insert_with_identifier(
            db,
            "member",
            Member.mem_no,
            build=lambda number: Member(mem_no=number, name="Unlucky"),
            generate=generate,
            max_attempts=3,
        )

    assert generate.call_count == 3


def test_loan_lookup_is_scoped_to_year_prefix(db: Session):
    repo = LoanRepository(db)
    figures = LoanFigures(net_loan=Decimal("1000.00"), installment_amount=Decimal("100.00"))
    fields = {
        "loan_type": "personal",
        "loan_date": date(2025, 12, 30),
        "edp_no": "EDP1",
        "member_name": "D. Rao",
        "loan_amount": Decimal("1000.00"),
        "previous_loan": Decimal("0"),
        "number_of_installments": 10,
        "payment_mode": "cash",
    }
    repo.create_loan(fields, figures, today=date(2025, 12, 30), loan_no="L25041")
    db.commit()

    assert repo.next_loan_number(date(2025, 12, 31)) == "L25042"
    assert repo.next_loan_number(date(2026, 1, 1)) == "L26001"


def test_unchanged_regenerated_number_stops_retrying(db: Session):
    """If the lookup keeps returning a taken number, retrying cannot help"""
    add_members(db, "MEM_002")
    generate = Mock(return_value="MEM_002")

    with pytest.raises(SequenceStalledError) as exc_info:
        insert_with_identifier(
            db,
            "member",
            Member.mem_no,
            build=lambda number: Member(mem_no=number, name="Stuck"),
            generate=generate,
            max_attempts=5,
        )

    assert exc_info.value.identifier == "MEM_002"
    assert generate.call_count == 2


def test_stalled_sequence_is_server_error(client: TestClient, db: Session):
    """A taken number the lookup cannot see fails fast with 500 instead of 503"""
    add_members(db, "MEM_001")

    with patch.object(MemberRepository, "last_member_number", return_value=None):
        response = client.post("/v1/members", json={"name": "New joiner"})

    assert response.status_code == 500
    assert "MEM_001" in response.json()["detail"]


def test_other_integrity_errors_are_not_retried(db: Session):
    """A NOT NULL failure is not a numbering collision"""
    generate = Mock(return_value="MEM_001")

    with pytest.raises(IntegrityError):
        insert_with_identifier(
            db,
            "member",
            Member.mem_no,
            build=lambda number: Member(mem_no=number, name=None),
            generate=generate,
        )

    assert generate.call_count == 1


def test_other_integrity_errors_on_explicit_number_are_not_duplicates(db: Session):
    with pytest.raises(IntegrityError):
        insert_with_identifier(
            db,
            "member",
            Member.mem_no,
            build=lambda number: Member(mem_no=number, name=None),
            generate=Mock(),
            explicit="MEM_010",
        )


def test_zero_max_attempts_is_respected(db: Session):
    """max_attempts=0 means no retry at all, not the configured default"""
    add_members(db, "MEM_001")
    generate = Mock(side_effect=["MEM_001", "MEM_002"])

    with pytest.raises(SequenceConflictError):
        insert_with_identifier(
            db,
            "member",
            Member.mem_no,
            build=lambda number: Member(mem_no=number, name="Impatient"),
            generate=generate,
            max_attempts=0,
        )

    assert generate.call_count == 1


def test_identifier_collision_is_recognised(db: Session):
    add_members(db, "MEM_001")
    db.add(Member(mem_no="MEM_001", name="Twin"))

    with pytest.raises(IntegrityError) as exc_info:
        db.flush()
    db.rollback()

    assert is_identifier_collision(exc_info.value, Member.mem_no)
    assert not is_identifier_collision(exc_info.value, Loan.loan_no)


class FakeUniqueViolation(Exception):
    """Shape of a psycopg2 error: the violated constraint is on .diag"""

    def __init__(self, constraint_name: str):
        super().__init__(f'duplicate key value violates unique constraint "{constraint_name}"')
        self.diag = SimpleNamespace(constraint_name=constraint_name)


def test_identifier_collision_by_constraint_name():
    member_clash = IntegrityError("INSERT INTO member", {}, FakeUniqueViolation("uq_member_mem_no"))
    fk_failure = IntegrityError("INSERT INTO member", {}, FakeUniqueViolation("member_society_id_fkey"))

    assert unique_constraint_name(Member.mem_no) == "uq_member_mem_no"
    assert is_identifier_collision(member_clash, Member.mem_no)
    assert not is_identifier_collision(fk_failure, Member.mem_no)
