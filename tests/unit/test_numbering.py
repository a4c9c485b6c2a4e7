"""Unit tests for member, loan and voucher numbering"""

import pytest
from datetime import date
from fintcs_records.domain.numbering import (
    check_loan_number,
    check_member_number,
    check_voucher_number,
    loan_number_prefix,
    voucher_number_prefix,
    next_member_number,
    next_loan_number,
    next_voucher_number,
)
from fintcs_records.domain.exceptions import (
    DataIntegrityError,
    InvalidIdentifierError,
    InvalidVoucherTypeError,
    SequenceFormatError,
)


def test_first_member_number():
    """No prior members → MEM_001"""
    assert next_member_number() == "MEM_001"
    assert next_member_number(None) == "MEM_001"


@pytest.mark.parametrize("n", [1, 9, 41, 99, 998])
def test_member_number_increments(n):
    """MEM_n is followed by MEM_{n+1:03d}"""
    assert next_member_number(f"MEM_{n:03d}") == f"MEM_{n + 1:03d}"


def test_member_number_grows_past_three_digits():
    assert next_member_number("MEM_999") == "MEM_1000"
    assert next_member_number("MEM_1000") == "MEM_1001"


def test_loan_number_continues_within_year():
    """Last loan L24007 in 2024 → L24008"""
    assert next_loan_number("L24007", today=date(2024, 6, 1)) == "L24008"


def test_first_loan_number_of_year():
    assert next_loan_number(None, today=date(2026, 1, 1)) == "L26001"


def test_loan_prefix_uses_two_digit_year():
    assert loan_number_prefix(date(2026, 12, 31)) == "L26"
    assert loan_number_prefix(date(2005, 1, 1)) == "L05"


def test_voucher_number_uses_type_initial():
    today = date(2026, 3, 15)
    assert next_voucher_number("payment", None, today) == "P26001"
    assert next_voucher_number("receipt", "R26014", today) == "R26015"
    assert next_voucher_number("journal", "J26099", today) == "J26100"
    assert voucher_number_prefix("contra", today) == "C26"


def test_unknown_voucher_type_rejected():
    with pytest.raises(InvalidVoucherTypeError):
        next_voucher_number("refund", None, date(2026, 3, 15))


@pytest.mark.parametrize("last", ["MEM_", "MEM_abc", "MEM_12a", "MEMBER_7", "MEM_²", "MEM_١٢"])
def test_malformed_member_number_is_integrity_error(last):
    with pytest.raises(SequenceFormatError) as exc_info:
        next_member_number(last)

    assert exc_info.value.identifier == last
    assert isinstance(exc_info.value, DataIntegrityError)


def test_malformed_loan_number_is_integrity_error():
    with pytest.raises(SequenceFormatError):
        next_loan_number("L26XYZ", today=date(2026, 3, 15))


def test_loan_number_from_other_year_is_not_parsed():
    """The caller must pass the last number of the current year's prefix only"""
    with pytest.raises(SequenceFormatError):
        next_loan_number("L25007", today=date(2026, 3, 15))


@pytest.mark.parametrize("mem_no", ["MEM_001", "MEM_120", "MEM_1000"])
def test_supplied_member_number_accepted(mem_no):
    assert check_member_number(mem_no) == mem_no


@pytest.mark.parametrize("mem_no", ["MEM_0001", "MEM_01", "MEM_000", "MEM_X17", "MEM_²", "MEM1", "MEM_001 "])
def test_supplied_member_number_rejected(mem_no):
    with pytest.raises(InvalidIdentifierError) as exc_info:
        check_member_number(mem_no)

    assert exc_info.value.identifier == mem_no


def test_supplied_loan_number_may_be_from_another_year():
    assert check_loan_number("L25007") == "L25007"
    assert check_loan_number("L261000") == "L261000"

    with pytest.raises(InvalidIdentifierError):
        check_loan_number("L260007")
    with pytest.raises(InvalidIdentifierError):
        check_loan_number("L6001")


def test_supplied_voucher_number_must_match_type():
    assert check_voucher_number("receipt", "R26014") == "R26014"

    with pytest.raises(InvalidIdentifierError):
        check_voucher_number("receipt", "P26014")
    with pytest.raises(InvalidVoucherTypeError):
        check_voucher_number("refund", "R26014")
