"""Sequential document numbering for members, loans and vouchers"""

import re
from datetime import date
from typing import Optional
from fintcs_records.domain.exceptions import (
    InvalidIdentifierError,
    InvalidVoucherTypeError,
    SequenceFormatError,
)
from fintcs_records.domain.models import VOUCHER_TYPES
from fintcs_records.utils.date_utils import year_suffix

MEMBER_PREFIX = "MEM_"
LOAN_PREFIX = "L"
SEQUENCE_WIDTH = 3

# ASCII only; str.isdigit() also accepts superscripts that int() rejects
_DIGITS = re.compile(r"[0-9]+")


def _format(prefix: str, number: int) -> str:
    return f"{prefix}{number:0{SEQUENCE_WIDTH}d}"


def _parse_sequence(identifier: str, prefix: str) -> int:
    """
    Extract the integer that follows a fixed prefix.

    Raises:
        SequenceFormatError: If the prefix is missing or the rest is not a plain integer
    """
    suffix = identifier[len(prefix):]
    if not identifier.startswith(prefix) or not _DIGITS.fullmatch(suffix):
        raise SequenceFormatError(identifier, f"{prefix}<digits>")
    return int(suffix)


def _next_in_sequence(prefix: str, last: Optional[str]) -> str:
    if last is None:
        return _format(prefix, 1)
    return _format(prefix, _parse_sequence(last, prefix) + 1)


def _ensure_canonical(identifier: str, prefix_pattern: str, expected: str) -> str:
    """
    Accept only identifiers the generator itself could have produced.

    A wider zero padding (MEM_0001) or a stray suffix would sort above the
    real last number and stall generation, so both are refused.
    """
    match = re.fullmatch(f"({prefix_pattern})([0-9]+)", identifier)
    if match is None:
        raise InvalidIdentifierError(identifier, expected)
    prefix, number = match.group(1), int(match.group(2))
    if number < 1 or _format(prefix, number) != identifier:
        raise InvalidIdentifierError(identifier, expected)
    return identifier


def loan_number_prefix(today: date) -> str:
    """Prefix shared by all loans issued in the year of `today`, e.g. L26"""
    return f"{LOAN_PREFIX}{year_suffix(today)}"


def voucher_number_prefix(voucher_type: str, today: date) -> str:
    """Prefix shared by all vouchers of one type in one year, e.g. P26"""
    return f"{_voucher_initial(voucher_type)}{year_suffix(today)}"


def _voucher_initial(voucher_type: str) -> str:
    if voucher_type not in VOUCHER_TYPES:
        raise InvalidVoucherTypeError(f"Unknown voucher type: {voucher_type!r}")
    return voucher_type[0].upper()


def next_member_number(last: Optional[str] = None) -> str:
    """
    Next member number after `last`.

    Example:
        None      → MEM_001
        MEM_041   → MEM_042
        MEM_999   → MEM_1000
    """
    return _next_in_sequence(MEMBER_PREFIX, last)


def next_loan_number(last: Optional[str] = None, today: Optional[date] = None) -> str:
    """
    Next loan number for the current year.

    `last` must be the highest loan number already issued under this year's
    prefix; numbering restarts at 001 when the year changes because the
    caller only looks up identifiers carrying the new prefix.
    """
    prefix = loan_number_prefix(today or date.today())
    return _next_in_sequence(prefix, last)


def next_voucher_number(
    voucher_type: str,
    last: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """Next voucher number for a type, e.g. payment vouchers P26001, P26002..."""
    prefix = voucher_number_prefix(voucher_type, today or date.today())
    return _next_in_sequence(prefix, last)


def check_member_number(identifier: str) -> str:
    """Validate a caller supplied member number, e.g. MEM_120"""
    return _ensure_canonical(identifier, re.escape(MEMBER_PREFIX), f"{MEMBER_PREFIX}001")


def check_loan_number(identifier: str) -> str:
    """Validate a caller supplied loan number; any two-digit year is allowed, e.g. L25007"""
    return _ensure_canonical(identifier, f"{LOAN_PREFIX}[0-9]{{2}}", f"{LOAN_PREFIX}<yy>001")


def check_voucher_number(voucher_type: str, identifier: str) -> str:
    """
    Validate a caller supplied voucher number against its type.

    The initial must be the type's own (P for payment, R for receipt...),
    otherwise the number would occupy another type's sequence.
    """
    initial = _voucher_initial(voucher_type)
    return _ensure_canonical(identifier, f"{initial}[0-9]{{2}}", f"{initial}<yy>001")
