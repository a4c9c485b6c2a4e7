"""Double-entry voucher balancing"""

from typing import Iterable
from fintcs_records.domain.exceptions import InvalidVoucherEntryError, UnbalancedVoucherError
from fintcs_records.domain.models import VoucherEntry, VoucherTotals
from fintcs_records.utils.money import ZERO, to_money


def voucher_totals(entries: Iterable[VoucherEntry]) -> VoucherTotals:
    """
    Sum both sides of a voucher.

    Raises:
        InvalidVoucherEntryError: If any line has a negative debit or credit
    """
    total_debit = ZERO
    total_credit = ZERO
    for line, entry in enumerate(entries, start=1):
        debit = to_money(entry.debit)
        credit = to_money(entry.credit)
        if debit < 0 or credit < 0:
            raise InvalidVoucherEntryError(f"Entry {line} ({entry.particulars!r}) has a negative amount")
        total_debit += debit
        total_credit += credit

    return VoucherTotals(total_debit=total_debit, total_credit=total_credit)


def is_voucher_balanced(entries: Iterable[VoucherEntry]) -> bool:
    """True iff total debit equals total credit and is greater than zero"""
    return voucher_totals(entries).balanced


def ensure_balanced(entries: Iterable[VoucherEntry]) -> VoucherTotals:
    """Return the totals of a balanced voucher, raise UnbalancedVoucherError otherwise"""
    totals = voucher_totals(entries)
    if not totals.balanced:
        raise UnbalancedVoucherError(totals.total_debit, totals.total_credit)
    return totals
