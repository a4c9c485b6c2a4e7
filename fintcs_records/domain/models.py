"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from decimal import Decimal

VOUCHER_TYPES = ("payment", "receipt", "journal", "contra", "adjustment", "others")


@dataclass(frozen=True)
class VoucherEntry:
    """Single debit/credit line of a voucher"""

    particulars: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


@dataclass(frozen=True)
class VoucherTotals:
    """Summed sides of a voucher"""

    total_debit: Decimal
    total_credit: Decimal

    @property
    def balanced(self) -> bool:
        return self.total_debit == self.total_credit and self.total_debit > 0


@dataclass(frozen=True)
class LoanFigures:
    """Amounts derived from a loan application"""

    net_loan: Decimal
    installment_amount: Decimal
