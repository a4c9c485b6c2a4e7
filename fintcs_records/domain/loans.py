"""Loan figure derivation"""

from decimal import Decimal
from fintcs_records.domain.models import LoanFigures
from fintcs_records.utils.money import MoneyLike, ZERO, to_money


def calculate_net_loan(loan_amount: MoneyLike, previous_loan: MoneyLike = 0) -> Decimal:
    """New money paid out: sanctioned amount less the outstanding loan it replaces"""
    return to_money(loan_amount) - to_money(previous_loan)


def calculate_installment_amount(net_loan: MoneyLike, number_of_installments: int) -> Decimal:
    """
    Equal installment for a net loan, rounded half-up to the cent.

    A non-positive installment count yields 0 rather than an error.
    """
    if number_of_installments <= 0:
        return ZERO
    return to_money(to_money(net_loan) / number_of_installments)


def compute_loan_figures(
    loan_amount: MoneyLike,
    previous_loan: MoneyLike = 0,
    number_of_installments: int = 0,
) -> LoanFigures:
    net_loan = calculate_net_loan(loan_amount, previous_loan)
    return LoanFigures(
        net_loan=net_loan,
        installment_amount=calculate_installment_amount(net_loan, number_of_installments),
    )
