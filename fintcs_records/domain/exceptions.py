"""Domain-specific exceptions"""

from decimal import Decimal


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DataIntegrityError(DomainException):
    """Stored data contradicts an invariant the service relies on"""

    pass


class SequenceFormatError(DataIntegrityError):
    """Last issued identifier does not match its expected format"""

    def __init__(self, identifier: str, expected: str):
        super().__init__(f"Identifier {identifier!r} does not match expected format {expected}")
        self.identifier = identifier
        self.expected = expected


class SequenceStalledError(DataIntegrityError):
    """Next generated identifier is taken by a record the last-number lookup cannot see"""

    def __init__(self, identifier: str):
        super().__init__(f"Generated identifier {identifier!r} is already taken; stored numbers are out of sequence")
        self.identifier = identifier


class ValidationError(DomainException):
    """Caller supplied data that breaks a business rule"""

    pass


class InvalidVoucherTypeError(ValidationError):
    """Voucher type is not one of the known types"""

    pass


class InvalidIdentifierError(ValidationError):
    """Caller supplied identifier is not in the generated format"""

    def __init__(self, identifier: str, expected: str):
        super().__init__(f"Identifier {identifier!r} must look like {expected}")
        self.identifier = identifier
        self.expected = expected


class InvalidVoucherEntryError(ValidationError):
    """Voucher entry carries a negative debit or credit"""

    pass


class UnbalancedVoucherError(ValidationError):
    """Voucher debits and credits differ, or both are zero"""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        super().__init__(
            f"Voucher is not balanced: total debit {total_debit}, total credit {total_credit}"
        )
        self.total_debit = total_debit
        self.total_credit = total_credit


class DuplicateIdentifierError(DomainException):
    """Caller supplied identifier is already in use"""

    pass


class SequenceConflictError(DomainException):
    """Could not claim a free generated identifier within the retry budget"""

    pass
