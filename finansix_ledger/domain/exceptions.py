"""Domain-specific exceptions"""


class LedgerError(Exception):
    """Base exception for the ledger engine"""

    pass


class ValidationError(LedgerError):
    """Input rejected before any calculation or scheduling took place"""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(LedgerError):
    """Referenced card, account, transaction or installment does not exist"""

    def __init__(self, resource: str, resource_id: str | None = None):
        message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ConsistencyError(LedgerError):
    """A ledger invariant does not hold; the computed figure would be wrong"""

    pass


class StoreError(LedgerError):
    """Ledger store is unavailable or returned malformed data"""

    pass
