"""Exceptions raised to callers for programmer-facing misuse.

Recoverable conditions (no catalog match, no reference price, backend
failure) never raise; they come back as well-typed results. Only invalid
arguments to bookkeeping operations surface as exceptions.
"""

from __future__ import annotations


class MandiError(Exception):
    """Base class for all mandictl errors."""

    code = "MANDI_ERROR"


class LedgerError(MandiError):
    """Base class for transaction ledger misuse."""

    code = "LEDGER_ERROR"


class TransactionNotFoundError(LedgerError):
    """No transaction exists with the given id."""

    code = "NOT_FOUND"

    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


class InvalidTransactionStateError(LedgerError):
    """The requested transition is not allowed from the current status."""

    code = "INVALID_STATE"


class LedgerValidationError(LedgerError):
    """A ledger argument is out of range (rating, quantity, price)."""

    code = "VALIDATION_ERROR"
