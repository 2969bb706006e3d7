"""Data models for the banking system."""

from .account import Account
from .atm import ATM, GeoPoint
from .transaction import Transaction, TransactionKind
from .exceptions import (
    BankError,
    InvalidAmountError,
    InsufficientFundsError,
    SameAccountError,
    InsufficientCashError,
    AccountNotFoundError,
    InvalidCredentialError,
    AtmNotFoundError,
)

__all__ = [
    "Account",
    "ATM",
    "GeoPoint",
    "Transaction",
    "TransactionKind",
    "BankError",
    "InvalidAmountError",
    "InsufficientFundsError",
    "SameAccountError",
    "InsufficientCashError",
    "AccountNotFoundError",
    "InvalidCredentialError",
    "AtmNotFoundError",
]
