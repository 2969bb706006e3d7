"""Custom exceptions for the banking system."""


class BankError(Exception):
    """Base exception for all banking-related errors."""
    pass


class InvalidAmountError(BankError):
    """Raised when an invalid amount is provided (e.g., zero or negative amount)."""
    pass


class InsufficientFundsError(BankError):
    """Raised when a withdrawal or transfer exceeds the account balance."""
    pass


class SameAccountError(BankError):
    """Raised when the transfer target is the source account itself."""
    pass


class InsufficientCashError(BankError):
    """Raised when an ATM is asked to dispense more cash than it holds."""
    pass


class AccountNotFoundError(BankError):
    """Raised when an account cannot be found."""
    pass


class InvalidCredentialError(BankError):
    """Raised when a PIN does not match the card."""
    pass


class AtmNotFoundError(BankError, LookupError):
    """Raised when an ATM cannot be found in the registry."""
    pass
