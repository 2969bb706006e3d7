"""Account data model and ledger operations."""

import hmac
import logging
import threading
from datetime import datetime
from decimal import Decimal
from typing import Callable

from atmbank.models.exceptions import (
    InsufficientFundsError,
    SameAccountError,
)
from atmbank.models.money import ZERO, as_money, require_positive
from atmbank.models.transaction import Transaction, TransactionKind

logger = logging.getLogger(__name__)


class Account:
    """
    Represents a bank account: a balance plus the append-only history that
    explains it.

    Every mutation runs under the account's lock and either validates and
    commits completely or raises without touching the balance or history.
    """

    def __init__(
        self,
        card_number: str,
        pin: str,
        owner: str,
        balance=ZERO,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize an account.

        Args:
            card_number: Unique card identifier
            pin: Secret PIN for the card
            owner: Display name of the account holder
            balance: Opening balance (default: 0)
            clock: Callable returning the current time, used to stamp transactions
        """
        opening = as_money(balance)
        if opening < ZERO:
            raise ValueError(f"Opening balance cannot be negative: {opening}")
        self._card_number = card_number
        self._pin = pin
        self.owner = owner
        self._balance = opening
        self._history: list[Transaction] = []
        self._clock = clock
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Account(card_number={self._card_number!r}, owner={self.owner!r}, balance={self._balance})"

    @property
    def card_number(self) -> str:
        return self._card_number

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def label(self) -> str:
        """Owner and card, as shown on the other side of a transfer."""
        return f"{self.owner} ({self._card_number})"

    def validate_pin(self, candidate) -> bool:
        """
        Check a PIN against the stored one in constant time.

        Args:
            candidate: The PIN entered by the user

        Returns:
            True if it matches, False otherwise (including non-string input)
        """
        if not isinstance(candidate, str):
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._pin.encode("utf-8"))

    def get_transaction_history(self) -> tuple[Transaction, ...]:
        """Return the history in chronological order."""
        with self._lock:
            return tuple(self._history)

    def deposit(self, amount) -> Transaction:
        """
        Deposit funds into the account.

        Args:
            amount: The amount to deposit (must be positive)

        Returns:
            The recorded Transaction

        Raises:
            InvalidAmountError: If the amount is zero, negative or not a number
        """
        amount = require_positive(amount)
        with self._lock:
            transaction = Transaction(self._clock(), TransactionKind.DEPOSIT, amount)
            self._balance += amount
            self._history.append(transaction)
        logger.info("Deposited %s to %s, balance %s", amount, self._card_number, self._balance)
        return transaction

    def withdraw(self, amount) -> Transaction:
        """
        Withdraw funds from the account.

        Args:
            amount: The amount to withdraw (must be positive and <= balance)

        Returns:
            The recorded Transaction

        Raises:
            InvalidAmountError: If the amount is zero, negative or not a number
            InsufficientFundsError: If the balance is lower than the amount
        """
        amount = require_positive(amount)
        with self._lock:
            self._check_funds(amount)
            transaction = Transaction(self._clock(), TransactionKind.WITHDRAWAL, amount)
            self._balance -= amount
            self._history.append(transaction)
        logger.info("Withdrew %s from %s, balance %s", amount, self._card_number, self._balance)
        return transaction

    def transfer_money(self, target: "Account", amount) -> tuple[Transaction, Transaction]:
        """
        Move funds from this account to another one.

        Both accounts are locked in card-number order, so two opposite
        transfers cannot deadlock. The debit and credit are committed
        together after all checks pass.

        Args:
            target: The receiving account
            amount: The amount to transfer (must be positive and <= balance)

        Returns:
            A tuple of (outgoing record on this account, incoming record on target)

        Raises:
            SameAccountError: If target is this account
            InvalidAmountError: If the amount is zero, negative or not a number
            InsufficientFundsError: If the balance is lower than the amount
        """
        if target is self or target.card_number == self._card_number:
            logger.warning("Rejected transfer from %s to itself", self._card_number)
            raise SameAccountError("Cannot transfer money to the same account")
        amount = require_positive(amount)

        first, second = sorted((self, target), key=lambda account: account.card_number)
        with first._lock, second._lock:
            self._check_funds(amount)
            timestamp = self._clock()
            outgoing = Transaction(timestamp, TransactionKind.TRANSFER_OUT, amount, target.label)
            incoming = Transaction(timestamp, TransactionKind.TRANSFER_IN, amount, self.label)
            self._balance -= amount
            target._balance += amount
            self._history.append(outgoing)
            target._history.append(incoming)

        logger.info("Transferred %s from %s to %s", amount, self._card_number, target.card_number)
        return outgoing, incoming

    def _check_funds(self, amount: Decimal) -> None:
        if amount > self._balance:
            logger.warning(
                "Insufficient funds on %s: %s available, %s requested",
                self._card_number, self._balance, amount,
            )
            raise InsufficientFundsError(
                f"Insufficient funds: {self._balance} available, {amount} requested"
            )
