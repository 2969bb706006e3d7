"""Bank service: account registry, authentication and ATM proximity search."""

import logging
from decimal import Decimal
from typing import Iterable

from atmbank.models.account import Account
from atmbank.models.atm import ATM
from atmbank.models.exceptions import (
    AccountNotFoundError,
    AtmNotFoundError,
    InvalidAmountError,
    InvalidCredentialError,
)
from atmbank.models.money import as_money, require_positive
from atmbank.models.transaction import Transaction
from config.settings import Settings

logger = logging.getLogger(__name__)


class Bank:
    """Owns the accounts (keyed by card number) and the ATM registry."""

    def __init__(
        self,
        name: str,
        accounts: Iterable[Account],
        atms: Iterable[ATM],
        enforce_atm_cash: bool = True,
        max_amount=None,
    ):
        """
        Initialize the bank.

        Args:
            name: Display name of the bank
            accounts: Accounts to register; card numbers must be unique
            atms: ATMs in registry order (used to break distance ties)
            enforce_atm_cash: Whether an ATM's inventory blocks withdrawals it cannot cover
            max_amount: Largest amount allowed per operation (default: no limit)

        Raises:
            ValueError: If two accounts share a card number
        """
        self.name = name
        self._accounts: dict[str, Account] = {}
        for account in accounts:
            if account.card_number in self._accounts:
                raise ValueError(f"Duplicate card number: {account.card_number}")
            self._accounts[account.card_number] = account
        self._atms: tuple[ATM, ...] = tuple(atms)
        self._enforce_atm_cash = enforce_atm_cash
        self._max_amount = as_money(max_amount) if max_amount is not None else None

    @classmethod
    def from_settings(cls, settings: Settings, accounts: Iterable[Account], atms: Iterable[ATM]) -> "Bank":
        return cls(
            name=settings.bank_name,
            accounts=accounts,
            atms=atms,
            enforce_atm_cash=settings.enforce_atm_cash,
            max_amount=settings.max_transaction_amount,
        )

    @property
    def accounts(self) -> dict[str, Account]:
        return dict(self._accounts)

    @property
    def atms(self) -> tuple[ATM, ...]:
        return self._atms

    def get_account(self, card_number: str) -> Account:
        """
        Look up an account by card number.

        Raises:
            AccountNotFoundError: If no account has this card number
        """
        account = self._accounts.get(card_number)
        if account is None:
            raise AccountNotFoundError(f"Account {card_number} not found")
        return account

    def find_atm(self, name: str) -> ATM:
        """
        Look up an ATM by name.

        Raises:
            AtmNotFoundError: If no ATM has this name
        """
        for atm in self._atms:
            if atm.name == name:
                return atm
        raise AtmNotFoundError(f"ATM {name} not found")

    def authenticate_lookup(self, card_number: str, pin: str) -> Account | None:
        """
        Return the account for a card and PIN, or None if either is wrong.

        The caller is not told whether the card or the PIN was the problem.
        """
        try:
            return self.authenticate(card_number, pin)
        except (AccountNotFoundError, InvalidCredentialError):
            return None

    def authenticate(self, card_number: str, pin: str) -> Account:
        """
        Return the account for a card and PIN.

        Raises:
            AccountNotFoundError: If the card is unknown
            InvalidCredentialError: If the PIN does not match
        """
        account = self.get_account(card_number)
        if not account.validate_pin(pin):
            logger.warning("Invalid PIN for card %s", card_number)
            raise InvalidCredentialError(f"Invalid PIN for card {card_number}")
        logger.info("Authenticated card %s", card_number)
        return account

    def deposit(self, account: Account, amount) -> Transaction:
        """Deposit into an account after checking the per-operation limit."""
        return account.deposit(self._check_limit(amount))

    def transfer(self, source_card: str, target_card: str, amount) -> tuple[Transaction, Transaction]:
        """
        Transfer between two accounts identified by card number.

        Returns:
            A tuple of (outgoing record, incoming record)

        Raises:
            AccountNotFoundError: If either card is unknown
            SameAccountError: If both cards are the same
            InvalidAmountError: If the amount is invalid or over the limit
            InsufficientFundsError: If the source balance is too low
        """
        source = self.get_account(source_card)
        target = self.get_account(target_card)
        if source is not target:
            amount = self._check_limit(amount)
        return source.transfer_money(target, amount)

    def withdraw_cash(self, account: Account, atm: ATM, amount) -> Transaction:
        """
        Withdraw from an account and dispense the cash at an ATM.

        The ATM holds its lock across the cash check, the account debit and the
        dispense. When the inventory is enforced, a shortfall leaves both
        untouched. Otherwise the shortfall is only logged and the inventory
        is left as it is.

        Args:
            account: The authenticated account
            atm: The ATM handing out the cash
            amount: The amount to withdraw

        Returns:
            The Withdrawal transaction

        Raises:
            InvalidAmountError: If the amount is invalid or over the limit
            InsufficientCashError: If enforced and the ATM cannot cover the amount
            InsufficientFundsError: If the account balance is too low
        """
        amount = self._check_limit(amount)
        return atm.dispense_against(
            amount, lambda: account.withdraw(amount), enforce=self._enforce_atm_cash
        )

    def get_nearest_atms(self, origin: ATM, count: int) -> list[ATM]:
        """
        Find the ATMs closest to origin, nearest first.

        The origin ATM itself is excluded. Ties keep registry order.

        Args:
            origin: The ATM to measure from
            count: How many ATMs to return (must be positive)

        Returns:
            Up to count ATMs, fewer if the registry is smaller

        Raises:
            ValueError: If count is not positive
        """
        return [atm for atm, _ in self.get_nearest_atms_with_distance(origin, count)]

    def get_nearest_atms_with_distance(self, origin: ATM, count: int) -> list[tuple[ATM, float]]:
        """Same as get_nearest_atms, paired with each ATM's distance in kilometers."""
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValueError(f"count must be a positive integer, got {count!r}")
        candidates = [(atm, origin.calculate_distance(atm)) for atm in self._atms if atm is not origin]
        candidates.sort(key=lambda pair: pair[1])
        return candidates[:count]

    def _check_limit(self, amount) -> Decimal:
        amount = require_positive(amount)
        if self._max_amount is not None and amount > self._max_amount:
            raise InvalidAmountError(
                f"Amount {amount} exceeds maximum allowed of {self._max_amount}"
            )
        return amount
