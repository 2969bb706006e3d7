"""Tests for the Bank service."""

from decimal import Decimal

import pytest

from atmbank.models.account import Account
from atmbank.models.atm import ATM, GeoPoint
from atmbank.models.exceptions import (
    AccountNotFoundError,
    AtmNotFoundError,
    InsufficientCashError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidCredentialError,
    SameAccountError,
)
from atmbank.models.transaction import TransactionKind
from atmbank.services.bank import Bank
from config.settings import Settings


@pytest.fixture
def origin():
    """The ATM the customer is standing at."""
    return ATM("Origin", GeoPoint(0, 0), cash_on_hand=1000)


@pytest.fixture
def atms(origin):
    """ATMs along the equator at 1, 5 and 3 degrees from origin."""
    return [
        origin,
        ATM("Near", GeoPoint(0, 1)),
        ATM("Far", GeoPoint(0, 5)),
        ATM("Middle", GeoPoint(0, 3)),
    ]


@pytest.fixture
def accounts():
    """Two customer accounts."""
    return [
        Account("1111", "1234", "Alice", balance=100),
        Account("2222", "4321", "Bob"),
    ]


@pytest.fixture
def bank(accounts, atms):
    """Create a Bank with a 1000 per-operation limit."""
    return Bank("Test Bank", accounts, atms, max_amount=1000)


def test_duplicate_card_numbers_rejected(atms):
    """Card numbers must be unique."""
    with pytest.raises(ValueError, match="Duplicate card number"):
        Bank("Dup", [Account("1", "0", "A"), Account("1", "0", "B")], atms)


def test_from_settings(accounts, atms):
    """Bank picks up name, limit and cash enforcement from settings."""
    settings = Settings(bank_name="Configured", enforce_atm_cash=False, max_transaction_amount=5)
    bank = Bank.from_settings(settings, accounts, atms)

    assert bank.name == "Configured"
    with pytest.raises(InvalidAmountError, match="exceeds maximum"):
        bank.deposit(bank.get_account("1111"), 6)


def test_get_account(bank):
    """Lookup by card number returns the same account object."""
    assert bank.get_account("1111").owner == "Alice"
    assert bank.get_account("1111") is bank.get_account("1111")


def test_get_account_not_found(bank):
    """Unknown cards raise AccountNotFoundError."""
    with pytest.raises(AccountNotFoundError, match="9999"):
        bank.get_account("9999")


def test_accounts_view_is_copy(bank):
    """Mutating the returned mapping does not affect the bank."""
    view = bank.accounts
    view.clear()

    assert len(bank.accounts) == 2


def test_find_atm(bank, origin):
    """ATMs can be found by name."""
    assert bank.find_atm("Origin") is origin
    with pytest.raises(AtmNotFoundError):
        bank.find_atm("Nowhere")


def test_authenticate_lookup(bank):
    """Correct credentials return the account, anything else returns None."""
    assert bank.authenticate_lookup("1111", "1234").owner == "Alice"
    assert bank.authenticate_lookup("1111", "0000") is None
    assert bank.authenticate_lookup("9999", "1234") is None


def test_authenticate_strict(bank):
    """The strict variant reports which check failed."""
    with pytest.raises(AccountNotFoundError):
        bank.authenticate("9999", "1234")
    with pytest.raises(InvalidCredentialError):
        bank.authenticate("1111", "0000")


def test_transfer_by_card(bank):
    """Transfer between cards moves money and conserves the total."""
    outgoing, incoming = bank.transfer("1111", "2222", 25)

    assert outgoing.kind is TransactionKind.TRANSFER_OUT
    assert incoming.kind is TransactionKind.TRANSFER_IN
    assert bank.get_account("1111").balance == Decimal("75.00")
    assert bank.get_account("2222").balance == Decimal("25.00")


def test_transfer_errors(bank):
    """Transfer reports unknown cards, self transfers and overdrafts."""
    with pytest.raises(AccountNotFoundError):
        bank.transfer("1111", "9999", 10)
    with pytest.raises(SameAccountError):
        bank.transfer("1111", "1111", 5000)
    with pytest.raises(InsufficientFundsError):
        bank.transfer("1111", "2222", 500)
    with pytest.raises(InvalidAmountError):
        bank.transfer("1111", "2222", 5000)

    assert bank.get_account("1111").balance == Decimal("100.00")


def test_withdraw_cash(bank, origin):
    """Withdrawing at an ATM debits the account and the inventory."""
    account = bank.get_account("1111")

    txn = bank.withdraw_cash(account, origin, 40)

    assert txn.kind is TransactionKind.WITHDRAWAL
    assert account.balance == Decimal("60.00")
    assert origin.cash_on_hand == Decimal("960.00")


def test_withdraw_cash_atm_short(bank, atms):
    """With inventory enforced, an empty ATM blocks the withdrawal."""
    account = bank.get_account("1111")
    empty = atms[1]

    with pytest.raises(InsufficientCashError):
        bank.withdraw_cash(account, empty, 40)

    assert account.balance == Decimal("100.00")
    assert account.get_transaction_history() == ()


def test_withdraw_cash_insufficient_funds(bank, origin):
    """An overdraft leaves the ATM inventory untouched."""
    account = bank.get_account("1111")

    with pytest.raises(InsufficientFundsError):
        bank.withdraw_cash(account, origin, 200)

    assert origin.cash_on_hand == Decimal("1000.00")


def test_withdraw_cash_advisory_inventory(accounts, atms, caplog):
    """Without enforcement, a short ATM only logs a warning."""
    bank = Bank("Lenient", accounts, atms, enforce_atm_cash=False)
    account = bank.get_account("1111")
    empty = atms[1]

    with caplog.at_level("WARNING", logger="atmbank"):
        bank.withdraw_cash(account, empty, 40)

    assert account.balance == Decimal("60.00")
    assert empty.cash_on_hand == Decimal("0.00")
    assert "short of cash" in caplog.text


def test_nearest_atms_scenario(bank, origin):
    """ATMs at distances 1, 5, 3: the two nearest are 1 then 3."""
    nearest = bank.get_nearest_atms(origin, 2)

    assert [atm.name for atm in nearest] == ["Near", "Middle"]


def test_nearest_atms_sorted_and_excludes_origin(bank, origin):
    """Results are sorted by distance and never include the origin."""
    pairs = bank.get_nearest_atms_with_distance(origin, 10)
    distances = [distance for _, distance in pairs]

    assert distances == sorted(distances)
    assert origin not in [atm for atm, _ in pairs]


def test_nearest_atms_count_exceeds_registry(bank, origin):
    """Asking for more ATMs than exist returns all of them."""
    nearest = bank.get_nearest_atms(origin, 100)

    assert len(nearest) == 3


def test_nearest_atms_ties_keep_registry_order(origin):
    """Equidistant ATMs come back in registry order."""
    east = ATM("East", GeoPoint(0, 2))
    west = ATM("West", GeoPoint(0, -2))
    bank = Bank("Ties", [], [origin, west, east])

    assert bank.get_nearest_atms(origin, 2) == [west, east]


def test_nearest_atms_origin_outside_registry(bank):
    """An origin that is not registered is measured against every ATM."""
    outside = ATM("Visitor", GeoPoint(0, 0))

    nearest = bank.get_nearest_atms(outside, 4)

    assert [atm.name for atm in nearest] == ["Origin", "Near", "Middle", "Far"]


@pytest.mark.parametrize("count", [0, -1, 1.5, True])
def test_nearest_atms_invalid_count(bank, origin, count):
    """Count must be a positive integer."""
    with pytest.raises(ValueError):
        bank.get_nearest_atms(origin, count)
