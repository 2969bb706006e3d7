"""Text rendering of balances, transaction history and ATM search results."""

from decimal import Decimal
from typing import Iterable

from tabulate import tabulate

from atmbank.models.account import Account
from atmbank.models.atm import ATM
from atmbank.models.transaction import Transaction

EMPTY_HISTORY = "No transactions found for the selected period."
NO_ATMS = "No other ATMs found."


def format_amount(amount: Decimal, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def format_balance(account: Account, currency: str) -> str:
    return f"Your current balance: {format_amount(account.balance, currency)}"


def format_history(transactions: Iterable[Transaction], currency: str) -> str:
    """
    Render transactions as a table, oldest first.

    Args:
        transactions: The (possibly filtered) history
        currency: Currency code appended to amounts

    Returns:
        The table, or a notice when there is nothing to show
    """
    header = ['Time', 'Type', 'Amount', 'Counterpart']
    rows = [
        [
            f"{txn.timestamp:%Y-%m-%d %H:%M:%S}",
            txn.kind.value,
            format_amount(txn.amount, currency),
            txn.counterpart or '',
        ]
        for txn in transactions
    ]
    if not rows:
        return EMPTY_HISTORY
    return tabulate([header] + rows, headers="firstrow", stralign='right', disable_numparse=True)


def format_nearest_atms(pairs: Iterable[tuple[ATM, float]]) -> str:
    """Render (ATM, distance in km) pairs, distances with two decimals."""
    rows = [[atm.name, f"{distance:.2f}"] for atm, distance in pairs]
    if not rows:
        return NO_ATMS
    return tabulate([['ATM', 'Distance (km)']] + rows, headers="firstrow", stralign='right', disable_numparse=True)
