"""Transaction data model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class TransactionKind(Enum):
    """The kinds of balance-affecting events."""

    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    TRANSFER_OUT = "Transfer out"
    TRANSFER_IN = "Transfer in"

    @property
    def is_transfer(self) -> bool:
        return self in (TransactionKind.TRANSFER_OUT, TransactionKind.TRANSFER_IN)


@dataclass(frozen=True)
class Transaction:
    """Represents an entry in an account's history."""

    timestamp: datetime
    kind: TransactionKind
    amount: Decimal
    counterpart: str | None = None

    def __str__(self) -> str:
        line = f"{self.timestamp:%Y-%m-%d %H:%M:%S} | {self.kind.value} | {self.amount}"
        if self.counterpart is not None:
            direction = "to" if self.kind is TransactionKind.TRANSFER_OUT else "from"
            line += f" | {direction} {self.counterpart}"
        return line
