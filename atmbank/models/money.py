"""Money normalisation helpers.

All monetary values are ``Decimal`` with two fractional digits. Floats are
converted through ``str`` so binary rounding noise never reaches a balance.
"""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from atmbank.models.exceptions import InvalidAmountError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def as_money(value) -> Decimal:
    """
    Normalize a number to a two-digit Decimal.

    Args:
        value: An int, float, str or Decimal

    Returns:
        The value quantized to cents

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Not a monetary amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as err:
        raise InvalidAmountError(f"Not a monetary amount: {value!r}") from err
    if not amount.is_finite():
        raise InvalidAmountError(f"Not a monetary amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)
    except InvalidOperation as err:
        raise InvalidAmountError(f"Amount out of range: {value!r}") from err


def require_positive(value) -> Decimal:
    """
    Normalize an amount and check that it is greater than zero.

    Args:
        value: The amount supplied by the caller

    Returns:
        The normalized amount

    Raises:
        InvalidAmountError: If the amount is not a number or is not positive
    """
    amount = as_money(value)
    if amount <= ZERO:
        raise InvalidAmountError(f"Amount must be greater than zero, got {amount}")
    return amount
