"""ATM and location data models."""

import logging
import math
import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, TypeVar

from atmbank.models.exceptions import InsufficientCashError
from atmbank.models.money import ZERO, as_money, require_positive

logger = logging.getLogger(__name__)

T = TypeVar("T")

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def distance_to(self, other: "GeoPoint") -> float:
        """Calculate great-circle distance in kilometers using the Haversine formula"""
        if self == other:
            return 0.0

        lat1_rad = math.radians(self.latitude)
        lat2_rad = math.radians(other.latitude)
        delta_lat = math.radians(other.latitude - self.latitude)
        delta_lon = math.radians(other.longitude - self.longitude)

        a = (math.sin(delta_lat / 2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) *
             math.sin(delta_lon / 2) ** 2)
        # rounding can push a just past 1 for antipodal points
        a = min(1.0, a)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_KM * c


@dataclass(eq=False)
class ATM:
    """Represents an automated teller machine and its cash inventory."""

    name: str
    location: GeoPoint
    cash_on_hand: Decimal = ZERO
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self):
        self.cash_on_hand = as_money(self.cash_on_hand)
        if self.cash_on_hand < ZERO:
            raise ValueError(f"Cash on hand cannot be negative: {self.cash_on_hand}")

    def calculate_distance(self, other: "ATM") -> float:
        """
        Distance between two ATMs in kilometers.

        Args:
            other: The ATM to measure to

        Returns:
            Great-circle distance; 0.0 for the same location
        """
        return self.location.distance_to(other.location)

    def can_dispense(self, amount: Decimal) -> bool:
        return amount <= self.cash_on_hand

    def dispense_cash(self, amount) -> Decimal:
        """
        Hand out cash and decrease the inventory.

        Args:
            amount: The amount to dispense (must be positive and <= cash on hand)

        Returns:
            The remaining cash on hand

        Raises:
            InvalidAmountError: If the amount is zero, negative or not a number
            InsufficientCashError: If the ATM holds less than the amount
        """
        amount = require_positive(amount)
        with self._lock:
            if not self.can_dispense(amount):
                logger.warning(
                    "ATM %s cannot dispense %s, holds %s", self.name, amount, self.cash_on_hand
                )
                raise InsufficientCashError(
                    f"ATM {self.name} holds {self.cash_on_hand}, cannot dispense {amount}"
                )
            self.cash_on_hand -= amount
            remaining = self.cash_on_hand
        logger.info("ATM %s dispensed %s, %s left", self.name, amount, remaining)
        return remaining

    def load_cash(self, amount) -> Decimal:
        """Add cash to the inventory and return the new total."""
        amount = require_positive(amount)
        with self._lock:
            self.cash_on_hand += amount
            total = self.cash_on_hand
        logger.info("ATM %s loaded %s, %s on hand", self.name, amount, total)
        return total

    def dispense_against(self, amount, debit: Callable[[], T], enforce: bool = True) -> T:
        """
        Debit the customer and dispense cash as one step under the ATM's lock.

        The inventory check, the debit and the decrement cannot interleave
        with another dispense. If the debit raises, the inventory is untouched.

        Args:
            amount: The amount to dispense (must be positive)
            debit: Called once the cash is known to be available; its result is returned
            enforce: When False, a shortfall is logged, the debit still runs and
                the inventory is left as it is

        Returns:
            Whatever debit returned

        Raises:
            InvalidAmountError: If the amount is zero, negative or not a number
            InsufficientCashError: If enforced and the ATM holds less than the amount
        """
        amount = require_positive(amount)
        with self._lock:
            if not self.can_dispense(amount):
                if enforce:
                    logger.warning(
                        "ATM %s cannot cover withdrawal of %s, holds %s",
                        self.name, amount, self.cash_on_hand,
                    )
                    raise InsufficientCashError(
                        f"ATM {self.name} holds {self.cash_on_hand}, cannot dispense {amount}"
                    )
                result = debit()
                logger.warning(
                    "ATM %s short of cash for %s (holds %s), inventory not enforced",
                    self.name, amount, self.cash_on_hand,
                )
                return result
            result = debit()
            self.cash_on_hand -= amount
            remaining = self.cash_on_hand
        logger.info("ATM %s dispensed %s, %s left", self.name, amount, remaining)
        return result
