"""Configuration management for the ATM bank."""
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw.replace('_', ''))
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from err


@dataclass
class Settings:
    """Configuration settings for the ATM bank.

    Business rules and logging options live here instead of being
    hardcoded in the services.
    """

    bank_name: str = 'Console Bank'
    currency: str = 'UAH'

    # Business Rules
    enforce_atm_cash: bool = True
    max_transaction_amount: int = 1_000_000  # 1M

    # Logging
    log_level: str = 'INFO'
    log_file: str | None = None

    @classmethod
    def load(cls) -> 'Settings':
        """Load settings from environment variables (and a .env file if present).

        Returns:
            Settings: A Settings instance, with defaults for unset variables.

        Raises:
            ValueError: If a variable is set to a value that cannot be parsed.
        """
        load_dotenv(find_dotenv(usecwd=True))
        defaults = cls()

        return cls(
            bank_name=os.getenv('ATMBANK_BANK_NAME') or defaults.bank_name,
            currency=os.getenv('ATMBANK_CURRENCY') or defaults.currency,
            enforce_atm_cash=_env_bool('ATMBANK_ENFORCE_ATM_CASH', defaults.enforce_atm_cash),
            max_transaction_amount=_env_int(
                'ATMBANK_MAX_TRANSACTION_AMOUNT', defaults.max_transaction_amount
            ),
            log_level=(os.getenv('ATMBANK_LOG_LEVEL') or defaults.log_level).upper(),
            log_file=os.getenv('ATMBANK_LOG_FILE') or defaults.log_file,
        )
