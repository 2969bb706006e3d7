"""Logging setup for the ATM bank."""
import logging

from config.settings import Settings

LOG_FORMAT = '%(asctime)s:%(levelname)s:%(name)s: %(message)s'


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a handler to the 'atmbank' logger according to settings.

    Logs go to settings.log_file when set, otherwise to stderr. Calling this
    again replaces the handler instead of adding a second one.
    """
    logger = logging.getLogger('atmbank')
    logger.setLevel(settings.log_level)

    if settings.log_file:
        handler = logging.FileHandler(filename=settings.log_file, encoding='utf-8', mode='a')
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    return logger
