from __future__ import annotations

import logging

PACKAGE_LOGGER = "maintenance_authz"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Set the verbosity of the ``maintenance_authz`` loggers.

    Notes:
    - Handlers belong to the embedding application (UI backend, rule evaluator);
      a ``NullHandler`` keeps the library silent when none is configured.
    - Permission decisions are logged at DEBUG, vocabulary loads at INFO.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    return logger
