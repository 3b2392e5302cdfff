# invoicedesk/logging_config.py

"""Logging setup for the service."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_NAME = "invoicedesk"


def configure_logging(level: str = "INFO") -> None:
    """
    Attach one stream handler to the ``invoicedesk`` logger.

    Calling it again only changes the level; it never stacks handlers.
    """
    logger = logging.getLogger("invoicedesk")
    logger.setLevel(level.upper())

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
