"""Debug logging switch."""

import logging
import os

DEBUG_ENV_VAR = "STACKMERGE_DEBUG"


def configure_debug_logging() -> None:
    """Enable DEBUG logging if STACKMERGE_DEBUG is set in the environment."""
    if os.getenv(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
