"""Process-wide settings read from the environment."""

import logging
import os

_TRUTHY = {"1", "true", "yes", "on"}

DEBUG_ENV = "DOCQUERY_DEBUG"
COMPACT_ENV = "DOCQUERY_COMPACT"


def env_flag(name: str) -> bool:
    """Return True when the environment variable ``name`` is set to a truthy value."""
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def configure_logging(force: bool = False) -> None:
    """
    Send docquery debug logs to stderr when DOCQUERY_DEBUG is set.

    Args:
        force: Install the handler even if the environment variable is unset
    """
    if not (force or env_flag(DEBUG_ENV)):
        return

    logger = logging.getLogger("docquery")
    if any(getattr(h, "_docquery_debug", False) for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s")
    )
    handler._docquery_debug = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
