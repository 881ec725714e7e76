"""Logging configuration for the service."""
from __future__ import annotations
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging to stdout.

    Called once by the console entrypoint before settings are validated, so
    fatal startup errors are visible even when configuration is broken.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Access lines are noisy; admission decisions are logged by the CORS layer
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
