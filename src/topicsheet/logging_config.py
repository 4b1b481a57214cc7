"""Logging setup for the command-line entry point."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger once.

    Args:
        verbose: Log at DEBUG instead of INFO
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    # aiohttp's access log is noisy at DEBUG
    logging.getLogger("aiohttp.access").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
