from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

CLIENT_LOGGER = "e37_client"


def setup_logging(verbose: bool) -> None:
    """Send logs to stderr through rich.

    ``-v`` turns on debug output of ``e37_client`` (request lines, masked
    tokens) and httpx's per-request INFO lines. httpcore connection chatter
    stays at WARNING either way.
    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    logging.basicConfig(level=logging.WARNING, format="%(name)s: %(message)s", handlers=[handler], force=True)

    logging.getLogger(CLIENT_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
