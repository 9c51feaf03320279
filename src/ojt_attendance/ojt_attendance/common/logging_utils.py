from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Parent of every module logger in the package, whichever import path loaded it
PACKAGE_LOGGER = __name__.rsplit(".", 2)[0]


def configure_logging(level: str = "INFO") -> None:
    """Attach a single console handler to the package logger."""
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not any(getattr(h, "_ojt_console", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._ojt_console = True  # type: ignore[attr-defined]
        root.addHandler(handler)
