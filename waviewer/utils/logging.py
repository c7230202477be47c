"""Shared logging setup for scripts."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logging(
    name: str,
    *,
    level: int | str = logging.INFO,
    log_file: Path | str | None = None,
    mode: str = "a",
) -> logging.Logger:
    """Configure root logging with a stream handler and an optional file handler.

    Falls back to stream-only logging if the file can't be opened.

    Args:
        name: Logger name to return.
        level: Logging level (number or name such as "DEBUG").
        log_file: Optional file to also log to.
        mode: File open mode ("w" to overwrite, "a" to append).

    Returns:
        The named logger.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, mode=mode))
        except OSError as exc:
            print(f"Warning: could not open log file {log_path}: {exc}", file=sys.stderr, flush=True)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(name)
    if log_file is not None:
        logger.debug("Logging to %s", log_file)
    return logger
