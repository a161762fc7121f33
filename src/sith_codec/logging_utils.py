"""Logging utilities for SithCodec."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_ROOT_LOGGER_NAME = "sith_codec"
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _formatter() -> logging.Formatter:
    return logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure the ``sith_codec`` logger tree.

    Console output goes to stderr so that listings printed on stdout stay
    machine readable.

    Parameters
    ----------
    verbose: bool
        If True, console level is DEBUG; otherwise WARNING.
    log_file: Optional[Path]
        If provided, every record (DEBUG and up) is also written to this file.

    Returns
    -------
    logging.Logger
        Package root logger.
    """

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(_formatter())
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_formatter())
        root_logger.addHandler(file_handler)

    root_logger.propagate = False
    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the ``sith_codec`` hierarchy.

    Module names such as ``sith_codec.transcode`` are used as-is; other
    names become children of the package root. Until ``setup_logging`` runs,
    records propagate to whatever the host application configured.
    """
    if name is None:
        return logging.getLogger(_ROOT_LOGGER_NAME)
    if name == _ROOT_LOGGER_NAME or name.startswith(_ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")