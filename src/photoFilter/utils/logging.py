"""Logging helpers for photoFilter."""

from __future__ import annotations

import logging
from typing import Optional

_ROOT_NAME = "photoFilter"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT: Optional[logging.Logger] = None


def _configure_root() -> logging.Logger:
    global _ROOT
    if _ROOT is None:
        _ROOT = logging.getLogger(_ROOT_NAME)
        if not _ROOT.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_FORMAT))
            _ROOT.addHandler(handler)
        _ROOT.setLevel(logging.INFO)
    return _ROOT


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or the child logger for *name*.

    Module names inside the package (``photoFilter.gui...``) map onto
    themselves; any other name is nested under the package logger so its
    records reach the shared handler.
    """

    root = _configure_root()
    if not name or name == _ROOT_NAME:
        return root
    if name.startswith(_ROOT_NAME + "."):
        return logging.getLogger(name)
    return root.getChild(name)


logger = get_logger()
