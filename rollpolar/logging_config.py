from __future__ import annotations

import logging
import os
from typing import Optional, Union

_LOG_FORMAT = "%(asctime)s | %(levelname)s | rollpolar.%(module)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_HANDLER_NAME = "rollpolar-console"


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    raw = level if level is not None else os.getenv("ROLLPOLAR_LOG_LEVEL", "INFO")
    if isinstance(raw, int):
        return raw
    resolved = logging.getLevelName(str(raw).strip().upper())
    # getLevelName returns "Level X" for unknown names
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Attach a single console handler to the ``rollpolar`` logger.

    Safe to call repeatedly; later calls only adjust the level.
    """
    root = logging.getLogger("rollpolar")
    root.setLevel(_resolve_level(level))
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)
    return root
