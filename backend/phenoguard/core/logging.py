"""
Logging setup. Importing this module configures the root logger once.
"""

import logging
import sys
from typing import Optional

from phenoguard.core.config import get_config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def setup_logging(level: str = "INFO") -> None:
    global _handler
    root = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
    root.setLevel(level.upper())


setup_logging(get_config().log_level)
