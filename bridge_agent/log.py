# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Logging bootstrap for host applications embedding the engine."""

import logging
import sys
from typing import Optional

from bridge_agent.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once at process start.

    Library modules only call ``logging.getLogger(__name__)``; handlers are
    left to the host. Unknown level names fall back to INFO.

    Args:
        level (Optional[str]): Level name overriding ``settings.LOG_LEVEL``.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
