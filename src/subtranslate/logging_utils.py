from __future__ import annotations

import logging
import os
from typing import Optional


_CONFIGURED = False

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """
    统一配置根 logger（只执行一次）。

    level 为空时读取环境变量 SUBTRANSLATE_LOG_LEVEL，默认 INFO。
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    level_name = (level or os.getenv("SUBTRANSLATE_LOG_LEVEL") or "INFO").upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=log_level, format=LOG_FORMAT, force=force)
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
