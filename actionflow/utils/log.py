"""日志模块 / Logging Module

提供 actionflow 统一使用的 logger。
Provides the logger shared by all actionflow modules.
"""

import logging

from actionflow.utils.config import get_env_with_default

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_logger() -> logging.Logger:
    log = logging.getLogger("actionflow")
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)

    level = get_env_with_default("INFO", "ACTIONFLOW_LOG_LEVEL").upper()
    log.setLevel(getattr(logging, level, logging.INFO))
    log.propagate = False
    return log


logger = _build_logger()
