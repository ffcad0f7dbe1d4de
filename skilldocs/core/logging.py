"""日志辅助

库本身只通过 logging.getLogger(__name__) 输出，导入时不做任何配置。
"""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """为 skilldocs 包挂载一个控制台 handler（重复调用不会重复挂载）"""
    logger = logging.getLogger("skilldocs")
    logger.setLevel(level if isinstance(level, int) else level.upper())

    if not any(getattr(h, "_skilldocs", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._skilldocs = True
        logger.addHandler(handler)

    return logger
