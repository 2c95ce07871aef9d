from __future__ import annotations
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s : %(message)s"

def setup_logging(level: str = "INFO") -> None:
    # lifespan may run several times in one process (tests); one handler only
    pkg_logger = logging.getLogger("presence_client")
    pkg_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not pkg_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        pkg_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
