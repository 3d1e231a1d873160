import logging

from ._config import get_config

_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Return a child of the ``stridegrad`` logger.

    The package logger gets one stream handler the first time any module asks
    for a logger; its level follows `EngineConfig.log_level`.
    """
    root = logging.getLogger("stridegrad")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(get_config().log_level)
    if name == "stridegrad" or name.startswith("stridegrad."):
        return logging.getLogger(name)
    return root.getChild(name)
