import logging
import sys

ROOT_LOGGER_NAME = "transeditor"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_logger(name):
    """Get a logger namespaced under the application root logger."""
    if name.startswith(ROOT_LOGGER_NAME + ".") or name == ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level=logging.INFO, stream=None):
    """Attach a single stream handler to the application root logger.

    Calling this more than once only updates the level.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    if not any(getattr(h, "_transeditor_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._transeditor_handler = True
        root.addHandler(handler)
    return root
