"""Named loggers for LaunchNow.

Every logger lives under the ``launchnow`` namespace, split into the
categories the launcher has always used (general, app scanning,
persistence, performance). Library code only emits records; handlers are
installed by the entry point through ``configure_logging``.
"""

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "launchnow"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

general = logging.getLogger(f"{ROOT_LOGGER_NAME}.general")
app_scanning = logging.getLogger(f"{ROOT_LOGGER_NAME}.app_scanning")
persistence = logging.getLogger(f"{ROOT_LOGGER_NAME}.persistence")
performance = logging.getLogger(f"{ROOT_LOGGER_NAME}.performance")

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def configure_logging(
    level: Union[int, str] = logging.INFO,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Attach a formatted handler to the ``launchnow`` logger.

    Calling this more than once replaces the previously installed handler
    instead of stacking duplicates.

    Args:
        level: Logging level for the whole ``launchnow`` namespace
        handler: Handler to install (default: stderr stream handler)

    Returns:
        The configured ``launchnow`` root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)

    for existing in list(root.handlers):
        if getattr(existing, "_launchnow_handler", False):
            root.removeHandler(existing)

    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._launchnow_handler = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(level)
    return root
