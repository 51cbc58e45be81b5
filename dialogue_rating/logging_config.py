"""
Process-wide logging for the API server and the admin script.

One stdout handler on the root logger; every module logs through
`logging.getLogger(__name__)`. Uvicorn's loggers, the access log included,
propagate to the same handler instead of installing their own, so request
lines and application records share one format.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level=logging.INFO) -> None:
    """
    Configure the root logger once.

    Parameters
    ----------
    level : int | str
        Root level, e.g. ``logging.INFO`` or ``"DEBUG"``.

    Notes
    -----
    - A second call does not add another handler.
    - SQLAlchemy's engine echo is held at WARNING whatever the root level.
    - The server must be started with ``log_config=None`` (see `main.run`)
      or uvicorn replaces the uvicorn logger handlers again.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
