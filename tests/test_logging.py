import logging

from dialogue_rating.logging_config import UVICORN_LOGGERS, setup_logging


def test_uvicorn_loggers_share_the_root_handler():
    logging.getLogger("uvicorn.access").addHandler(logging.NullHandler())
    setup_logging()

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        assert uvicorn_logger.propagate is True
        assert uvicorn_logger.handlers == []


def test_sqlalchemy_engine_is_held_at_warning():
    setup_logging(logging.DEBUG)
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
