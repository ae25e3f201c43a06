import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(is_dev: bool = False) -> logging.Logger:
    """Configure the root logger once at startup. Dev mode only raises verbosity."""
    level = logging.DEBUG if is_dev else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(logging.INFO)
    return logging.getLogger("news_svc")
