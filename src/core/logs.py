import logging

from core.config import AppConfig

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(config: AppConfig) -> None:
    """File logging only, the console belongs to the menu."""
    config.log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(config.log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(config.log_level)
    root.addHandler(handler)
