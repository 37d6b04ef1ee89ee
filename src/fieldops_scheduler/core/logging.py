import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the service-wide log format on the root logger."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
