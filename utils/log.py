import logging
import sys

from context import request_id


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or '-') to every record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id.get() or "-"
        return True


def configure_logging(level: int | str = "INFO") -> logging.Logger:
    """
    Configure root logging to stdout with the request id in each line

    Args:
        level: Logging level as int or name (e.g. "INFO")

    Returns:
        The application logger
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s"
    ))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return logging.getLogger("posts")
