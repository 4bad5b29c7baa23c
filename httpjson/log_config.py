import json
import logging
import logging.handlers
import queue
from typing import Union

# Record attributes the JSON helpers attach through ``extra=``
_EXTRA_FIELDS = ("content_type", "json_bytes")

_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Body reads and writes log from the event loop, so records only go onto
# a queue there and a listener thread does the console I/O.
_log_queue: queue.SimpleQueue = queue.SimpleQueue()
queue_handler = logging.handlers.QueueHandler(_log_queue)
console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

listener = logging.handlers.QueueListener(_log_queue, console_handler)
listener.start()

# Library logger; the root and uvicorn loggers are left alone
logger = logging.getLogger("httpjson")
logger.setLevel(logging.INFO)
logger.addHandler(queue_handler)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record. Content type and body size are included
    when the record carries them.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    json_logging: bool = False, level: Union[int, str] = logging.INFO
) -> None:
    """
    Call this at application startup to pick JSON or text output and the
    level of the ``httpjson`` logger. ``level`` accepts a number or a
    level name such as ``"DEBUG"``.
    """
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    if json_logging:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
