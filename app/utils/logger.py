import json
import logging
import os
import threading
from pathlib import Path

ROOT_LOGGER_NAME = "purchasing"

# JSON key -> LogRecord attribute
LOG_FIELDS = {
    "timestamp": "asctime",
    "level": "levelname",
    "logger": "name",
    "module": "module",
    "function": "funcName",
    "line": "lineno",
    "message": "message",
}

# Optional context passed through `extra=`; copied into the JSON line when present
CONTEXT_FIELDS = ("user_id", "order_id", "webhook_id", "event", "attempt")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with UTC-style millisecond timestamps"""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def __init__(self, fields=None, context_fields=CONTEXT_FIELDS):
        super().__init__()
        self.fields = dict(fields or LOG_FIELDS)
        self.context_fields = tuple(context_fields)

    def format(self, record) -> str:
        record.message = record.getMessage()
        if "asctime" in self.fields.values():
            record.asctime = self.formatTime(record)

        entry = {key: getattr(record, attribute, None) for key, attribute in self.fields.items()}
        for name in self.context_fields:
            if hasattr(record, name):
                entry[name] = getattr(record, name)

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exc_info"] = record.exc_text
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


class SingletonLogger:
    """
    Configures the "purchasing" logger tree once per process.

    Handlers (all JSON):
        logs/purchasing.log  INFO and above, truncated on each run
        logs/errors.log      ERROR and above, truncated on each run
        console              LOG_LEVEL and above
    """
    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._root = None
        return cls._instance

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Child logger for dotted names such as "purchasing.buisness.orders";
        any other name returns the configured root.
        """
        with self._lock:
            if self._root is None:
                self._root = self._configure()
        prefix = ROOT_LOGGER_NAME + "."
        if name and name.startswith(prefix):
            return self._root.getChild(name[len(prefix):])
        return self._root

    @staticmethod
    def _configure() -> logging.Logger:
        level = getattr(logging, os.environ.get("LOG_LEVEL", "DEBUG").upper(), logging.DEBUG)
        logs_dir = Path(os.environ.get("LOG_DIR", "logs"))
        logs_dir.mkdir(parents=True, exist_ok=True)

        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(level)
        logger.handlers.clear()

        formatter = JsonFormatter()
        handlers = (
            (logging.FileHandler(logs_dir / "purchasing.log", mode='w', encoding='utf-8'), logging.INFO),
            (logging.FileHandler(logs_dir / "errors.log", mode='w', encoding='utf-8'), logging.ERROR),
            (logging.StreamHandler(), level),
        )
        for handler, handler_level in handlers:
            handler.setLevel(handler_level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Logger writing through the shared handlers"""
    return SingletonLogger().get_logger(name)
