"""Structured logging setup."""
import logging, sys, json
from typing import Optional

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def format(self, record):
        base = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record),
        }
        for k, v in record.__dict__.items():
            if k in _RESERVED or k.startswith("_"):
                continue
            base[k] = v
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO", json_format: bool = True, log_file: Optional[str] = None) -> None:
    """Install stdout (and optional file) handlers on the root logger.

    Calling it again replaces the handlers from the previous call, so the
    settings of the most recently created app win.
    """
    root = logging.getLogger()
    for handler in getattr(root, "_phrasebook_handlers", []):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(level)
    formatter = JsonFormatter() if json_format else logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s"
    )
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root._phrasebook_handlers = handlers
