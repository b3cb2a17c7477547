"""Structured logging setup."""
import logging, sys, json
from typing import Optional

_STANDARD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}

DEFAULT_LINE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record):
        base = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in _STANDARD_ATTRS:
                continue
            base[k] = v
        return json.dumps(base, default=str, ensure_ascii=False)


def build_handler(output: str = "json", line_format: Optional[str] = None, log_file: Optional[str] = None) -> logging.Handler:
    """Stream or file handler; ``output`` is ``json`` or ``text``."""
    handler = logging.FileHandler(log_file, encoding="utf-8") if log_file else logging.StreamHandler(sys.stdout)
    if output == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(line_format or DEFAULT_LINE_FORMAT))
    return handler


def configure_logging(
    level: str = "INFO",
    output: str = "json",
    line_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return
    root.addHandler(build_handler(output, line_format, log_file))
