"""
Structured logging for the floor service.

Loggers accept keyword context (``logger.info("Order created", order_id=7)``).
Floor identifiers (order, line item, table, product, user) are lifted to
top-level JSON keys so an aggregator can follow one order or one table
across requests; everything else lands under ``data``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings


FLOOR_KEYS = ("order_id", "line_item_id", "table_id", "product_id", "user_id")


def _split_context(context: dict[str, Any] | None) -> tuple[dict[str, Any], dict[str, Any]]:
    if not context:
        return {}, {}
    ids = {k: context[k] for k in FLOOR_KEYS if context.get(k) is not None}
    rest = {k: v for k, v in context.items() if k not in ids}
    return ids, rest


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for production log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        ids, rest = _split_context(getattr(record, "context", None))
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **ids,
        }
        request_id = getattr(record, "request_id", "-")
        if request_id != "-":
            entry["request_id"] = request_id
        if rest:
            entry["data"] = rest
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line output for local development."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        ids, rest = _split_context(getattr(record, "context", None))

        parts = [f"{color}{clock} {record.levelname:<7}{self.RESET}"]
        request_id = getattr(record, "request_id", "-")
        if request_id != "-":
            parts.append(f"{self.DIM}{request_id[:8]}{self.RESET}")
        parts.append(f"{record.name}: {record.getMessage()}")

        fields = {**ids, **rest}
        if fields:
            parts.append(" ".join(f"{k}={v}" for k, v in fields.items()))

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take keyword context instead of ``extra``."""

    def _emit(self, level: int, msg: str, args: tuple, context: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = context.pop("exc_info", None)
        self._log(level, msg, args, exc_info=exc_info, extra={"context": context}, stacklevel=3)

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.DEBUG, msg, args, context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.INFO, msg, args, context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.WARNING, msg, args, context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.ERROR, msg, args, context)

    def critical(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.CRITICAL, msg, args, context)

    def exception(self, msg: str, *args: Any, **context: Any) -> None:
        context.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, args, context)


# Must run before any module-level get_logger() call
logging.setLoggerClass(StructuredLogger)


def _resolve_level() -> int:
    if settings.log_level:
        return getattr(logging, settings.log_level.upper(), logging.INFO)
    return logging.DEBUG if settings.debug else logging.INFO


def _use_json() -> bool:
    if settings.log_format:
        return settings.log_format.lower() == "json"
    return settings.environment == "production"


def setup_logging() -> None:
    """Install the root handler. Called once from the app lifespan."""
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = _resolve_level()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(JsonFormatter() if _use_json() else ConsoleFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # The access line comes from CorrelationIdMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    for noisy in ("httpx", "sqlalchemy.engine", "redis"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    return logging.getLogger(name)  # type: ignore[return-value]


rest_api_logger = get_logger("rest_api")
orders_logger = get_logger("rest_api.orders")
kitchen_logger = get_logger("rest_api.kitchen")
inventory_logger = get_logger("rest_api.inventory")
tables_logger = get_logger("rest_api.tables")
