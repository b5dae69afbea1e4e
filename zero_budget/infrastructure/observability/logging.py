"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from zero_budget.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_month_opened(month: str, income: str, rollover: str, recurring_count: int) -> None:
    """Log a newly opened month and how many recurring expenses it received"""
    logging.info(
        "Month opened",
        extra={
            "month": month,
            "step": "month_opened",
            "income": income,
            "rollover": rollover,
            "recurring_count": recurring_count,
        },
    )


def log_transaction_recorded(month: str, category_id: str, amount: str) -> None:
    logging.info(
        "Transaction recorded",
        extra={
            "month": month,
            "step": "transaction_recorded",
            "category_id": category_id,
            "amount": amount,
        },
    )


def log_persistence_failure(storage_key: str, error: Exception) -> None:
    """In-memory state stays authoritative; the failure is reported only"""
    logging.error(
        f"Snapshot flush failed: {error}",
        extra={
            "storage_key": storage_key,
            "step": "snapshot_flush",
            "error_type": type(error).__name__,
        },
    )
