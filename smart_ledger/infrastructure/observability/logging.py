"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from smart_ledger.config import settings


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


def log_payment_confirmed(
    request_id: str,
    owner_id: str,
    debt_id: str,
    outcome: str,
    installments_paid: int,
    remaining_amount: Decimal,
) -> None:
    """Log installment payment outcome, including rejected no-ops"""
    logging.info(
        "Debt payment processed",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "debt_id": debt_id,
            "step": "debt_payment",
            "payment_outcome": outcome,
            "installments_paid": installments_paid,
            "remaining_amount": str(remaining_amount),
        },
    )


def log_feasibility(request_id: str, owner_id: str, balanced: bool, remaining: Decimal, duration_ms: float) -> None:
    """Log budget verdict for analysis"""
    logging.info(
        "Budget feasibility evaluated",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "step": "feasibility",
            "verdict": "balanced" if balanced else "over_budget",
            "remaining": str(remaining),
            "duration_ms": duration_ms,
        },
    )
