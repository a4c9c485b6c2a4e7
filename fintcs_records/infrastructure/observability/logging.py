"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pythonjsonlogger import jsonlogger
from fintcs_records.config import settings


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


def log_record_created(
    request_id: str,
    entity: str,
    number: Optional[str],
    society_id: Optional[str],
    duration_ms: float,
) -> None:
    """Log structured creation event for audit"""
    logging.info(
        "Record created",
        extra={
            "request_id": request_id,
            "entity": entity,
            "number": number,
            "society_id": society_id,
            "step": "record_created",
            "duration_ms": duration_ms,
        },
    )


def log_voucher_rejected(request_id: str, voucher_type: str, total_debit: str, total_credit: str) -> None:
    """Log an unbalanced voucher submission"""
    logging.warning(
        "Voucher rejected as unbalanced",
        extra={
            "request_id": request_id,
            "voucher_type": voucher_type,
            "total_debit": total_debit,
            "total_credit": total_credit,
            "step": "voucher_rejected",
        },
    )


def log_record_changed(request_id: str, entity: str, record_id: str, action: str, fields: List[str]) -> None:
    """Log an update or delete; only field names are logged, never values"""
    logging.info(
        f"Record {action}",
        extra={
            "request_id": request_id,
            "entity": entity,
            "record_id": record_id,
            "fields": fields,
            "step": f"record_{action}",
        },
    )
