"""Structured JSON logging for score runs"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, TextIO

from pythonjsonlogger import jsonlogger

from vibescore_income.config import settings
from vibescore_income.domain.models import ScoreResult


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO", stream: TextIO = sys.stdout) -> None:
    """Configure structured JSON logging on the root logger"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_score(run_id: str, result: ScoreResult, duration_ms: float) -> None:
    """Log structured score outcome for analysis"""
    logging.info(
        "Income score computed",
        extra={
            "run_id": run_id,
            "step": "score_complete",
            "score": round(result.score, 2),
            "base_score": round(result.base_score, 2),
            "penalty_total": round(result.penalty.total, 2),
            "segment": result.demographics.segment,
            "missing_fields": len(result.quality.missing),
            "duration_ms": duration_ms,
        },
    )
