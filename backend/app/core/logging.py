import logging
from typing import Iterable

import structlog

from shiftpay.models import Anomaly


def configure_logging(level: str = "INFO") -> None:
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
    )

    logging.basicConfig(level=level.upper())


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(method: str, path: str) -> None:
    """Attach request fields to every log line emitted while handling it."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(method=method, path=path)


def log_anomalies(logger: structlog.BoundLogger, employee_id: int, day, anomalies: Iterable[Anomaly]) -> None:
    for anomaly in anomalies:
        logger.warning(
            "attendance_anomaly",
            employee_id=employee_id,
            day=str(day),
            kind=anomaly.kind.value,
            detail=anomaly.detail,
            at=anomaly.at.isoformat() if anomaly.at else None,
        )
