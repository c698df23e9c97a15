"""Structured logging configuration for the Windows service exporter"""
import logging
import os
import sys
from typing import Any, Dict
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer


def setup_structured_logging(config) -> None:
    """Setup structured logging with JSON format for production and console for development"""

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    # Use JSON renderer for production, console for development
    is_development = os.getenv("ENVIRONMENT", "production").lower() == "development"
    if is_development:
        processors.append(ConsoleRenderer())
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, config.log_level.upper())
    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(config.log_file))
        file_handler.setLevel(level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_metrics_collection(logger: structlog.stdlib.BoundLogger, collector: str, state) -> None:
    """Log a completed cycle with the collector's cycle stats and failure counters"""
    stats = state.last_cycle
    logger.info(
        "Metrics collection completed",
        collector=collector,
        metrics_count=stats.observations,
        rows=stats.rows,
        cycle_timestamp=stats.timestamp,
        collection_time_seconds=round(stats.duration, 3),
        failed_cycles=state.failed_cycles,
        last_error=state.last_error,
        event_type="metrics_collection"
    )


def log_collector_startup(logger: structlog.stdlib.BoundLogger, config) -> None:
    """Log exporter startup with configuration details"""
    logger.info(
        "Exporter starting up",
        service_name=config.service_name,
        service_version=config.service_version,
        collection_interval=config.collection_interval,
        enabled_collectors=config.enabled_collectors,
        wmi_host=config.wmi_host,
        wmi_namespace=config.wmi_namespace,
        event_type="exporter_startup"
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=True
    )
