"""
Structured logging setup using structlog.

The API server and every worker process call ``setup_logging`` once. Records
from the standard library (uvicorn, rq, our own modules) go through the same
processor chain, so worker output carries the process name and, while a job
runs, the job id and queue.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace
from rq import get_current_job

from jobboard.config import get_settings


def add_trace_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Add the active OpenTelemetry trace and span ids."""
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def add_job_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Add the id and queue of the RQ job being executed, if any."""
    job = get_current_job()
    if job is not None:
        event_dict.setdefault("job_id", job.id)
        event_dict.setdefault("queue", job.origin)
    return event_dict


def setup_logging(process_name: str | None = None) -> None:
    """
    Configure structured logging for the current process.

    Args:
        process_name: Bound to every record; worker processes pass their
            worker name so interleaved output can be told apart.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_trace_context,
        add_job_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    if settings.log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    # uvicorn logs every request; rq logs every dequeue at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("rq.worker").setLevel(max(log_level, logging.INFO))

    structlog.contextvars.clear_contextvars()
    if process_name:
        structlog.contextvars.bind_contextvars(process=process_name)
