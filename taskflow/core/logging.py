"""Observability for the stores, the board service and the HTTP layer.

Modules log through logging.getLogger(__name__) with structured extra
fields. configure_logfire() sets up Pydantic Logfire, which receives the
store spans and the request traces. Store spans are named "<entity>_store.<operation>"
(task_store.update, category_store.get_all, ...) and board operations
"board_service.<operation>". Nothing leaves the process unless a Logfire token
is configured.
"""

import logging

import logfire
from fastapi import FastAPI

from taskflow.core.config import Settings, settings


logger = logging.getLogger(__name__)


def configure_logfire(app_settings: Settings | None = None) -> None:
    """Configure Logfire for the running app; export happens only when a token is set."""
    app_settings = app_settings or settings
    logfire.configure(
        token=app_settings.logfire_token,
        service_name="taskflow",
        service_version="0.1.0",
        environment=app_settings.environment,
        send_to_logfire="if-token-present",
    )

    logger.info(
        "Logfire configured",
        extra={"backend": app_settings.backend, "export": bool(app_settings.logfire_token)},
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every /api request."""
    logfire.instrument_fastapi(app)


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Open a span around a store or board operation.

    Attributes such as entity or record_id are attached to the span:

        with span("task_store.update", entity="task", record_id=task_id):
            ...
    """
    return logfire.span(name, **attributes)


def log_with_context(
    target: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log message at level with context as structured extra fields.

    Used where the field set varies per call, e.g. bulk results:

        log_with_context(logger, "warning", "Bulk delete partially failed", failed=["7"], succeeded_count=2)
    """
    getattr(target, level.lower())(message, extra=context)
