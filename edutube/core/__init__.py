# Core infrastructure
from edutube.core.context import (
    ProgressContext,
    clear_context,
    get_context,
    get_course_id,
    get_lesson_id,
    get_request_id,
    set_request_id,
)
from edutube.core.logging import configure_structlog, get_logger
from edutube.core.middleware import RequestContextMiddleware


__all__ = [
    "ProgressContext",
    "RequestContextMiddleware",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_course_id",
    "get_lesson_id",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
