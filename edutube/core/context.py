"""Logging context tracking using contextvars.

Request handlers bind a request ID, progress operations bind the course and
lesson they act on. Everything bound here is merged into each log entry by
the structlog context processor.
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)
course_id_var: ContextVar[str | None] = ContextVar("course_id", default=None)
lesson_id_var: ContextVar[str | None] = ContextVar("lesson_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Optional request ID. If not provided, generates a new one.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def get_trace_id() -> str | None:
    """Get the current trace ID."""
    return trace_id_var.get()


def set_trace_id(trace_id: str | None) -> None:
    """Set the trace ID for the current context."""
    trace_id_var.set(trace_id)


def get_course_id() -> str | None:
    """Get the course currently being tracked."""
    return course_id_var.get()


def get_lesson_id() -> str | None:
    """Get the lesson currently being tracked."""
    return lesson_id_var.get()


def get_context() -> dict[str, Any]:
    """Get all bound context variables as a dictionary."""
    context: dict[str, Any] = {}

    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id

    trace_id = get_trace_id()
    if trace_id:
        context["trace_id"] = trace_id

    course_id = get_course_id()
    if course_id:
        context["course_id"] = course_id

    lesson_id = get_lesson_id()
    if lesson_id:
        context["lesson_id"] = lesson_id

    return context


def clear_context() -> None:
    """Clear all context variables.

    Called at the end of each request to prevent context leakage.
    """
    request_id_var.set("")
    trace_id_var.set(None)
    course_id_var.set(None)
    lesson_id_var.set(None)


class ProgressContext:
    """Bind course and lesson IDs for the duration of a progress operation.

    Usage:
        with ProgressContext(course_id="c1", lesson_id="l2"):
            logger.info("lesson_marked_complete")  # includes course_id, lesson_id

    Previous values are restored on exit, so contexts nest.
    """

    def __init__(self, course_id: str | None = None, lesson_id: str | None = None):
        self.course_id = course_id
        self.lesson_id = lesson_id
        self._course_token: Token[str | None] | None = None
        self._lesson_token: Token[str | None] | None = None

    def __enter__(self) -> "ProgressContext":
        if self.course_id is not None:
            self._course_token = course_id_var.set(self.course_id)
        if self.lesson_id is not None:
            self._lesson_token = lesson_id_var.set(self.lesson_id)
        return self

    def __exit__(self, *_: object) -> None:
        if self._lesson_token is not None:
            lesson_id_var.reset(self._lesson_token)
            self._lesson_token = None
        if self._course_token is not None:
            course_id_var.reset(self._course_token)
            self._course_token = None
