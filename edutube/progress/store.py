"""Per-course progress persistence.

The store keeps one JSON document per course in a synchronous key-value
backend. Reads never fail: a missing, unreadable or malformed document is
treated as an empty record.
"""

from typing import TYPE_CHECKING, Protocol

import structlog
from pydantic import ValidationError

from .models import CourseProgressRecord


if TYPE_CHECKING:
    import redis

logger = structlog.get_logger(__name__)

DEFAULT_KEY_PREFIX = "edutube-progress-"


class KeyValueBackend(Protocol):
    """Synchronous string key-value storage scoped to one client."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueBackend:
    """Process-local backend (tests, single-user development)."""

    def __init__(self, data: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)


class RedisKeyValueBackend:
    """Backend over a Redis client created with ``decode_responses=True``."""

    def __init__(self, client: "redis.Redis"):
        self.client = client

    def get(self, key: str) -> str | None:
        value = self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)


class ProgressStore:
    """Load and save CourseProgressRecord documents, one per course."""

    def __init__(self, backend: KeyValueBackend, key_prefix: str = DEFAULT_KEY_PREFIX):
        self.backend = backend
        self.key_prefix = key_prefix

    def key_for(self, course_id: str) -> str:
        """Backend key holding a course's record."""
        return f"{self.key_prefix}{course_id}"

    def load(self, course_id: str) -> CourseProgressRecord:
        """Return the stored record, or an empty one if none is readable."""
        key = self.key_for(course_id)
        try:
            raw = self.backend.get(key)
        except Exception as e:
            logger.warning(
                "progress_record_read_failed",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return CourseProgressRecord()

        if raw is None:
            return CourseProgressRecord()

        try:
            return CourseProgressRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "progress_record_corrupt",
                key=key,
                errors=e.error_count(),
            )
            return CourseProgressRecord()

    def save(self, course_id: str, record: CourseProgressRecord) -> None:
        """Overwrite the stored record for a course."""
        key = self.key_for(course_id)
        self.backend.set(key, record.model_dump_json(by_alias=True))
        logger.debug(
            "progress_record_saved",
            key=key,
            completed=len(record.completed_lessons),
            watched=len(record.watch_progress),
        )
