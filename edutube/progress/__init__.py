"""Course progress tracking module.

Provides:
- Per-course progress records in a key-value store
- Weighted course progress calculation
- Watch progress updates with auto-completion
- Playback observation feeding watch progress
"""

from .calculator import calculate_progress, lesson_credit, lesson_status
from .models import (
    CourseProgressRecord,
    DerivedProgress,
    LessonProgressStatus,
    LessonRef,
    ModuleProgressSummary,
)
from .observer import PlaybackEvent, PlaybackObserver, PlaybackSource, PlaybackState
from .service import ProgressError, ProgressTracker
from .store import (
    InMemoryKeyValueBackend,
    KeyValueBackend,
    ProgressStore,
    RedisKeyValueBackend,
)


__all__ = [
    "CourseProgressRecord",
    "DerivedProgress",
    "InMemoryKeyValueBackend",
    "KeyValueBackend",
    "LessonProgressStatus",
    "LessonRef",
    "ModuleProgressSummary",
    "PlaybackEvent",
    "PlaybackObserver",
    "PlaybackSource",
    "PlaybackState",
    "ProgressError",
    "ProgressStore",
    "ProgressTracker",
    "RedisKeyValueBackend",
    "calculate_progress",
    "lesson_credit",
    "lesson_status",
]
