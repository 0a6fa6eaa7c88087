"""Course progress tracking service layer.

Business logic for:
- Watch progress updates with auto-completion
- Manual lesson completion and reset
- Recomputing and publishing derived course progress
"""

from collections.abc import Callable, Sequence

import structlog

from edutube.core.context import ProgressContext

from .calculator import calculate_progress, lesson_status
from .models import (
    COMPLETION_THRESHOLD,
    CourseProgressRecord,
    DerivedProgress,
    LessonProgressStatus,
    LessonRef,
)
from .store import ProgressStore


logger = structlog.get_logger(__name__)

ProgressListener = Callable[[DerivedProgress], None]


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class ProgressError(Exception):
    """Base progress error."""

    def __init__(self, message: str, code: str = "progress_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidCourseError(ProgressError):
    """Course ID missing or empty."""

    def __init__(self, message: str = "Course ID is required"):
        super().__init__(message, "invalid_course")


class InvalidLessonError(ProgressError):
    """Lesson ID missing or empty."""

    def __init__(self, message: str = "Lesson ID is required"):
        super().__init__(message, "invalid_lesson")


class InvalidWatchProgressError(ProgressError):
    """Watch percentage outside 0-100."""

    def __init__(self, percentage: object):
        super().__init__(
            f"Watch percentage must be an integer between 0 and 100, got {percentage!r}",
            "invalid_watch_progress",
        )


# ==============================================================================
# Progress Tracker
# ==============================================================================


class ProgressTracker:
    """Progress of one course for the local client.

    Every operation reads the stored record, modifies it, saves it, then
    recomputes DerivedProgress and hands it to the subscribed listeners.
    """

    def __init__(
        self,
        store: ProgressStore,
        course_id: str,
        available_lessons: Sequence[LessonRef] = (),
        total_lessons: int | None = None,
        monotonic_watch: bool = False,
    ):
        """Initialize tracker for a course.

        Args:
            store: Progress store
            course_id: Course being tracked
            available_lessons: Lessons of the course, in course order
            total_lessons: Progress denominator (defaults to lesson count)
            monotonic_watch: Keep the highest watch percentage seen instead of
                the latest one
        """
        if not course_id:
            raise InvalidCourseError
        self.store = store
        self.course_id = course_id
        self.available_lessons = list(available_lessons)
        self.total_lessons = total_lessons
        self.monotonic_watch = monotonic_watch
        self._listeners: list[ProgressListener] = []
        self._state = self._derive(self.store.load(course_id))

    @property
    def state(self) -> DerivedProgress:
        """Last computed progress."""
        return self._state

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Register a listener for progress changes.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reload(self) -> DerivedProgress:
        """Re-read the stored record and publish the result."""
        return self._publish(self.store.load(self.course_id))

    def is_lesson_completed(self, lesson_id: str) -> bool:
        return self.store.load(self.course_id).is_completed(lesson_id)

    def lesson_status(self, lesson_id: str) -> LessonProgressStatus:
        return lesson_status(self.store.load(self.course_id), lesson_id)

    # ==========================================================================
    # Update Operations
    # ==========================================================================

    def update_watch_progress(self, lesson_id: str, percentage: int) -> DerivedProgress:
        """Record how far a lesson's video has been watched.

        Auto-completes the lesson at 90% or more.

        Raises:
            InvalidLessonError: If lesson_id is empty
            InvalidWatchProgressError: If percentage is not an int in 0-100
        """
        self._check_lesson(lesson_id)
        if isinstance(percentage, bool) or not isinstance(percentage, int):
            raise InvalidWatchProgressError(percentage)
        if not 0 <= percentage <= 100:
            raise InvalidWatchProgressError(percentage)

        with ProgressContext(self.course_id, lesson_id):
            record = self.store.load(self.course_id)

            previous = record.watch_progress.get(lesson_id)
            if self.monotonic_watch and previous is not None:
                percentage = max(previous, percentage)
            record.watch_progress[lesson_id] = percentage

            if percentage >= COMPLETION_THRESHOLD and not record.is_completed(lesson_id):
                record.add_completed(lesson_id)
                logger.info("lesson_auto_completed", progress=percentage)

            self.store.save(self.course_id, record)
            return self._publish(record)

    def mark_lesson_complete(self, lesson_id: str) -> DerivedProgress:
        """Mark a lesson as complete and its watch progress as 100%."""
        self._check_lesson(lesson_id)

        with ProgressContext(self.course_id, lesson_id):
            record = self.store.load(self.course_id)
            record.add_completed(lesson_id)
            record.watch_progress[lesson_id] = 100

            self.store.save(self.course_id, record)
            logger.info("lesson_marked_complete")
            return self._publish(record)

    def reset_lesson(self, lesson_id: str) -> DerivedProgress:
        """Forget a lesson's completion and watch progress (for rewatching)."""
        self._check_lesson(lesson_id)

        with ProgressContext(self.course_id, lesson_id):
            record = self.store.load(self.course_id)
            record.completed_lessons = [
                lid for lid in record.completed_lessons if lid != lesson_id
            ]
            record.watch_progress.pop(lesson_id, None)

            self.store.save(self.course_id, record)
            logger.info("lesson_reset")
            return self._publish(record)

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _check_lesson(self, lesson_id: str) -> None:
        if not lesson_id:
            raise InvalidLessonError

    def _derive(self, record: CourseProgressRecord) -> DerivedProgress:
        return calculate_progress(record, self.available_lessons, self.total_lessons)

    def _publish(self, record: CourseProgressRecord) -> DerivedProgress:
        self._state = self._derive(record)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state
