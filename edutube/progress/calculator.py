"""Weighted course progress calculation.

Each lesson earns credit by tier:

    completed                 1.00
    watched >= 90%            0.95
    watched >= 50%            0.75
    watched >  0%             watched / 100 * 0.5
    not watched               0

Course progress is the credit sum over the course's lessons divided by the
total lesson count, as a percentage rounded half up. Pure functions only.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .models import (
    COMPLETION_THRESHOLD,
    COURSE_COMPLETION_THRESHOLD,
    CourseProgressRecord,
    DerivedProgress,
    LessonProgressStatus,
    LessonRef,
    ModuleProgressSummary,
)


FULL_CREDIT = Decimal(1)
NEAR_COMPLETE_CREDIT = Decimal("0.95")
HALF_WATCHED_CREDIT = Decimal("0.75")
PARTIAL_CREDIT_FACTOR = Decimal("0.5")

HALF_WATCHED_THRESHOLD = 50


def lesson_credit(watch_percentage: int, completed: bool = False) -> Decimal:
    """Credit (0-1) one lesson contributes to course progress."""
    if completed:
        return FULL_CREDIT
    if watch_percentage >= COMPLETION_THRESHOLD:
        return NEAR_COMPLETE_CREDIT
    if watch_percentage >= HALF_WATCHED_THRESHOLD:
        return HALF_WATCHED_CREDIT
    if watch_percentage > 0:
        return Decimal(watch_percentage) / 100 * PARTIAL_CREDIT_FACTOR
    return Decimal(0)


def lesson_status(record: CourseProgressRecord, lesson_id: str) -> LessonProgressStatus:
    """Position of a lesson in the not_started -> completed progression."""
    if record.is_completed(lesson_id):
        return LessonProgressStatus.COMPLETED
    watched = record.watched(lesson_id)
    if watched >= COMPLETION_THRESHOLD:
        return LessonProgressStatus.NEAR_COMPLETE
    if watched > 0:
        return LessonProgressStatus.IN_PROGRESS
    return LessonProgressStatus.NOT_STARTED


def _percentage(credit: Decimal, total: int) -> int:
    if total <= 0:
        return 0
    value = (credit * 100 / total).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return min(int(value), 100)


def _credit_sum(record: CourseProgressRecord, lessons: Sequence[LessonRef]) -> Decimal:
    return sum(
        (
            lesson_credit(record.watched(lesson.id), record.is_completed(lesson.id))
            for lesson in lessons
        ),
        Decimal(0),
    )


def calculate_module_progress(
    record: CourseProgressRecord,
    available_lessons: Sequence[LessonRef],
) -> list[ModuleProgressSummary]:
    """Per-module progress for lessons that carry a module ID.

    Modules are reported in the order they first appear in
    ``available_lessons``.
    """
    module_lessons: dict[str, list[LessonRef]] = {}
    for lesson in available_lessons:
        if lesson.module_id is not None:
            module_lessons.setdefault(lesson.module_id, []).append(lesson)

    return [
        ModuleProgressSummary(
            module_id=module_id,
            progress=_percentage(_credit_sum(record, lessons), len(lessons)),
            lessons_completed=sum(1 for lp in lessons if record.is_completed(lp.id)),
            lessons_total=len(lessons),
        )
        for module_id, lessons in module_lessons.items()
    ]


def find_next_lesson(
    record: CourseProgressRecord,
    available_lessons: Sequence[LessonRef],
) -> str | None:
    """First lesson in course order that is not completed."""
    for lesson in available_lessons:
        if not record.is_completed(lesson.id):
            return lesson.id
    return None


def calculate_progress(
    record: CourseProgressRecord,
    available_lessons: Sequence[LessonRef],
    total_lessons: int | None = None,
) -> DerivedProgress:
    """Derive course progress from a stored record.

    Args:
        record: Stored course progress
        available_lessons: Lessons of the course, in course order. Progress
            stored for lessons not listed here is ignored.
        total_lessons: Denominator for the percentage. Defaults to the number
            of available lessons; zero yields zero progress.

    Returns:
        DerivedProgress snapshot
    """
    if total_lessons is None:
        total_lessons = len(available_lessons)

    progress = _percentage(_credit_sum(record, available_lessons), total_lessons)

    return DerivedProgress(
        progress=progress,
        is_completed=progress >= COURSE_COMPLETION_THRESHOLD,
        next_lesson_id=find_next_lesson(record, available_lessons),
        completed_lessons=list(record.completed_lessons),
        watch_progress=dict(record.watch_progress),
        modules=calculate_module_progress(record, available_lessons),
    )
