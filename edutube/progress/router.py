"""Course progress API endpoints.

Provides routes for:
- Watch progress updates (sampled by the player)
- Manual lesson completion and reset
- Progress queries

Handlers are plain functions: the store is synchronous, so FastAPI runs them
in its threadpool.
"""

from fastapi import APIRouter

from edutube.config import get_settings

from .calculator import lesson_status
from .dependencies import ProgressStoreDep, handle_progress_error
from .schemas import (
    CourseLessonsRequest,
    CourseProgressRecordResponse,
    DerivedProgressResponse,
    LessonStatusResponse,
    UpdateWatchProgressRequest,
)
from .service import ProgressError, ProgressTracker
from .store import ProgressStore


router = APIRouter(prefix="/v1/progress", tags=["progress"])


def _tracker(
    store: ProgressStore, course_id: str, data: CourseLessonsRequest
) -> ProgressTracker:
    return ProgressTracker(
        store,
        course_id,
        available_lessons=data.lessons,
        total_lessons=data.total_lessons,
        monotonic_watch=get_settings().progress_monotonic_watch,
    )


# ==============================================================================
# Progress Query Endpoints
# ==============================================================================


@router.get(
    "/{course_id}/record",
    response_model=CourseProgressRecordResponse,
    summary="Get stored course progress",
)
def get_progress_record(
    course_id: str,
    store: ProgressStoreDep,
) -> CourseProgressRecordResponse:
    """Raw completed lessons and watch percentages of a course."""
    return CourseProgressRecordResponse.from_record(course_id, store.load(course_id))


@router.post(
    "/{course_id}",
    response_model=DerivedProgressResponse,
    summary="Calculate course progress",
)
def get_course_progress(
    course_id: str,
    data: CourseLessonsRequest,
    store: ProgressStoreDep,
) -> DerivedProgressResponse:
    """Weighted course progress for the given lesson list."""
    try:
        tracker = _tracker(store, course_id, data)
    except ProgressError as e:
        raise handle_progress_error(e) from e
    return DerivedProgressResponse.from_derived(course_id, tracker.state)


@router.get(
    "/{course_id}/lessons/{lesson_id}",
    response_model=LessonStatusResponse,
    summary="Get lesson status",
)
def get_lesson_status(
    course_id: str,
    lesson_id: str,
    store: ProgressStoreDep,
) -> LessonStatusResponse:
    """Status and watch percentage of a single lesson."""
    record = store.load(course_id)
    return LessonStatusResponse(
        lesson_id=lesson_id,
        status=lesson_status(record, lesson_id),
        watch_percentage=record.watched(lesson_id),
    )


# ==============================================================================
# Progress Update Endpoints
# ==============================================================================


@router.put(
    "/{course_id}/lessons/{lesson_id}/watch",
    response_model=DerivedProgressResponse,
    summary="Update watch progress",
)
def update_watch_progress(
    course_id: str,
    lesson_id: str,
    data: UpdateWatchProgressRequest,
    store: ProgressStoreDep,
) -> DerivedProgressResponse:
    """Record the watched percentage of a lesson.

    Auto-completes the lesson at 90% or more.
    """
    try:
        tracker = _tracker(store, course_id, data)
        derived = tracker.update_watch_progress(lesson_id, data.percentage)
    except ProgressError as e:
        raise handle_progress_error(e) from e
    return DerivedProgressResponse.from_derived(course_id, derived)


@router.post(
    "/{course_id}/lessons/{lesson_id}/complete",
    response_model=DerivedProgressResponse,
    summary="Mark lesson as complete",
)
def mark_lesson_complete(
    course_id: str,
    lesson_id: str,
    data: CourseLessonsRequest,
    store: ProgressStoreDep,
) -> DerivedProgressResponse:
    """Mark a lesson as complete. Calling it again changes nothing."""
    try:
        tracker = _tracker(store, course_id, data)
        derived = tracker.mark_lesson_complete(lesson_id)
    except ProgressError as e:
        raise handle_progress_error(e) from e
    return DerivedProgressResponse.from_derived(course_id, derived)


@router.post(
    "/{course_id}/lessons/{lesson_id}/reset",
    response_model=DerivedProgressResponse,
    summary="Reset lesson progress",
)
def reset_lesson(
    course_id: str,
    lesson_id: str,
    data: CourseLessonsRequest,
    store: ProgressStoreDep,
) -> DerivedProgressResponse:
    """Clear completion and watch progress of a lesson (for rewatching)."""
    try:
        tracker = _tracker(store, course_id, data)
        derived = tracker.reset_lesson(lesson_id)
    except ProgressError as e:
        raise handle_progress_error(e) from e
    return DerivedProgressResponse.from_derived(course_id, derived)
