"""Course outline API endpoints."""

from fastapi import APIRouter

from edutube.config import get_settings
from edutube.progress.dependencies import ProgressStoreDep, handle_progress_error
from edutube.progress.schemas import DerivedProgressResponse
from edutube.progress.service import ProgressError, ProgressTracker

from .outline import CourseOutline
from .schemas import CourseSummaryResponse


router = APIRouter(prefix="/v1/courses", tags=["courses"])


@router.post(
    "/summary",
    response_model=CourseSummaryResponse,
    summary="Summarize a course outline with progress",
)
def summarize_course(
    outline: CourseOutline,
    store: ProgressStoreDep,
) -> CourseSummaryResponse:
    """Lesson list, total duration and current progress of a course."""
    try:
        tracker = ProgressTracker(
            store,
            outline.id,
            available_lessons=outline.flatten_lessons(),
            monotonic_watch=get_settings().progress_monotonic_watch,
        )
    except ProgressError as e:
        raise handle_progress_error(e) from e

    progress = DerivedProgressResponse.from_derived(outline.id, tracker.state)
    return CourseSummaryResponse.build(outline, progress)
