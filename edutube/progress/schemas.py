"""Pydantic schemas for the progress API.

Every mutating request carries the course's lesson list, since derived
progress depends on which lessons the course currently has.
"""

from pydantic import BaseModel, ConfigDict, Field

from .models import (
    CourseProgressRecord,
    DerivedProgress,
    LessonProgressStatus,
    LessonRef,
    ModuleProgressSummary,
)


# ==============================================================================
# Request Schemas
# ==============================================================================


class CourseLessonsRequest(BaseModel):
    """Lessons of the course, in course order."""

    lessons: list[LessonRef] = Field(default_factory=list)
    total_lessons: int | None = Field(
        default=None,
        ge=0,
        description="Progress denominator; defaults to the number of lessons",
    )


class UpdateWatchProgressRequest(CourseLessonsRequest):
    """Request to record a lesson's watched percentage."""

    percentage: int = Field(..., ge=0, le=100, description="Watched percentage")


# ==============================================================================
# Response Schemas
# ==============================================================================


class CourseProgressRecordResponse(BaseModel):
    """Stored progress of a course."""

    course_id: str
    completed_lessons: list[str]
    watch_progress: dict[str, int]

    @classmethod
    def from_record(
        cls, course_id: str, record: CourseProgressRecord
    ) -> "CourseProgressRecordResponse":
        return cls(
            course_id=course_id,
            completed_lessons=record.completed_lessons,
            watch_progress=record.watch_progress,
        )


class LessonStatusResponse(BaseModel):
    """Status of a single lesson."""

    lesson_id: str
    status: LessonProgressStatus
    watch_percentage: int


class DerivedProgressResponse(BaseModel):
    """Derived course progress."""

    model_config = ConfigDict(from_attributes=True)

    course_id: str
    progress: int = Field(description="0-100 percentage")
    is_completed: bool
    next_lesson_id: str | None = None
    completed_lessons: list[str] = Field(default_factory=list)
    watch_progress: dict[str, int] = Field(default_factory=dict)
    modules: list[ModuleProgressSummary] = Field(default_factory=list)

    @classmethod
    def from_derived(
        cls, course_id: str, derived: DerivedProgress
    ) -> "DerivedProgressResponse":
        return cls(course_id=course_id, **derived.model_dump())
