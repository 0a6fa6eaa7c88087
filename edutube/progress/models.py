"""Progress tracking models.

- CourseProgressRecord: the persisted per-course document
- DerivedProgress: the computed, read-only view handed to consumers
- LessonRef: a lesson of the course as the calculator sees it
"""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LessonProgressStatus(str, Enum):
    """Lesson progress status."""

    NOT_STARTED = "not_started"  # Never watched
    IN_PROGRESS = "in_progress"  # Watched partially
    NEAR_COMPLETE = "near_complete"  # Watched >= 90% but not completed
    COMPLETED = "completed"  # In completed_lessons


# Watch percentage at which a lesson is auto-completed
COMPLETION_THRESHOLD = 90

# Course progress at which the course counts as completed
COURSE_COMPLETION_THRESHOLD = 95


def clamp_percentage(value: float) -> int:
    """Clamp any numeric value into an integer percentage 0-100."""
    return int(min(max(value, 0), 100))


class LessonRef(BaseModel):
    """A lesson belonging to a course, optionally grouped in a module."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    module_id: str | None = Field(default=None, alias="moduleId")


class CourseProgressRecord(BaseModel):
    """Raw progress of one course.

    Stored as ``{"completedLessons": [...], "watchProgress": {...}}``.
    ``completed_lessons`` has set semantics; it is kept as a list in
    insertion order so the stored document is stable.
    """

    model_config = ConfigDict(populate_by_name=True)

    completed_lessons: list[str] = Field(default_factory=list, alias="completedLessons")
    watch_progress: dict[str, int] = Field(default_factory=dict, alias="watchProgress")

    @field_validator("completed_lessons")
    @classmethod
    def _dedupe_completed(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @field_validator("watch_progress", mode="before")
    @classmethod
    def _drop_invalid_percentages(cls, value: Any) -> Any:
        # Non-numeric or out-of-range entries are dropped; fractions are floored.
        if not isinstance(value, dict):
            return value
        percentages = {}
        for lesson_id, percentage in value.items():
            if isinstance(percentage, bool) or not isinstance(percentage, int | float):
                continue
            if not 0 <= percentage <= 100:
                continue
            percentages[lesson_id] = math.floor(percentage)
        return percentages

    def is_completed(self, lesson_id: str) -> bool:
        """Check if a lesson is in the completed set."""
        return lesson_id in self.completed_lessons

    def add_completed(self, lesson_id: str) -> None:
        """Add a lesson to the completed set (no duplicates)."""
        if lesson_id not in self.completed_lessons:
            self.completed_lessons.append(lesson_id)

    def watched(self, lesson_id: str) -> int:
        """Last recorded watch percentage of a lesson (0 if never watched)."""
        return self.watch_progress.get(lesson_id, 0)

    def to_document(self) -> dict[str, Any]:
        """Convert to the stored JSON document shape."""
        return self.model_dump(by_alias=True)


class ModuleProgressSummary(BaseModel):
    """Progress of one module of a course."""

    module_id: str
    progress: int
    lessons_completed: int
    lessons_total: int


class DerivedProgress(BaseModel):
    """Computed view of a course's completion state. Never persisted."""

    model_config = ConfigDict(frozen=True)

    progress: int = Field(ge=0, le=100)
    is_completed: bool
    next_lesson_id: str | None = None
    completed_lessons: list[str] = Field(default_factory=list)
    watch_progress: dict[str, int] = Field(default_factory=dict)
    modules: list[ModuleProgressSummary] = Field(default_factory=list)
