"""Course outline: modules and lessons in course order.

Helpers turn an outline into what progress tracking needs: the flat lesson
list, the lesson that follows another, and the course's total duration.
"""

import re

from pydantic import BaseModel, Field, field_validator

from edutube.progress.models import LessonRef
from edutube.video.embed import get_embed_url


DURATION_PATTERN = re.compile(r"^(\d+):([0-5]\d)$")


def parse_duration(duration: str) -> int:
    """Parse a ``mm:ss`` lesson duration into seconds.

    Raises:
        ValueError: If the duration is not ``mm:ss``
    """
    match = DURATION_PATTERN.match(duration.strip())
    if not match:
        msg = f"Invalid lesson duration {duration!r}, expected mm:ss"
        raise ValueError(msg)
    return int(match.group(1)) * 60 + int(match.group(2))


def format_duration(total_seconds: int) -> str:
    """Format seconds as ``"Xh Ym"`` (minutes rounded)."""
    total_minutes = round(total_seconds / 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


class Lesson(BaseModel):
    """A single video lesson."""

    id: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    duration: str = "0:00"
    video_url: str = ""

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        parse_duration(value)
        return value

    @property
    def duration_seconds(self) -> int:
        return parse_duration(self.duration)

    @property
    def embed_url(self) -> str:
        return get_embed_url(self.video_url)


class Module(BaseModel):
    """A group of lessons."""

    id: str = Field(..., min_length=1)
    title: str = ""
    lessons: list[Lesson] = Field(default_factory=list)


class CourseOutline(BaseModel):
    """A course's modules, in order."""

    id: str = Field(..., min_length=1)
    title: str = ""
    modules: list[Module] = Field(default_factory=list)

    def flatten_lessons(self) -> list[LessonRef]:
        """All lessons in course order, tagged with their module."""
        return [
            LessonRef(id=lesson.id, module_id=module.id)
            for module in self.modules
            for lesson in module.lessons
        ]

    @property
    def total_lessons(self) -> int:
        return sum(len(module.lessons) for module in self.modules)

    def total_duration_seconds(self) -> int:
        return sum(
            lesson.duration_seconds for module in self.modules for lesson in module.lessons
        )

    def find_lesson(self, lesson_id: str) -> Lesson | None:
        for module in self.modules:
            for lesson in module.lessons:
                if lesson.id == lesson_id:
                    return lesson
        return None

    def next_lesson_after(self, lesson_id: str) -> Lesson | None:
        """Lesson following ``lesson_id`` in course order.

        Crosses module boundaries and skips empty modules. Returns None for
        the last lesson or an unknown lesson ID.
        """
        lessons = [lesson for module in self.modules for lesson in module.lessons]
        for index, lesson in enumerate(lessons):
            if lesson.id == lesson_id:
                return lessons[index + 1] if index + 1 < len(lessons) else None
        return None
