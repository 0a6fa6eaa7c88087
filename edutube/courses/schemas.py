"""Pydantic schemas for course outline endpoints."""

from pydantic import BaseModel

from edutube.progress.schemas import DerivedProgressResponse

from .outline import CourseOutline, format_duration


class LessonSummary(BaseModel):
    """Lesson entry of a course summary."""

    id: str
    module_id: str
    title: str
    duration_seconds: int
    embed_url: str
    next_lesson_id: str | None = None


class CourseSummaryResponse(BaseModel):
    """Course outline with totals and the learner's progress."""

    course_id: str
    title: str
    total_lessons: int
    total_duration_seconds: int
    total_duration: str
    lessons: list[LessonSummary]
    progress: DerivedProgressResponse

    @classmethod
    def build(
        cls, outline: CourseOutline, progress: DerivedProgressResponse
    ) -> "CourseSummaryResponse":
        total_seconds = outline.total_duration_seconds()
        lessons = []
        for module in outline.modules:
            for lesson in module.lessons:
                following = outline.next_lesson_after(lesson.id)
                lessons.append(
                    LessonSummary(
                        id=lesson.id,
                        module_id=module.id,
                        title=lesson.title,
                        duration_seconds=lesson.duration_seconds,
                        embed_url=lesson.embed_url,
                        next_lesson_id=following.id if following else None,
                    )
                )
        return cls(
            course_id=outline.id,
            title=outline.title,
            total_lessons=outline.total_lessons,
            total_duration_seconds=total_seconds,
            total_duration=format_duration(total_seconds),
            lessons=lessons,
            progress=progress,
        )
