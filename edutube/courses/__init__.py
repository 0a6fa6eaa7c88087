"""Course outlines: modules, lessons and their ordering."""

from .outline import CourseOutline, Lesson, Module, format_duration, parse_duration


__all__ = ["CourseOutline", "Lesson", "Module", "format_duration", "parse_duration"]
