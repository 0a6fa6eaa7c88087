"""Tests for ProgressTracker operations."""

import pytest

from edutube.progress.models import CourseProgressRecord, LessonProgressStatus
from edutube.progress.service import (
    InvalidCourseError,
    InvalidLessonError,
    InvalidWatchProgressError,
    ProgressTracker,
)


@pytest.fixture
def tracker(store, lessons) -> ProgressTracker:
    return ProgressTracker(store, "course-1", available_lessons=lessons)


class TestUpdateWatchProgress:
    """Tests for update_watch_progress."""

    def test_records_percentage(self, tracker, store):
        derived = tracker.update_watch_progress("L2", 40)

        assert store.load("course-1").watch_progress == {"L2": 40}
        assert derived.watch_progress == {"L2": 40}
        assert derived.progress == 5  # 0.2 / 4

    def test_auto_completes_at_threshold(self, tracker, store):
        derived = tracker.update_watch_progress("L1", 92)

        assert "L1" in derived.completed_lessons
        assert store.load("course-1").completed_lessons == ["L1"]
        assert derived.next_lesson_id == "L2"

    def test_below_threshold_does_not_complete(self, tracker):
        derived = tracker.update_watch_progress("L1", 89)

        assert derived.completed_lessons == []

    def test_auto_complete_keeps_observed_percentage(self, tracker, store):
        tracker.update_watch_progress("L1", 91)

        assert store.load("course-1").watch_progress["L1"] == 91

    def test_last_write_wins_by_default(self, tracker, store):
        tracker.update_watch_progress("L3", 70)
        tracker.update_watch_progress("L3", 20)

        assert store.load("course-1").watch_progress["L3"] == 20

    def test_monotonic_watch_keeps_highest(self, store, lessons):
        tracker = ProgressTracker(
            store, "course-1", available_lessons=lessons, monotonic_watch=True
        )

        tracker.update_watch_progress("L3", 70)
        derived = tracker.update_watch_progress("L3", 20)

        assert derived.watch_progress["L3"] == 70

    def test_updates_are_read_modify_write(self, tracker, store):
        store.save("course-1", CourseProgressRecord(completed_lessons=["L4"]))

        derived = tracker.update_watch_progress("L1", 30)

        assert derived.completed_lessons == ["L4"]
        assert derived.watch_progress == {"L1": 30}

    @pytest.mark.parametrize("percentage", [-1, 101, 50.5, "50", True])
    def test_rejects_invalid_percentage(self, tracker, percentage):
        with pytest.raises(InvalidWatchProgressError):
            tracker.update_watch_progress("L1", percentage)

    def test_rejects_empty_lesson(self, tracker):
        with pytest.raises(InvalidLessonError):
            tracker.update_watch_progress("", 50)


class TestMarkLessonComplete:
    """Tests for mark_lesson_complete."""

    def test_marks_complete_and_sets_100(self, tracker, store):
        tracker.update_watch_progress("L2", 30)

        derived = tracker.mark_lesson_complete("L2")

        record = store.load("course-1")
        assert record.completed_lessons == ["L2"]
        assert record.watch_progress["L2"] == 100
        assert derived.progress == 25

    def test_is_idempotent(self, tracker, store):
        tracker.mark_lesson_complete("L1")
        first = store.load("course-1")

        tracker.mark_lesson_complete("L1")
        second = store.load("course-1")

        assert second == first
        assert second.completed_lessons == ["L1"]
        assert second.watch_progress["L1"] == 100

    def test_completing_every_lesson_completes_course(self, tracker, lessons):
        for lesson in lessons:
            derived = tracker.mark_lesson_complete(lesson.id)

        assert derived.progress == 100
        assert derived.is_completed is True
        assert derived.next_lesson_id is None


class TestResetLesson:
    """Tests for reset_lesson."""

    def test_clears_completion_and_watch(self, tracker, store):
        tracker.mark_lesson_complete("L1")
        tracker.update_watch_progress("L2", 60)

        derived = tracker.reset_lesson("L1")

        record = store.load("course-1")
        assert record.completed_lessons == []
        assert record.watch_progress == {"L2": 60}
        assert derived.next_lesson_id == "L1"

    def test_reset_unknown_lesson_is_harmless(self, tracker):
        derived = tracker.reset_lesson("never-watched")

        assert derived.progress == 0


class TestTrackerState:
    """Tests for loading, publishing and status queries."""

    def test_initial_state_reflects_stored_record(self, store, lessons):
        store.save(
            "course-1",
            CourseProgressRecord(completed_lessons=["L1"], watch_progress={"L2": 95}),
        )

        tracker = ProgressTracker(store, "course-1", available_lessons=lessons)

        assert tracker.state.progress == 49  # 1.95 / 4 = 48.75
        assert tracker.is_lesson_completed("L1")
        assert not tracker.is_lesson_completed("L2")

    def test_listeners_receive_updates(self, tracker):
        received = []
        tracker.subscribe(received.append)

        tracker.update_watch_progress("L1", 50)
        tracker.mark_lesson_complete("L1")

        assert [d.progress for d in received] == [19, 25]

    def test_unsubscribe_stops_updates(self, tracker):
        received = []
        unsubscribe = tracker.subscribe(received.append)

        unsubscribe()
        tracker.mark_lesson_complete("L1")

        assert received == []

    def test_reload_picks_up_external_writes(self, tracker, store):
        store.save("course-1", CourseProgressRecord(completed_lessons=["L1", "L2"]))

        assert tracker.reload().progress == 50

    def test_lesson_status(self, tracker):
        tracker.update_watch_progress("L1", 30)

        assert tracker.lesson_status("L1") == LessonProgressStatus.IN_PROGRESS
        assert tracker.lesson_status("L2") == LessonProgressStatus.NOT_STARTED

    def test_completion_check_sees_other_writers(self, tracker, store, lessons):
        tracker.mark_lesson_complete("L1")
        other = ProgressTracker(store, "course-1", available_lessons=lessons)

        other.reset_lesson("L1")

        assert not tracker.is_lesson_completed("L1")

    def test_invalid_stored_entry_keeps_completions(self, tracker, backend):
        backend.set(
            "test-progress-course-1",
            '{"completedLessons": ["L1", "L2"], '
            '"watchProgress": {"L1": 100, "L3": "lots", "L4": 140}}',
        )

        derived = tracker.update_watch_progress("L3", 10)

        assert derived.completed_lessons == ["L1", "L2"]
        assert derived.watch_progress == {"L1": 100, "L3": 10}

    def test_requires_course_id(self, store):
        with pytest.raises(InvalidCourseError):
            ProgressTracker(store, "")
