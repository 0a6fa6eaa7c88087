"""Tests for the playback observer.

A fake player stands in for the real video source: tests move its playhead
and emit events by hand.
"""

import asyncio
from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest

from edutube.progress.observer import PlaybackEvent, PlaybackObserver, PlaybackState
from edutube.progress.service import ProgressTracker


class FakePlayer:
    """In-memory PlaybackSource."""

    def __init__(self, duration: float = 200.0):
        self.current_time = 0.0
        self.duration = duration
        self.handlers: dict[PlaybackEvent, list[Callable[..., Any]]] = {}

    def get_current_time(self) -> float:
        return self.current_time

    def get_duration(self) -> float:
        return self.duration

    def subscribe(
        self, event: PlaybackEvent, handler: Callable[..., Any]
    ) -> Callable[[], None]:
        self.handlers.setdefault(event, []).append(handler)
        return lambda: self.handlers[event].remove(handler)

    def emit(self, event: PlaybackEvent, *args: Any) -> None:
        for handler in list(self.handlers.get(event, [])):
            handler(*args)

    def set_state(self, state: PlaybackState) -> None:
        self.emit(PlaybackEvent.STATE_CHANGE, state)

    @property
    def handler_count(self) -> int:
        return sum(len(handlers) for handlers in self.handlers.values())


@pytest.fixture
def tracker(store, lessons) -> ProgressTracker:
    return ProgressTracker(store, "course-1", available_lessons=lessons)


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


class TestSample:
    """Tests for single playhead samples."""

    def test_sample_floors_percentage(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player)
        player.current_time = 101.9  # 50.95%

        assert observer.sample() == 50
        assert tracker.state.watch_progress == {"L1": 50}

    def test_sample_clamps_past_end(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player)
        player.current_time = 205.0

        assert observer.sample() == 100
        assert tracker.is_lesson_completed("L1")

    def test_sample_skipped_while_duration_unknown(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player)
        player.duration = 0

        assert observer.sample() is None
        assert tracker.state.watch_progress == {}

    def test_sample_without_source(self, tracker):
        assert PlaybackObserver(tracker, "L1").sample() is None

    def test_rejects_non_positive_interval(self, tracker):
        with pytest.raises(ValueError):
            PlaybackObserver(tracker, "L1", interval=0)


class TestSamplingLoop:
    """Tests for the timer-driven sampling loop."""

    @pytest.mark.asyncio
    async def test_playing_starts_sampling(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player, interval=0.01)
        player.current_time = 60.0

        player.set_state(PlaybackState.PLAYING)
        await asyncio.sleep(0.05)

        assert observer.is_sampling
        assert tracker.state.watch_progress["L1"] == 30
        observer.close()

    @pytest.mark.asyncio
    async def test_repeated_playing_keeps_single_loop(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player, interval=0.01)

        player.set_state(PlaybackState.PLAYING)
        first_task = observer._task
        player.set_state(PlaybackState.PLAYING)

        assert observer._task is first_task
        observer.close()

    @pytest.mark.asyncio
    async def test_pause_stops_sampling(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player, interval=0.01)
        player.set_state(PlaybackState.PLAYING)

        player.set_state(PlaybackState.PAUSED)
        player.current_time = 150.0
        await asyncio.sleep(0.05)

        assert not observer.is_sampling
        assert tracker.state.watch_progress.get("L1", 0) < 75

    @pytest.mark.asyncio
    async def test_ended_marks_lesson_complete(self, tracker, player, store):
        observer = PlaybackObserver(tracker, "L2", player, interval=0.01)
        player.set_state(PlaybackState.PLAYING)

        player.set_state(PlaybackState.ENDED)

        record = store.load("course-1")
        assert record.completed_lessons == ["L2"]
        assert record.watch_progress["L2"] == 100
        assert not observer.is_sampling

    @pytest.mark.asyncio
    async def test_ended_on_completed_lesson_does_not_rewrite(self, tracker, player):
        tracker.mark_lesson_complete("L2")
        received = []
        tracker.subscribe(received.append)
        PlaybackObserver(tracker, "L2", player)

        player.set_state(PlaybackState.ENDED)

        assert received == []

    @pytest.mark.asyncio
    async def test_ended_stops_sampling_when_save_fails(self, tracker, player, backend):
        observer = PlaybackObserver(tracker, "L1", player, interval=0.01)
        player.set_state(PlaybackState.PLAYING)
        backend.set = Mock(side_effect=ConnectionError("redis down"))

        with pytest.raises(ConnectionError):
            player.set_state(PlaybackState.ENDED)
        await asyncio.sleep(0.03)

        assert not observer.is_sampling

    @pytest.mark.asyncio
    async def test_close_cancels_loop_and_unsubscribes(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player, interval=0.01)
        player.set_state(PlaybackState.PLAYING)
        task = observer._task

        observer.close()
        await asyncio.sleep(0)

        assert task is not None and task.cancelled()
        assert player.handler_count == 0
        assert observer.source is None

    @pytest.mark.asyncio
    async def test_changing_source_tears_down_previous(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player, interval=0.01)
        player.set_state(PlaybackState.PLAYING)
        old_task = observer._task

        next_player = FakePlayer(duration=100.0)
        observer.attach(next_player, lesson_id="L2")
        await asyncio.sleep(0)

        assert old_task is not None and old_task.cancelled()
        assert player.handler_count == 0
        assert not observer.is_sampling

        next_player.current_time = 40.0
        next_player.set_state(PlaybackState.PLAYING)
        await asyncio.sleep(0.05)
        observer.close()

        assert tracker.state.watch_progress["L2"] == 40
        assert "L1" not in tracker.state.watch_progress

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, tracker, player):
        with PlaybackObserver(tracker, "L1", player, interval=0.01) as observer:
            player.set_state(PlaybackState.PLAYING)
            assert observer.is_sampling

        assert not observer.is_sampling
        assert player.handler_count == 0

    @pytest.mark.asyncio
    async def test_failed_sample_keeps_loop_alive(self, tracker, player):
        observer = PlaybackObserver(tracker, "L1", player, interval=0.01)
        calls = 0

        def flaky_time() -> float:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("player not ready")
            return 20.0

        player.get_current_time = flaky_time
        player.set_state(PlaybackState.PLAYING)
        await asyncio.sleep(0.08)
        observer.close()

        assert calls >= 2
        assert tracker.state.watch_progress["L1"] == 10

    def test_ready_event_is_handled(self, tracker, player):
        PlaybackObserver(tracker, "L1", player)

        player.emit(PlaybackEvent.READY)

        assert tracker.state.watch_progress == {}
