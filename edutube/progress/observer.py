"""Bridge between a video playback source and the progress tracker.

While the source is playing, the observer samples the playhead once per
interval and records the watched percentage. When playback ends the lesson
is marked complete. The sampling loop is an asyncio task owned by the
observer; it is cancelled on pause, end, source change and close, so at most
one loop runs per observer.
"""

import asyncio
import math
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

import structlog

from edutube.config import get_settings
from edutube.core.context import ProgressContext

from .models import clamp_percentage
from .service import ProgressTracker


logger = structlog.get_logger(__name__)


class PlaybackEvent(str, Enum):
    """Events a playback source emits."""

    READY = "ready"
    STATE_CHANGE = "state_change"


class PlaybackState(str, Enum):
    """Playback states carried by STATE_CHANGE events."""

    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class PlaybackSource(Protocol):
    """Capabilities required from a video player."""

    def get_current_time(self) -> float:
        """Playhead position in seconds."""
        ...

    def get_duration(self) -> float:
        """Video length in seconds (0 while unknown)."""
        ...

    def subscribe(
        self, event: PlaybackEvent, handler: Callable[..., Any]
    ) -> Callable[[], None]:
        """Register an event handler; returns a callable that removes it.

        READY handlers are called with no arguments, STATE_CHANGE handlers
        with the new PlaybackState.
        """
        ...


class PlaybackObserver:
    """Feed playback of one lesson into a ProgressTracker."""

    def __init__(
        self,
        tracker: ProgressTracker,
        lesson_id: str,
        source: PlaybackSource | None = None,
        interval: float | None = None,
    ):
        if interval is None:
            interval = get_settings().progress_sampling_interval_seconds
        if interval <= 0:
            msg = f"Sampling interval must be positive, got {interval}"
            raise ValueError(msg)
        self.tracker = tracker
        self.lesson_id = lesson_id
        self.interval = interval
        self._source: PlaybackSource | None = None
        self._unsubscribers: list[Callable[[], None]] = []
        self._task: asyncio.Task[None] | None = None
        if source is not None:
            self.attach(source)

    @property
    def source(self) -> PlaybackSource | None:
        return self._source

    @property
    def is_sampling(self) -> bool:
        """Whether a sampling loop is currently active."""
        return self._task is not None and not self._task.done()

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    def attach(self, source: PlaybackSource, lesson_id: str | None = None) -> None:
        """Observe a (new) playback source.

        Any previous source is detached and its sampling loop stopped first.
        """
        self.detach()
        if lesson_id is not None:
            self.lesson_id = lesson_id
        self._source = source
        self._unsubscribers = [
            source.subscribe(PlaybackEvent.READY, self._on_ready),
            source.subscribe(PlaybackEvent.STATE_CHANGE, self._on_state_change),
        ]

    def detach(self) -> None:
        """Stop sampling and stop listening to the current source."""
        self._stop_sampling()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._source = None

    def close(self) -> None:
        self.detach()

    def __enter__(self) -> "PlaybackObserver":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ==========================================================================
    # Sampling
    # ==========================================================================

    def sample(self) -> int | None:
        """Read the playhead once and record the watched percentage.

        Returns:
            Recorded percentage, or None while the duration is unknown
        """
        if self._source is None:
            return None
        duration = self._source.get_duration()
        if not duration or duration <= 0:
            return None

        percentage = clamp_percentage(
            math.floor(self._source.get_current_time() / duration * 100)
        )
        self.tracker.update_watch_progress(self.lesson_id, percentage)
        return percentage

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.sample()
            except Exception:
                with ProgressContext(self.tracker.course_id, self.lesson_id):
                    logger.exception("playback_sample_failed")

    def _start_sampling(self) -> None:
        if self.is_sampling:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def _stop_sampling(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    # ==========================================================================
    # Event Handlers
    # ==========================================================================

    def _on_ready(self) -> None:
        with ProgressContext(self.tracker.course_id, self.lesson_id):
            logger.debug(
                "playback_ready",
                duration=self._source.get_duration() if self._source else None,
            )

    def _on_state_change(self, state: PlaybackState) -> None:
        state = PlaybackState(state)
        if state is PlaybackState.PLAYING:
            self._start_sampling()
        elif state is PlaybackState.PAUSED:
            self._stop_sampling()
        elif state is PlaybackState.ENDED:
            try:
                if not self.tracker.is_lesson_completed(self.lesson_id):
                    self.tracker.mark_lesson_complete(self.lesson_id)
            finally:
                self._stop_sampling()
