"""Background-music playback over a single audio source."""

import asyncio
from board.audio import AudioSource, PlaybackBlockedError, VlcAudioFactory
from board.db import KeyValueStore
from board.interaction import InteractionGate
from board.logging import log_error, log_player_action, playback_logger
from board.models import Track
from board.sources import TrackSource
from collections.abc import Callable
from config import DEFAULT_TRACK_INDEX, DEFAULT_VOLUME, STORAGE_KEYS
from eliot import log_message, start_action
from enum import Enum


class PlaybackState(Enum):
    EMPTY = 'empty'
    LOADED = 'loaded'
    ATTEMPTING = 'attempting'
    PLAYING = 'playing'
    PAUSED = 'paused'
    BLOCKED = 'blocked'


class PlaybackController:
    """Plays preview tracks one at a time and remembers where the user left off.

    Only one audio source exists at a time; selecting a track always tears the
    previous one down first. When the backend refuses to start (autoplay
    blocked), playback is retried once on the next user interaction reported
    through ``notify_interaction``.

    A single observer may be registered with ``on_playback_change``; it is
    called with the new playing flag on every play/pause transition.
    Registering another observer replaces the previous one.
    """

    def __init__(
        self,
        store: KeyValueStore,
        track_source: TrackSource,
        audio_factory: Callable[[str], AudioSource] | None = None,
        interaction_gate: InteractionGate | None = None,
    ):
        """Initialize PlaybackController.

        Args:
            store: Key-value store holding the saved volume and track index
            track_source: Source of the preview track list
            audio_factory: Builds an audio source for a preview URL (VLC by default)
            interaction_gate: One-shot wait used for autoplay recovery
        """
        self.store = store
        self.track_source = track_source
        self._audio_factory = audio_factory
        self.interaction_gate = interaction_gate or InteractionGate()
        self._tracks: list[Track] = []
        self._current_index = DEFAULT_TRACK_INDEX
        self._source: AudioSource | None = None
        self._is_playing = False
        self._state = PlaybackState.EMPTY
        self._on_playback_change: Callable[[bool], None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._advance_task: asyncio.Task | None = None

    # State

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_track(self) -> Track | None:
        if self._source is None or self._current_index >= len(self._tracks):
            return None
        return self._tracks[self._current_index]

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def state(self) -> PlaybackState:
        return self._state

    def on_playback_change(self, callback: Callable[[bool], None] | None) -> None:
        """Register the single play-state observer, replacing any previous one.

        Args:
            callback: Called with True when playback starts and False when it stops;
                None removes the current observer
        """
        self._on_playback_change = callback

    def _track_label(self) -> str:
        track = self.current_track
        return track.display_name if track else "No track"

    def _notify(self, playing: bool) -> None:
        log_message(message_type="playback_notify", playing=playing)
        if self._on_playback_change:
            self._on_playback_change(playing)

    # Track list

    async def fetch_track_list(self) -> list[Track]:
        """Fetch the preview track list.

        Returns:
            list[Track]: The fetched tracks, or an empty list on failure
                (in which case the current list is kept)
        """
        with start_action(playback_logger, "fetch_track_list"):
            result = await self.track_source.fetch_tracks()
            if not result.ok:
                log_player_action(
                    "fetch_tracks_failed", trigger_source="network", description=f"Could not load music: {result.error}"
                )
                return []

            self._tracks = list(result.value)
            if self._source is None:
                self._state = PlaybackState.LOADED if self._tracks else PlaybackState.EMPTY
            log_message(message_type="tracks_loaded", count=len(self._tracks))
            return list(self._tracks)

    async def start(self) -> Track | None:
        """Load the track list and resume the last played track."""
        if not await self.fetch_track_list():
            return None
        return await self.select_track(self.get_saved_index())

    # Track selection

    async def select_track(self, index: int) -> Track | None:
        """Switch to the track at index and try to start it.

        The index wraps in both directions. If playback is refused, the
        controller waits for the next user interaction and retries once.

        Returns:
            Track | None: The selected track (even if audio did not start),
                or None when no tracks are loaded
        """
        if not self._tracks:
            return None

        self._loop = asyncio.get_running_loop()
        self._current_index = index % len(self._tracks)
        track = self._tracks[self._current_index]
        self.store.set(STORAGE_KEYS['track_index'], self._current_index)

        self._teardown()

        source = self._get_audio_factory()(track.preview_url)
        source.volume = self.get_volume()
        source.on_end(lambda: self._on_track_end(source))
        self._source = source
        self._state = PlaybackState.ATTEMPTING

        with start_action(playback_logger, "select_track", index=self._current_index, track=track.display_name):
            try:
                await source.play()
            except PlaybackBlockedError as e:
                if source is not self._source:
                    return track
                self._is_playing = False
                self._state = PlaybackState.BLOCKED
                log_player_action(
                    "autoplay_blocked",
                    trigger_source="system",
                    track=track.display_name,
                    description=f"Playback blocked ({e.reason}), waiting for interaction",
                )
                self._notify(False)
                self.interaction_gate.arm(lambda: self._play_after_interaction(source))
                return track

            if source is not self._source:
                return track
            self._is_playing = True
            self._state = PlaybackState.PLAYING
            log_player_action("track_started", trigger_source="system", track=track.display_name)
            self._notify(True)
            return track

    async def next(self) -> Track | None:
        """Select the following track, wrapping to the first."""
        return await self.select_track(self._current_index + 1)

    async def previous(self) -> Track | None:
        """Select the preceding track, wrapping to the last."""
        return await self.select_track(self._current_index - 1)

    async def notify_interaction(self, event_type: str) -> bool:
        """Forward a user click or key press to a pending autoplay retry.

        Returns:
            bool: True if a retry was triggered
        """
        return await self.interaction_gate.notify(event_type)

    async def _play_after_interaction(self, source: AudioSource) -> None:
        if source is not self._source:
            return
        try:
            await source.play()
        except PlaybackBlockedError as e:
            log_player_action("interaction_retry_failed", trigger_source="user", description=str(e))
            return
        if source is not self._source:
            return
        self._is_playing = True
        self._state = PlaybackState.PLAYING
        log_player_action("interaction_retry", trigger_source="user", description="Playback started after interaction")
        self._notify(True)

    def _on_track_end(self, source: AudioSource) -> None:
        # May run on the audio backend's thread
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._advance_from, source)

    def _advance_from(self, source: AudioSource) -> None:
        if source is not self._source:
            return
        log_player_action("track_finished", trigger_source="system", track=self._track_label())
        self._advance_task = self._loop.create_task(self.next())
        self._advance_task.add_done_callback(self._on_advance_done)

    def _on_advance_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log_error(playback_logger, error, context="auto_advance")

    # Transport

    async def toggle_playback(self) -> bool:
        """Pause if playing, resume if paused.

        Returns:
            bool: The new playing flag; False without effect if no track is selected,
                unchanged while a start attempt is still pending
        """
        if self._source is None:
            return False
        if self._state is PlaybackState.ATTEMPTING:
            # A start is already in flight; its outcome decides the flag
            return self._is_playing

        source = self._source
        old_state = "playing" if self._is_playing else "paused"
        self.interaction_gate.cancel()
        if self._is_playing:
            source.pause()
            self._is_playing = False
            self._state = PlaybackState.PAUSED
        else:
            try:
                await source.play()
            except PlaybackBlockedError as e:
                log_error(playback_logger, e, context="resume")
            if source is not self._source:
                return self._is_playing
            self._is_playing = True
            self._state = PlaybackState.PLAYING

        log_player_action(
            "play_pause_pressed",
            trigger_source="user",
            track=self._track_label(),
            old_state=old_state,
            new_state="playing" if self._is_playing else "paused",
        )
        self._notify(self._is_playing)
        return self._is_playing

    def set_volume(self, value: float) -> None:
        """Apply and persist the volume (0.0-1.0, range is the caller's responsibility)."""
        value = float(value)
        if self._source is not None:
            self._source.volume = value
        self.store.set(STORAGE_KEYS['volume'], value)
        log_player_action("volume_changed", trigger_source="user", description=f"Volume changed to {value:.0%}")

    def get_volume(self) -> float:
        """Get the saved volume, defaulting to 0.4."""
        raw = self.store.get(STORAGE_KEYS['volume'])
        if raw is None:
            return DEFAULT_VOLUME
        try:
            return float(raw)
        except ValueError:
            return DEFAULT_VOLUME

    def get_saved_index(self) -> int:
        """Get the last played track index, defaulting to 0."""
        raw = self.store.get(STORAGE_KEYS['track_index'])
        if raw is None:
            return DEFAULT_TRACK_INDEX
        try:
            return int(raw)
        except ValueError:
            return DEFAULT_TRACK_INDEX

    # Lifecycle

    def _get_audio_factory(self) -> Callable[[str], AudioSource]:
        if self._audio_factory is None:
            self._audio_factory = VlcAudioFactory()
        return self._audio_factory

    def _teardown(self) -> None:
        """Stop and release the current source and drop any pending retry."""
        self.interaction_gate.cancel()
        if self._source is not None:
            self._source.pause()
            self._source.release()
            self._source = None
        self._is_playing = False

    def close(self) -> None:
        """Release audio resources."""
        was_playing = self._is_playing
        self._teardown()
        self._state = PlaybackState.LOADED if self._tracks else PlaybackState.EMPTY
        if was_playing:
            self._notify(False)
