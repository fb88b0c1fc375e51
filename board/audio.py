"""Audio sources for preview playback.

``VlcAudioSource`` plays a single preview URL through python-vlc. The
controller only depends on the ``AudioSource`` protocol, so tests and other
backends can supply their own factory.
"""

import asyncio
from collections.abc import Callable
from config import PLAY_POLL_INTERVAL, PLAY_TIMEOUT
from typing import Protocol


class PlaybackBlockedError(Exception):
    """Raised when an audio backend refuses to start playback."""

    def __init__(self, url: str, reason: str = "playback refused"):
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class AudioSource(Protocol):
    volume: float

    async def play(self) -> None: ...

    def pause(self) -> None: ...

    def release(self) -> None: ...

    def on_end(self, callback: Callable[[], None]) -> None: ...


class VlcAudioSource:
    """One preview stream on its own VLC media player."""

    def __init__(self, vlc_module, instance, url: str, play_timeout: float = PLAY_TIMEOUT):
        self._vlc = vlc_module
        self.url = url
        self.play_timeout = play_timeout
        self.media_player = instance.media_player_new()
        self.media_player.set_media(instance.media_new(url))
        self._volume = 1.0

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        # VLC works in whole percent
        self._volume = value
        self.media_player.audio_set_volume(int(round(value * 100)))

    async def play(self) -> None:
        """Start playback and wait until VLC reports it is playing.

        Raises:
            PlaybackBlockedError: VLC refused to start or hit an error state
        """
        if self.media_player.play() == -1:
            raise PlaybackBlockedError(self.url)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.play_timeout
        while loop.time() < deadline:
            state = self.media_player.get_state()
            if state == self._vlc.State.Playing:
                # Volume set before the output starts is ignored by some VLC builds
                self.volume = self._volume
                return
            if state == self._vlc.State.Error:
                raise PlaybackBlockedError(self.url, "media error")
            await asyncio.sleep(PLAY_POLL_INTERVAL)
        raise PlaybackBlockedError(self.url, f"not playing after {self.play_timeout}s")

    def pause(self) -> None:
        self.media_player.set_pause(1)

    def release(self) -> None:
        self.media_player.stop()
        self.media_player.release()

    def on_end(self, callback: Callable[[], None]) -> None:
        """Call callback when the stream finishes. Runs on VLC's event thread."""
        self.media_player.event_manager().event_attach(
            self._vlc.EventType.MediaPlayerEndReached, lambda event: callback()
        )


class VlcAudioFactory:
    """Builds ``VlcAudioSource`` objects that share one VLC instance."""

    def __init__(self, *vlc_args: str):
        import vlc

        self._vlc = vlc
        self.instance = vlc.Instance(*(vlc_args or ('--no-video', '--quiet')))

    def __call__(self, url: str) -> VlcAudioSource:
        return VlcAudioSource(self._vlc, self.instance, url)
