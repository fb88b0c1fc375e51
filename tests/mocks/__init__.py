from tests.mocks.audio_mock import MockAudioFactory, MockAudioSource
from tests.mocks.vlc_mock import (
    MockEventManager,
    MockEventType,
    MockInstance,
    MockMedia,
    MockMediaPlayer,
    MockState,
    make_vlc_module,
)

__all__ = [
    'MockAudioFactory',
    'MockAudioSource',
    'MockEventManager',
    'MockEventType',
    'MockInstance',
    'MockMedia',
    'MockMediaPlayer',
    'MockState',
    'make_vlc_module',
]
