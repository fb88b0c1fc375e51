"""One-shot wait for the first user interaction."""

from collections.abc import Awaitable, Callable
from eliot import log_message

INTERACTION_EVENTS = frozenset({'click', 'keydown'})


class InteractionGate:
    """Holds at most one handler to run on the next click or key press.

    The handler is detached before it runs, so it fires at most once per
    ``arm()`` whatever its outcome. Arming again replaces a pending handler.
    """

    def __init__(self):
        self._handler: Callable[[], Awaitable[None]] | None = None

    @property
    def armed(self) -> bool:
        return self._handler is not None

    def arm(self, handler: Callable[[], Awaitable[None]]) -> None:
        """Register handler for the next interaction."""
        self._handler = handler

    def cancel(self) -> None:
        """Drop the pending handler, if any."""
        self._handler = None

    async def notify(self, event_type: str) -> bool:
        """Report a user interaction.

        Args:
            event_type: 'click' or 'keydown'; anything else is ignored

        Returns:
            bool: True if a pending handler was run
        """
        if self._handler is None or event_type not in INTERACTION_EVENTS:
            log_message(message_type="interaction_ignored", event_type=event_type, armed=self.armed)
            return False

        handler, self._handler = self._handler, None
        await handler()
        return True
