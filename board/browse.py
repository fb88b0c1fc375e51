"""History navigation and share helpers for the currently shown quote."""

from board.models import Quote
from board.storage import CollectionsManager
from urllib.parse import quote as url_quote

SHARE_URLS = {
    'twitter': 'https://twitter.com/intent/tweet?text={text}',
    'facebook': 'https://www.facebook.com/sharer/sharer.php?quote={text}',
}


class HistoryCursor:
    """Position within the quote history for previous/next browsing.

    The cursor reads the history from storage on every move, so it always
    reflects entries added or cleared elsewhere.
    """

    def __init__(self, collections: CollectionsManager):
        self.collections = collections
        self.index = -1

    def sync(self) -> Quote | None:
        """Point at the newest history entry (or nothing when history is empty)."""
        history = self.collections.list_history()
        self.index = len(history) - 1
        return history[self.index] if history else None

    def show(self, index: int) -> Quote | None:
        """Move to index if it is within the history; otherwise stay put."""
        history = self.collections.list_history()
        if not 0 <= index < len(history):
            return None
        self.index = index
        return history[index]

    def previous(self) -> Quote | None:
        return self.show(self.index - 1)

    def next(self) -> Quote | None:
        return self.show(self.index + 1)

    def position(self) -> tuple[int, int]:
        """Return the 1-based position and history length, e.g. (3, 10)."""
        return self.index + 1, len(self.collections.list_history())


def share_text(quote: Quote) -> str:
    return f"\"{quote.content}\" — {quote.author}"


def share_url(quote: Quote, network: str = 'twitter') -> str:
    """Build a share link for a quote.

    Raises:
        ValueError: network is not one of SHARE_URLS
    """
    if network not in SHARE_URLS:
        raise ValueError(f"unknown share network: {network}")
    return SHARE_URLS[network].format(text=url_quote(share_text(quote), safe=''))
