"""Bounded favorites and history collections plus the theme preference."""

import json
import uuid
from board.db import KeyValueStore
from board.logging import log_player_action, log_storage_operation, store_logger
from board.models import Favorite, Photo, Quote, Theme
from board.result import Result
from config import DEFAULT_THEME, MAX_FAVORITES, MAX_HISTORY, STORAGE_KEYS
from datetime import UTC, datetime
from eliot import start_action


class CollectionsManager:
    """Manages the favorites list, quote history and theme in durable storage.

    Both lists are append-biased and bounded: once full, the oldest entry is
    evicted before a new one is appended. Favorites are unique per quote id;
    history only suppresses back-to-back repeats of the same quote.
    """

    def __init__(self, store: KeyValueStore):
        """Initialize CollectionsManager.

        Args:
            store: Key-value store used for persistence
        """
        self.store = store

    # Raw list access

    def _read_list(self, key: str) -> Result[list[dict]]:
        """Read a JSON list from the store; corrupt or missing data reads as empty."""
        raw = self.store.get(key)
        if raw is None:
            return Result.success([])
        try:
            data = json.loads(raw)
        except ValueError as e:
            log_storage_operation("read_corrupt", key=key, error=str(e))
            return Result.failure([], f"invalid JSON under {key}: {e}")
        if not isinstance(data, list):
            log_storage_operation("read_corrupt", key=key, error="not a list")
            return Result.failure([], f"expected a list under {key}, got {type(data).__name__}")
        return Result.success([item for item in data if isinstance(item, dict)])

    def _write_list(self, key: str, items: list[dict]) -> None:
        self.store.set(key, json.dumps(items, ensure_ascii=False))

    # Favorites

    def list_favorites(self) -> list[Favorite]:
        """Get all favorites in insertion order.

        Returns:
            list[Favorite]: Saved favorites, empty if nothing is stored or data is corrupt
        """
        return [Favorite.from_dict(item) for item in self._read_list(STORAGE_KEYS['favorites']).value]

    def save_favorite(self, quote: Quote, photo: Photo | None = None) -> bool:
        """Save a quote + photo pair as a new favorite.

        Args:
            quote: Quote being saved
            photo: Background photo shown with the quote, if any

        Returns:
            bool: True if saved, False if the quote was already a favorite
        """
        with start_action(store_logger, "save_favorite", quote_id=quote.id):
            favorites = self._read_list(STORAGE_KEYS['favorites']).value
            if any(Favorite.from_dict(fav).quote_id == quote.id for fav in favorites):
                return False

            if len(favorites) >= MAX_FAVORITES:
                evicted = favorites.pop(0)
                log_storage_operation("evict", key=STORAGE_KEYS['favorites'], favorite_id=evicted.get('id'))

            favorite = Favorite(
                id=f"fav_{uuid.uuid4().hex}",
                quote_id=quote.id,
                quote_text=quote.content,
                author=quote.author,
                tags=list(quote.tags),
                image_url=photo.url if photo else '',
                image_thumb=photo.thumb if photo else '',
                image_alt=photo.alt if photo else '',
                photographer=photo.photographer if photo else '',
                saved_at=datetime.now(UTC).isoformat(),
            )
            favorites.append(favorite.to_dict())
            self._write_list(STORAGE_KEYS['favorites'], favorites)

            log_player_action(
                "favorite_saved",
                trigger_source="user",
                description=f"Saved to favorites: \"{quote.content}\" — {quote.author}",
            )
            return True

    def remove_favorite(self, favorite_id: str) -> None:
        """Remove the favorite with the given id. No-op if absent."""
        favorites = self._read_list(STORAGE_KEYS['favorites']).value
        remaining = [fav for fav in favorites if fav.get('id') != favorite_id]
        if len(remaining) != len(favorites):
            self._write_list(STORAGE_KEYS['favorites'], remaining)
            log_player_action("favorite_removed", trigger_source="user", description=f"Removed favorite {favorite_id}")

    def find_favorite(self, quote_id: str) -> Favorite | None:
        """Get the favorite saved for a quote, if any."""
        return next((fav for fav in self.list_favorites() if fav.quote_id == quote_id), None)

    def is_favorite(self, quote_id: str) -> bool:
        """Check whether a quote has been saved as a favorite."""
        return self.find_favorite(quote_id) is not None

    def toggle_favorite(self, quote: Quote, photo: Photo | None = None) -> bool:
        """Toggle favorite status for a quote.

        Returns:
            bool: True if now favorited, False if now unfavorited
        """
        existing = self.find_favorite(quote.id)
        if existing:
            self.remove_favorite(existing.id)
            return False
        return self.save_favorite(quote, photo)

    def search_favorites(self, text: str) -> list[Favorite]:
        """Filter favorites whose quote text or author contains text (case-insensitive)."""
        needle = text.strip().lower()
        favorites = self.list_favorites()
        if not needle:
            return favorites
        return [fav for fav in favorites if needle in fav.quote_text.lower() or needle in fav.author.lower()]

    def clear_favorites(self) -> None:
        """Delete all favorites."""
        self.store.remove(STORAGE_KEYS['favorites'])
        log_player_action("favorites_cleared", trigger_source="user", description="All favorites cleared")

    # History

    def list_history(self) -> list[Quote]:
        """Get previously viewed quotes, oldest first."""
        return [Quote.from_dict(item) for item in self._read_list(STORAGE_KEYS['history']).value]

    def add_to_history(self, quote: Quote) -> None:
        """Append a viewed quote to the history.

        Only an immediate repeat of the last entry is skipped; the same quote
        may appear again later in the list.
        """
        history = self._read_list(STORAGE_KEYS['history']).value
        if history and Quote.from_dict(history[-1]).id == quote.id:
            return

        if len(history) >= MAX_HISTORY:
            history.pop(0)

        history.append(quote.to_dict())
        self._write_list(STORAGE_KEYS['history'], history)

    def clear_history(self) -> None:
        """Delete the whole quote history."""
        self.store.remove(STORAGE_KEYS['history'])

    # Theme

    def get_theme(self) -> Theme:
        """Get the saved theme, defaulting to light when unset or unrecognised."""
        raw = self.store.get(STORAGE_KEYS['theme'], DEFAULT_THEME)
        try:
            return Theme(raw)
        except ValueError:
            return Theme(DEFAULT_THEME)

    def save_theme(self, value: Theme | str) -> bool:
        """Persist the theme preference.

        Returns:
            bool: False (and nothing written) if value is not a known theme
        """
        try:
            theme = Theme(value)
        except ValueError:
            return False
        self.store.set(STORAGE_KEYS['theme'], theme.value)
        return True

    def toggle_theme(self) -> Theme:
        """Switch between light and dark and persist the result."""
        theme = self.get_theme().toggled()
        self.save_theme(theme)
        return theme
