"""Plain data records exchanged between the board core and its collaborators.

Stored and transmitted JSON uses camelCase keys; the dataclasses use
snake_case attributes and convert at the edges with ``from_dict``/``to_dict``.
"""

from dataclasses import dataclass, field
from enum import Enum


def _text(data: dict, *keys: str) -> str:
    """Return the first non-null value among keys as text, or an empty string."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return str(value)
    return ''


def _tags(value) -> list[str]:
    # Anything but a list of strings is dropped
    if not isinstance(value, list):
        return []
    return [tag for tag in value if isinstance(tag, str)]


class Theme(str, Enum):
    """Colour theme preference."""

    LIGHT = 'light'
    DARK = 'dark'

    def toggled(self) -> 'Theme':
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT


@dataclass
class Quote:
    id: str
    content: str
    author: str
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'Quote':
        """Build a Quote from stored or proxy JSON (``_id`` accepted for ``id``)."""
        return cls(
            id=_text(data, 'id', '_id'),
            content=_text(data, 'content'),
            author=_text(data, 'author'),
            tags=_tags(data.get('tags')),
        )

    def to_dict(self) -> dict:
        return {'id': self.id, 'content': self.content, 'author': self.author, 'tags': list(self.tags)}


@dataclass
class Photo:
    url: str
    id: str = ''
    thumb: str = ''
    alt: str = ''
    photographer: str = ''
    photographer_url: str = ''
    color: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'Photo':
        return cls(
            url=data['url'],
            id=data.get('id') or '',
            thumb=data.get('thumb') or '',
            alt=data.get('alt') or '',
            photographer=data.get('photographer') or '',
            photographer_url=data.get('photographerUrl') or '',
            color=data.get('color') or '',
        )


@dataclass
class Track:
    id: str
    title: str
    artist: str
    preview_url: str
    cover_url: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'Track':
        """Build a Track from proxy JSON (``preview``/``cover`` spellings accepted)."""
        return cls(
            id=_text(data, 'id'),
            title=_text(data, 'title'),
            artist=_text(data, 'artist'),
            preview_url=data.get('previewUrl') or data.get('preview') or '',
            cover_url=data.get('coverUrl') or data.get('cover') or '',
        )

    @property
    def display_name(self) -> str:
        return f"{self.artist or 'Unknown'} - {self.title or 'Unknown'}"


@dataclass
class Favorite:
    """A saved quote + photo pair."""

    id: str
    quote_id: str
    quote_text: str
    author: str
    saved_at: str
    tags: list[str] = field(default_factory=list)
    image_url: str = ''
    image_thumb: str = ''
    image_alt: str = ''
    photographer: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'Favorite':
        return cls(
            id=_text(data, 'id'),
            quote_id=_text(data, 'quoteId'),
            quote_text=_text(data, 'quoteText'),
            author=_text(data, 'author'),
            saved_at=_text(data, 'savedAt'),
            tags=_tags(data.get('tags')),
            image_url=_text(data, 'imageUrl'),
            image_thumb=_text(data, 'imageThumb'),
            image_alt=_text(data, 'imageAlt'),
            photographer=_text(data, 'photographer'),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'quoteId': self.quote_id,
            'quoteText': self.quote_text,
            'author': self.author,
            'tags': list(self.tags),
            'imageUrl': self.image_url,
            'imageThumb': self.image_thumb,
            'imageAlt': self.image_alt,
            'photographer': self.photographer,
            'savedAt': self.saved_at,
        }
