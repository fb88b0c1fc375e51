from decouple import config
from pathlib import Path

# Storage Configuration
DB_NAME = config('BOARD_DB_NAME', default='board.db')

# Keys of the durable key-value store (values are always text)
STORAGE_KEYS = {
    'favorites': 'dib_favorites',
    'theme': 'dib_theme',
    'history': 'dib_history',
    'volume': 'dib_volume',
    'track_index': 'dib_track_index',
}

# Collection limits
MAX_FAVORITES = 50
MAX_HISTORY = 30

# Theme Configuration
THEMES = ('light', 'dark')
DEFAULT_THEME = 'light'

# Player Configuration
DEFAULT_VOLUME = 0.4
DEFAULT_TRACK_INDEX = 0
PLAY_TIMEOUT = config('BOARD_PLAY_TIMEOUT', default=2.0, cast=float)  # seconds
PLAY_POLL_INTERVAL = 0.05  # seconds

# Proxy API Configuration
API_URL = config('BOARD_API_URL', default='http://localhost:3000')
REQUEST_TIMEOUT = config('BOARD_REQUEST_TIMEOUT', default=10.0, cast=float)
DEFAULT_QUOTE_TAG = 'inspirational'

# Shown when the quote endpoint is unreachable
FALLBACK_QUOTE = {
    'id': 'f1',
    'content': 'The secret of getting ahead is getting started.',
    'author': 'Mark Twain',
    'tags': ['motivational'],
}

# Logging Configuration
LOG_LEVEL = config('BOARD_LOG_LEVEL', default='INFO')
LOG_FILE = config('BOARD_LOG_FILE', default=None)


def get_version():
    """Get version from pyproject.toml"""
    import tomllib

    pyproject_path = Path(__file__).parent / "pyproject.toml"
    if pyproject_path.exists():
        with open(pyproject_path, 'rb') as f:
            data = tomllib.load(f)
            return data.get("project", {}).get("version", "unknown")
    return "unknown"


__version__ = get_version()
