"""VideoTube API: channel stats, playlists and subscriptions backend."""

__version__ = "0.3.0"
