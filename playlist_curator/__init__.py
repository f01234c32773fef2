"""
Smart Playlist Curator - builds bounded, balanced playlists from a local library.
"""

__version__ = "0.3.0"
