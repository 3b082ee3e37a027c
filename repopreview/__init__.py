"""Generate GitHub Pages preview thumbnails for an account's repositories."""

__version__ = "0.1.0"
