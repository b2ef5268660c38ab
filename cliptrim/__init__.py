"""ClipTrim — trim media files with ffmpeg using relative time expressions."""

__version__ = "0.1.0"
