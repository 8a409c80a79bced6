"""Fire Notes - structured notes with autosave and export."""

__version__ = "1.0.0"
