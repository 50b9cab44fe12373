"""Garmin Connect data models, SQLite storage, sync task queue, rate limiting and progress display."""

__version__ = "1.0.6"