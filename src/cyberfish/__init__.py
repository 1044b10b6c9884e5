"""Cyber Fish: an endless side-scroller core with a best-score leaderboard."""

__version__ = "1.0.0"
