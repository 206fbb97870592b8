"""taskui: a keyboard-driven terminal task tracker backed by SQLite."""

__version__ = "0.1.0"
