"""Fetch random Chuck Norris jokes and keep the unique ones in a database."""

__version__ = "0.1.0"
