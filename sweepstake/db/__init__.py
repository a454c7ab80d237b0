"""Database engine and session helpers."""
