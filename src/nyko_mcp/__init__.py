"""Nyko - implementation pattern lookup for AI coding assistants."""

__version__ = "1.0.0"
