"""Anecdote - AI-generated stories behind academic topics."""

__version__ = "0.1.0"
