"""Reconstruct assistant session logs into conversations and report on them."""

__version__ = "0.1.0"
