"""Chapa Quente ordering API."""

__version__ = "1.0.0"
