"""
Data models for the URL shortener application.

This module imports and exports all SQLModel models used in the application.
"""

from app.models.url import URL, URLBase

__all__ = [
    "URL",
    "URLBase",
]
