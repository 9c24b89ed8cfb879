"""Environment settings for the translator service and CLI."""

from .app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
