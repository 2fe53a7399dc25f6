"""Fetch one page, find its PDF links and download them into a local directory."""

__version__ = "0.1.0"
