"""Shared utilities for pagelet."""

from pagelet.utils.html import html_escape, safe_url

__all__ = ["html_escape", "safe_url"]
