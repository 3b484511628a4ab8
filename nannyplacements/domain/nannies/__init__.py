"""Nannies domain - Browsing, filtering and auto-matching workers"""

__all__ = []
