"""Profiles domain - Client preferences and worker profiles"""

__all__ = []
