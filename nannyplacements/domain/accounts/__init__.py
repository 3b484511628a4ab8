"""Accounts domain - Registration, login and role assignment"""

__all__ = []
