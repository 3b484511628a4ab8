"""Interests domain - Client interest workflow from request to contact release"""

from .state_machine import InvalidTransitionError, Stage

__all__ = ["InvalidTransitionError", "Stage"]
