"""Payments domain - Placement fee checkout, confirmation, webhook and reconciliation"""

__all__ = []
