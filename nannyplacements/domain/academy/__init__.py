"""Academy domain - Training video sequence and completion tracking"""

__all__ = []
