"""Documents domain - Worker verification uploads and review status"""

__all__ = []
