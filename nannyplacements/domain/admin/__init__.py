"""Admin domain - Back-office review of workers, interests, payments and reviews"""

__all__ = []
