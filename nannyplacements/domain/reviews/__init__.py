"""Reviews domain - Client ratings and complaints about workers"""

__all__ = []
