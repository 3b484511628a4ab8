"""Domain packages - one router/service/repository/schemas set per marketplace concern"""

__all__ = []
