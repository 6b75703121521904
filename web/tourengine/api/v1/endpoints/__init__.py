from . import schedules, pricing

__all__ = ["schedules", "pricing"]
