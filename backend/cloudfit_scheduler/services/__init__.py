from .registry import SchedulingRegistry

__all__ = ["SchedulingRegistry"]
