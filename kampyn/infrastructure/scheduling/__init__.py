"""
Background scheduling helpers
"""

from .periodic_task import PeriodicTask

__all__ = ["PeriodicTask"]
