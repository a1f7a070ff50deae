"""Task scheduling for periodic operations.

This module provides an async interval scheduler using asyncio.
"""

from .scheduler import Job, Scheduler

__all__ = ["Job", "Scheduler"]
