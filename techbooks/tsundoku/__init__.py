"""
Reading queue ("tsundoku").

Books are stacked, picked up one at a time, marked done and can be
restacked.  ``QueueService`` holds the rules; repositories only store
what they are given.
"""

from .errors import TsundokuError  # noqa: F401
from .schemas import QueueItem, Status  # noqa: F401
from .service import QueueService  # noqa: F401
