"""Errors raised by the reading queue.

Routers translate these into HTTP responses; nothing in the service or
the repositories knows about status codes.
"""


class TsundokuError(Exception):
    """Base class for reading queue errors."""

    default_message = "tsundoku error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class InvalidInputError(TsundokuError):
    default_message = "invalid tsundoku input"


class InvalidStatusError(TsundokuError):
    default_message = "invalid tsundoku status"


class NotFoundError(TsundokuError):
    default_message = "tsundoku item not found"


class AlreadyExistsError(TsundokuError):
    default_message = "tsundoku item already exists"


class ReadingInProgressError(TsundokuError):
    default_message = "reading item already in progress"


class NoStackedItemsError(TsundokuError):
    default_message = "no stacked items available"
