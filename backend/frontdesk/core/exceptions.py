"""Exception hierarchy shared by the front-desk services."""

from typing import Optional


class FrontDeskError(Exception):
    """Base class for all front-desk errors."""


class ValidationError(FrontDeskError):
    """Raised when input is rejected before anything is persisted."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class RoomTransitionError(ValidationError):
    """Raised when a room status change is not allowed."""

    def __init__(self, room_id: str, current: str, target: str, reason: str = ""):
        self.room_id = room_id
        self.current = current
        self.target = target
        detail = f"Room {room_id} cannot move from '{current}' to '{target}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail, field="status")


class NotFoundError(FrontDeskError):
    """Raised when a requested record does not exist locally."""

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} '{identifier}' not found")


class RemoteDataError(FrontDeskError):
    """Raised by the remote data service for any failed call.

    Covers transport errors, timeouts, rejected requests and malformed
    responses alike.
    """

    def __init__(self, table: str, operation: str, detail: str, status_code: Optional[int] = None):
        self.table = table
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{operation} on '{table}' failed: {detail}")
