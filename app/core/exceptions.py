from fastapi import status


class AppError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransitionError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, current: str, target: str, message: str = None):
        super().__init__(message or f"Invalid status transition from {current} to {target}")
        self.current = current
        self.target = target


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
