class AttendanceError(Exception):
    """Base exception for the attendance service."""


class InvalidAttendanceError(AttendanceError):
    """Raised when a submitted attendance mark is missing or has bad fields."""


class DatabaseUnavailableError(AttendanceError):
    """Raised when the record store cannot be reached at startup."""
