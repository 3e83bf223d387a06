from __future__ import annotations


class ServiceError(Exception):
    """Base class that carries a default HTTP status code for API mapping."""

    default_status = 400

    def __init__(self, message: str = "", *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code if status_code is not None else self.default_status


class UnsupportedMultiRangeError(ServiceError):
    default_status = 400


class MalformedRangeError(ServiceError):
    default_status = 400


class RangeNotSatisfiableError(ServiceError):
    default_status = 416

    def __init__(self, message: str = "", *, total_size: int, status_code: int | None = None) -> None:
        super().__init__(message, status_code=status_code)
        self.total_size = total_size


class FileNotFoundOnDiskError(ServiceError):
    default_status = 404


class PathOutsideRootError(ServiceError):
    default_status = 400
