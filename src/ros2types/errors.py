"""Structured errors raised while loading and querying the type registry.

Load-time errors (``AccessError``, ``ParseError``, ``InvalidTypeError``,
``ConflictError``) are local to one file: the loader logs them and moves on.
Query-time errors (``UnknownFormatError``, ``InvalidKeyError``,
``InvalidRequestError``) become an error reply whose body is ``to_dict()``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    ACCESS_ERROR = "ACCESS_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TYPE_CONFLICT = "TYPE_CONFLICT"
    UNKNOWN_FORMAT = "UNKNOWN_FORMAT"
    INVALID_KEY = "INVALID_KEY"
    INVALID_REQUEST = "INVALID_REQUEST"
    CONFIG_ERROR = "CONFIG_ERROR"


class Ros2TypesError(Exception):
    """Base error carrying a machine-readable code."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }


class AccessError(Ros2TypesError):
    """A definition or description file could not be found or read."""

    code = ErrorCode.ACCESS_ERROR


class ParseError(Ros2TypesError):
    """A description file is not valid JSON or violates the description schema."""

    code = ErrorCode.PARSE_ERROR


class InvalidTypeError(Ros2TypesError):
    """A description parsed fine but does not describe a well-formed type."""

    code = ErrorCode.VALIDATION_ERROR


class ConflictError(Ros2TypesError):
    """Two description files define the same type name with different hashes."""

    code = ErrorCode.TYPE_CONFLICT

    def __init__(self, type_name: str, existing_path: str, rejected_path: str) -> None:
        super().__init__(
            f"Found conflicting hash for {type_name} loaded from {existing_path} : "
            f"see {rejected_path}. Check types definitions!"
        )
        self.type_name = type_name
        self.existing_path = existing_path
        self.rejected_path = rejected_path


class UnknownFormatError(Ros2TypesError):
    """A query asked for a reply format that does not exist."""

    code = ErrorCode.UNKNOWN_FORMAT

    def __init__(self, requested: str, accepted: list[str]) -> None:
        super().__init__(f"Unknown format {requested!r} - accepted values are: {accepted}")
        self.requested = requested
        self.accepted = accepted


class InvalidKeyError(Ros2TypesError):
    """A key or pattern is empty, has empty segments or misuses wildcards."""

    code = ErrorCode.INVALID_KEY


class InvalidRequestError(Ros2TypesError):
    """A transport received a request it cannot decode."""

    code = ErrorCode.INVALID_REQUEST


class ConfigError(Ros2TypesError):
    """The process environment or settings do not allow building a registry."""

    code = ErrorCode.CONFIG_ERROR


class ReplyDeliveryError(Exception):
    """Raised by a transport when a reply cannot be delivered to the requester."""
