"""Error kinds and exception types for the wire layer.

Every decode path raises exactly one :class:`DecodeError` carrying one
:class:`ErrorKind`. There is no partial success: a value is either fully
valid or rejected.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Closed set of rejection reasons."""

    MISSING_SEPARATOR = "missing_separator"
    UNKNOWN_TAG = "unknown_tag"
    BAD_LENGTH = "bad_length"
    BAD_ENCODING = "bad_encoding"
    BAD_VALUE = "bad_value"
    UNKNOWN_ACTION_TAG = "unknown_action_tag"
    MISSING_FIELD = "missing_field"
    UNEXPECTED_FIELD = "unexpected_field"
    FLATTEN_NAME_COLLISION = "flatten_name_collision"


class PkdError(Exception):
    """Base class for structured wire-layer errors.

    Attributes:
        kind: The rejection reason.
        message: Human-readable description.
        field: Dot-joined wire path of the offending field, if known.
    """

    def __init__(self, kind: ErrorKind, message: str, *, field: str | None = None) -> None:
        self.kind = kind
        self.message = message
        self.field = field
        super().__init__(self._render())

    def _render(self) -> str:
        if self.field:
            return f"{self.kind}: {self.field}: {self.message}"
        return f"{self.kind}: {self.message}"


class DecodeError(PkdError, ValueError):
    """A value failed canonical decoding or structural validation."""


class SchemaError(PkdError, TypeError):
    """A payload schema or envelope was declared inconsistently."""


class HostClockError(BaseException):
    """The host clock reads before the Unix epoch.

    Derives from ``BaseException`` so ordinary ``except Exception`` handlers
    never absorb it: a broken clock is an environment fault, not a protocol
    error.
    """
