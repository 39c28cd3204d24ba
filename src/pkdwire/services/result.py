"""Result values returned by :class:`pkdwire.services.wire.WireService`.

INVARIANT: service methods return a ServiceResult and never raise for bad
input. A rejected action is a result with ``ok=False`` whose error code is
the decoder's ``ErrorKind`` value.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed.

    ``code`` is an ``ErrorKind`` value (``bad_length``, ``missing_field``...)
    or a service code such as ``input_too_large``. ``detail`` carries the
    offending wire field, limits, or the accepted value kinds.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation (``decode``, ``check_value``, ``timestamp``).

    ``data`` describes the decoded value on success and never holds key
    material. ``warnings`` are shown on stderr without failing the command.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
