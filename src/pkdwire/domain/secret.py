"""Secret material: constant-time equality and the symmetric-key buffer.

Key bytes live in a private ``bytearray`` that is overwritten with zeros
when the key is wiped, leaves a ``with`` block, or is garbage collected.
Python cannot guarantee that no other copy of the bytes ever existed (for
example the decoded wire text), so scrubbing covers the buffer this module
owns.

Equality never uses default structural comparison: it goes through
:func:`constant_time_eq`, whose loop visits every byte pair without an early
exit. Key length is compared up front and so is observable through timing;
key length is not secret in this protocol.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from pkdwire.domain.codec import b64url_decode, b64url_encode, custom_error
from pkdwire.domain.errors import DecodeError, ErrorKind


def constant_time_eq(a: bytes | bytearray | memoryview, b: bytes | bytearray | memoryview) -> bool:
    """Compare two byte sequences in time independent of the first mismatch.

    Returns False immediately when lengths differ. Otherwise XOR-accumulates
    over every byte pair and reports equality iff the accumulator is zero.
    """
    if len(a) != len(b):
        return False
    diff = 0
    for left, right in zip(a, b, strict=True):
        diff |= left ^ right
    return diff == 0


class SymmetricKey:
    """Symmetric key that decrypts one sealed field of a payload.

    Not hashable, redacted in ``repr``/``str``, and compared only in
    constant time.

    Usage::

        key = SymmetricKey.init(lambda buf: buf.extend(derive_key()))
        with key:
            cipher.decrypt(key.expose_secret(), ...)
    """

    __slots__ = ("_buffer",)

    def __init__(self, secret: bytes | bytearray | memoryview | Iterable[int] = b"") -> None:
        object.__setattr__(self, "_buffer", bytearray(secret))

    @classmethod
    def from_bytes(cls, secret: bytes | bytearray | memoryview) -> Self:
        return cls(secret)

    @classmethod
    def init(cls, fill: Callable[[bytearray], None]) -> Self:
        """Build a key by letting *fill* write directly into the owned buffer.

        Avoids an intermediate ``bytes`` copy of the secret.
        """
        key = cls()
        fill(key._buffer)
        return key

    def expose_secret(self) -> memoryview:
        """Read-only view of the key bytes. Do not retain it past the key's lifetime."""
        return memoryview(self._buffer).toreadonly()

    def wipe(self) -> None:
        """Overwrite the key bytes with zeros."""
        buf = self._buffer
        for i in range(len(buf)):
            buf[i] = 0

    def __len__(self) -> int:
        return len(self._buffer)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __del__(self) -> None:
        buf = getattr(self, "_buffer", None)
        if buf is not None:
            self.wipe()

    def encode(self) -> str:
        """Unpadded base64url text of the key bytes."""
        return b64url_encode(bytes(self._buffer))

    @classmethod
    def decode(cls, text: str) -> Self:
        if not isinstance(text, str):
            raise DecodeError(ErrorKind.BAD_VALUE, "expected base64url key text")
        return cls(b64url_decode(text))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymmetricKey):
            return NotImplemented
        return constant_time_eq(self._buffer, other._buffer)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "SymmetricKey(<redacted>)"

    __str__ = __repr__

    def __setattr__(self, name: str, value: Any) -> None:
        msg = "SymmetricKey is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = "SymmetricKey is immutable"
        raise AttributeError(msg)

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self

    def __reduce__(self) -> Any:
        msg = "SymmetricKey cannot be pickled"
        raise TypeError(msg)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: v.encode(), when_used="json"
            ),
        )

    @classmethod
    def _validate(cls, value: Any) -> SymmetricKey:
        if isinstance(value, SymmetricKey):
            return value
        try:
            return cls.decode(value)
        except DecodeError as exc:
            raise custom_error(exc.kind, exc.message) from exc
