"""Phantom-tagged ciphertext container.

``Encrypted[P]`` holds ciphertext bytes whose *logical* plaintext type is
``P``. The parameter exists only for static type checkers, so that a
ciphertext of an actor id cannot be assigned where a ciphertext of a public
key is expected. At runtime ``P`` is erased: it is not stored on instances
and never participates in equality, ordering, hashing, or encoding.

Wire form is bare unpadded base64url with no prefix tag. This module does no
cryptography; decryption belongs to the client.
"""

from __future__ import annotations

from functools import total_ordering
from typing import Any, Generic, Self, TypeVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from pkdwire.domain.codec import b64url_decode, b64url_encode, custom_error
from pkdwire.domain.errors import DecodeError, ErrorKind

P = TypeVar("P")


@total_ordering
class Encrypted(Generic[P]):
    """Ciphertext of a value of logical type ``P``.

    Examples:
        >>> Encrypted.from_ciphertext(b"\\x01\\x02\\x03").encode()
        'AQID'
    """

    __slots__ = ("_ciphertext",)

    def __init__(self, ciphertext: bytes | bytearray | memoryview) -> None:
        object.__setattr__(self, "_ciphertext", bytes(ciphertext))

    @classmethod
    def from_ciphertext(cls, ciphertext: bytes | bytearray | memoryview) -> Self:
        """Wrap already-produced ciphertext. Never fails."""
        return cls(ciphertext)

    @property
    def ciphertext(self) -> bytes:
        return self._ciphertext

    def into_inner(self) -> bytes:
        """Return the raw ciphertext bytes."""
        return self._ciphertext

    def encode(self) -> str:
        return b64url_encode(self._ciphertext)

    @classmethod
    def decode(cls, text: str) -> Self:
        """Decode bare base64url text.

        Raises:
            DecodeError: ``BAD_ENCODING`` for non-canonical base64url, or
                ``BAD_VALUE`` when *text* is not a string.
        """
        if not isinstance(text, str):
            raise DecodeError(ErrorKind.BAD_VALUE, "expected base64url ciphertext text")
        return cls(b64url_decode(text))

    def __bytes__(self) -> bytes:
        return self._ciphertext

    def __len__(self) -> int:
        return len(self._ciphertext)

    def __repr__(self) -> str:
        return f"Encrypted({self.encode()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Encrypted):
            return NotImplemented
        return self._ciphertext == other._ciphertext

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Encrypted):
            return NotImplemented
        return self._ciphertext < other._ciphertext

    def __hash__(self) -> int:
        return hash(self._ciphertext)

    def __setattr__(self, name: str, value: Any) -> None:
        # typing sets __orig_class__ on instances built via Encrypted[P](...);
        # refusing it keeps P out of instance state.
        msg = "Encrypted is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = "Encrypted is immutable"
        raise AttributeError(msg)

    def __reduce__(self) -> tuple[Any, ...]:
        return (Encrypted, (self._ciphertext,))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # source_type may be Encrypted[P]; P is erased.
        return core_schema.no_info_plain_validator_function(
            _validate_encrypted,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: v.encode(), when_used="json"
            ),
        )


def _validate_encrypted(value: Any) -> Encrypted[Any]:
    if isinstance(value, Encrypted):
        return value
    try:
        return Encrypted.decode(value)
    except DecodeError as exc:
        raise custom_error(exc.kind, exc.message) from exc
