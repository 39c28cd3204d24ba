"""Prefixed-base64 codec engine.

Canonical text of a tagged fixed-size value is ``PREFIX:ENCODED`` where
``ENCODED`` is unpadded base64url (RFC 4648 section 5) of exactly ``LEN``
bytes. There are no alternate spellings: the encoded segment length is
checked exactly and non-canonical trailing bits are rejected.

New tags are added by declaring a variant class with ``PREFIX``, ``LEN`` and
``ENCODED_LEN``; this module is never edited for a new tag.

INVARIANT: decode checks run in a fixed order (separator, tag, encoded
length, alphabet, byte length, value), so each input maps to one error kind.
"""

from __future__ import annotations

import base64
import binascii
import re
from functools import total_ordering
from typing import Annotated, Any, ClassVar, Self

from pydantic import GetCoreSchemaHandler, PlainSerializer, PlainValidator
from pydantic_core import PydanticCustomError, core_schema

from pkdwire.domain.errors import DecodeError, ErrorKind

SEPARATOR = ":"

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


def encoded_length(raw_len: int) -> int:
    """Unpadded base64url character count for *raw_len* bytes."""
    return (4 * raw_len + 2) // 3


def b64url_encode(data: bytes) -> str:
    """Encode *data* as unpadded base64url text."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """Decode canonical unpadded base64url text.

    Raises:
        DecodeError: ``BAD_ENCODING`` for padding, characters outside the
            base64url alphabet, an impossible length, or non-zero trailing
            bits (a non-canonical spelling of the same bytes).
    """
    if not _B64URL_RE.fullmatch(text):
        raise DecodeError(ErrorKind.BAD_ENCODING, "not unpadded base64url text")
    if len(text) % 4 == 1:
        raise DecodeError(ErrorKind.BAD_ENCODING, "impossible base64url length")
    try:
        raw = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except binascii.Error as exc:
        raise DecodeError(ErrorKind.BAD_ENCODING, "failed to decode base64url") from exc
    if b64url_encode(raw) != text:
        raise DecodeError(ErrorKind.BAD_ENCODING, "non-canonical base64url encoding")
    return raw


def custom_error(kind: ErrorKind, message: str) -> PydanticCustomError:
    """Wrap a wire error so pydantic reports it with ``type == kind``."""
    return PydanticCustomError(kind.value, "{reason}", {"reason": message})


def _validate_b64url_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if not isinstance(value, str):
        raise custom_error(ErrorKind.BAD_VALUE, "expected base64url text or bytes")
    try:
        return b64url_decode(value)
    except DecodeError as exc:
        raise custom_error(exc.kind, exc.message) from exc


B64UrlBytes = Annotated[
    bytes,
    PlainValidator(_validate_b64url_bytes),
    PlainSerializer(b64url_encode, return_type=str, when_used="json"),
]
"""Raw bytes carried as unpadded base64url text in JSON."""


@total_ordering
class PrefixedBase64:
    """Tagged fixed-length binary value with canonical ``PREFIX:base64url`` text.

    Subclasses that do not declare ``PREFIX`` are *family roots* (for example
    ``PublicKey``): decoding through a root dispatches on the tag to the
    registered variant. Subclasses that declare ``PREFIX``, ``LEN`` and
    ``ENCODED_LEN`` are concrete variants and register with their root.

    Usage::

        class PublicKey(PrefixedBase64): ...

        class Ed25519PublicKey(PublicKey):
            PREFIX = "ed25519"
            LEN = 32
            ENCODED_LEN = 43
    """

    PREFIX: ClassVar[str]
    LEN: ClassVar[int]
    ENCODED_LEN: ClassVar[int]
    _variants: ClassVar[dict[str, type[PrefixedBase64]]] = {}

    __slots__ = ("_value",)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "PREFIX" not in cls.__dict__:
            if not hasattr(cls, "PREFIX"):
                cls._variants = {}
            return

        for attr in ("LEN", "ENCODED_LEN"):
            if attr not in cls.__dict__:
                msg = f"{cls.__name__} declares PREFIX but not {attr}"
                raise TypeError(msg)
        if SEPARATOR in cls.PREFIX or not cls.PREFIX:
            msg = f"{cls.__name__}.PREFIX must be non-empty and must not contain ':'"
            raise TypeError(msg)
        if cls.ENCODED_LEN != encoded_length(cls.LEN):
            msg = (
                f"{cls.__name__}.ENCODED_LEN is {cls.ENCODED_LEN}, "
                f"but {cls.LEN} bytes encode to {encoded_length(cls.LEN)} characters"
            )
            raise TypeError(msg)

        family = cls._family_root()
        if cls.PREFIX in family._variants:
            msg = f"tag {cls.PREFIX!r} already registered for {family.__name__}"
            raise TypeError(msg)
        family._variants[cls.PREFIX] = cls

    @classmethod
    def _family_root(cls) -> type[PrefixedBase64]:
        for klass in cls.__mro__[1:]:
            if "_variants" in klass.__dict__ and "PREFIX" not in klass.__dict__:
                return klass
        return PrefixedBase64

    @classmethod
    def is_variant(cls) -> bool:
        """True for concrete variants, False for family roots."""
        return hasattr(cls, "PREFIX")

    @classmethod
    def variants(cls) -> dict[str, type[Self]]:
        """Registered variants of this family, keyed by tag."""
        return dict(cls._family_root()._variants if cls.is_variant() else cls._variants)

    def __init__(self, value: bytes | bytearray | memoryview) -> None:
        cls = type(self)
        if not cls.is_variant():
            msg = f"{cls.__name__} is a family root; construct one of {sorted(cls._variants)}"
            raise TypeError(msg)
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise DecodeError(ErrorKind.BAD_VALUE, f"{cls.__name__} requires bytes")
        raw = bytes(value)
        if len(raw) != cls.LEN:
            raise DecodeError(
                ErrorKind.BAD_VALUE,
                f"{cls.__name__} requires {cls.LEN} bytes, got {len(raw)}",
            )
        try:
            cls.check_bytes(raw)
        except ValueError as exc:
            if isinstance(exc, DecodeError):
                raise
            raise DecodeError(ErrorKind.BAD_VALUE, str(exc)) from exc
        object.__setattr__(self, "_value", raw)

    @classmethod
    def check_bytes(cls, raw: bytes) -> None:
        """Hook for variant-specific value checks; raise ``ValueError`` to reject."""

    # --- Encoding ---

    def encode(self) -> str:
        """Canonical ``PREFIX:ENCODED`` text."""
        return f"{self.PREFIX}{SEPARATOR}{b64url_encode(self._value)}"

    @classmethod
    def decode(cls, text: str) -> Self:
        """Decode canonical text into a value of this family or variant.

        Raises:
            DecodeError: with kind ``MISSING_SEPARATOR``, ``UNKNOWN_TAG``,
                ``BAD_LENGTH``, ``BAD_ENCODING`` or ``BAD_VALUE``.
        """
        if not isinstance(text, str):
            raise DecodeError(ErrorKind.BAD_VALUE, "expected prefixed base64url text")
        tag, sep, rest = text.partition(SEPARATOR)
        if not sep:
            raise DecodeError(ErrorKind.MISSING_SEPARATOR, f"expected '{SEPARATOR}'")

        if cls.is_variant():
            if tag != cls.PREFIX:
                raise DecodeError(
                    ErrorKind.UNKNOWN_TAG,
                    f"unknown tag {tag!r}, expected {cls.PREFIX!r}",
                )
            variant: type[Self] = cls
        else:
            found = cls._variants.get(tag)
            if found is None:
                raise DecodeError(
                    ErrorKind.UNKNOWN_TAG,
                    f"unknown tag {tag!r}, expected one of {sorted(cls._variants)}",
                )
            variant = found  # type: ignore[assignment]
        return variant._from_encoded(rest)

    @classmethod
    def _from_encoded(cls, encoded: str) -> Self:
        if len(encoded) != cls.ENCODED_LEN:
            raise DecodeError(
                ErrorKind.BAD_LENGTH,
                f"invalid encoded length, expected {cls.ENCODED_LEN} found {len(encoded)}",
            )
        raw = b64url_decode(encoded)
        if len(raw) != cls.LEN:
            raise DecodeError(
                ErrorKind.BAD_LENGTH,
                f"invalid decoded length, expected {cls.LEN} found {len(raw)}",
            )
        return cls(raw)

    # --- Value semantics ---

    @property
    def value(self) -> bytes:
        """The raw fixed-length bytes."""
        return self._value

    def __bytes__(self) -> bytes:
        return self._value

    def __str__(self) -> str:
        return self.encode()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.encode()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrefixedBase64):
            return NotImplemented
        return type(self) is type(other) and self._value == other._value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PrefixedBase64):
            return NotImplemented
        return (self.PREFIX, self._value) < (other.PREFIX, other._value)

    def __hash__(self) -> int:
        return hash((self.PREFIX, self._value))

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self._value,))

    # --- pydantic integration ---

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
    def _validate(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        if isinstance(value, PrefixedBase64):
            raise custom_error(
                ErrorKind.UNKNOWN_TAG,
                f"{type(value).__name__} is not a {cls.__name__}",
            )
        try:
            return cls.decode(value)
        except DecodeError as exc:
            raise custom_error(exc.kind, exc.message) from exc
