"""Protocol actions and the action wire codec.

An action is a JSON object whose ``action`` member names the variant::

    {"action": "add-key",
     "message": {"time": "1700000000", "actor": "...", "public-key": "..."},
     "symmetric-keys": {"actor": "...", "public-key": "..."}}

Sealed actions carry the ``cipher`` shape of a payload inside a
:class:`Timestamped` envelope and the ``keyed`` shape of the *same* payload
schema as ``symmetric-keys``. The pairing is checked when a variant class is
defined; per-value presence of optional sealed fields is checked on every
decode.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Annotated, Any, ClassVar, Literal, Self

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, model_validator
from pydantic_core import PydanticCustomError

from pkdwire.domain.errors import DecodeError, ErrorKind
from pkdwire.domain.payloads import (
    AddAuxDataPayload,
    BurnDownPayload,
    CheckpointPayload,
    FireproofPayload,
    KeyPayload,
    MoveIdentityPayload,
    RevocationToken,
    RevokeAuxDataPayload,
)
from pkdwire.domain.representation import (
    PayloadSchema,
    Representation,
    WireModel,
    payload_schema_of,
    representation_of,
)
from pkdwire.domain.timestamp import INNER_FIELD, Timestamp, Timestamped

logger = logging.getLogger(__name__)

ACTION_FIELD = "action"
MESSAGE_FIELD = "message"


class ActionModel(WireModel):
    """Base for every action variant."""

    @classmethod
    def tag(cls) -> str:
        """Wire value of the ``action`` member for this variant."""
        return cls.model_fields[ACTION_FIELD].default

    @classmethod
    def envelope(cls) -> type[Timestamped[Any]]:
        """The parametrized ``Timestamped`` type of the ``message`` field."""
        return cls.model_fields[MESSAGE_FIELD].annotation  # type: ignore[return-value]


class SealedAction(ActionModel):
    """Action carrying a ciphertext payload plus its per-field keys.

    Subclasses declare ``message: Timestamped[S.cipher]`` and
    ``symmetric_keys: S.keyed`` for one payload schema ``S``; any other
    pairing raises ``TypeError`` at class definition.
    """

    payload_schema: ClassVar[type[PayloadSchema]]

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        message = cls.model_fields[MESSAGE_FIELD].annotation
        keys = cls.model_fields["symmetric_keys"].annotation
        meta = getattr(message, "__pydantic_generic_metadata__", None) or {}
        args = meta.get("args") or ()
        if meta.get("origin") is not Timestamped or len(args) != 1:
            msg = f"{cls.__name__}.message must be Timestamped[<schema>.cipher]"
            raise TypeError(msg)
        cipher = args[0]
        if representation_of(cipher) is not Representation.CIPHER:
            msg = f"{cls.__name__}.message must carry a cipher shape"
            raise TypeError(msg)
        if representation_of(keys) is not Representation.KEYED:
            msg = f"{cls.__name__}.symmetric_keys must be a keyed shape"
            raise TypeError(msg)
        schema = payload_schema_of(cipher)
        if schema is None or payload_schema_of(keys) is not schema:
            msg = (
                f"{cls.__name__}: symmetric_keys must be {schema.__name__ if schema else '?'}"
                ".keyed to match the message"
            )
            raise TypeError(msg)
        cls.payload_schema = schema

    @model_validator(mode="after")
    def _keys_match_ciphertext(self) -> Self:
        cipher = self.message.inner  # type: ignore[attr-defined]
        keys = self.symmetric_keys  # type: ignore[attr-defined]
        for field in self.payload_schema.sealed_fields():
            if not field.optional:
                continue
            has_cipher = getattr(cipher, field.name) is not None
            has_key = getattr(keys, field.name) is not None
            if has_cipher == has_key:
                continue
            path = f"symmetric-keys.{field.wire_name}"
            if has_cipher:
                raise PydanticCustomError(
                    ErrorKind.MISSING_FIELD.value,
                    "{reason}",
                    {"reason": f"no key for encrypted field {field.wire_name!r}", "field": path},
                )
            raise PydanticCustomError(
                ErrorKind.UNEXPECTED_FIELD.value,
                "{reason}",
                {"reason": f"key given for absent field {field.wire_name!r}", "field": path},
            )
        return self

    @classmethod
    def build(
        cls,
        cipher: BaseModel,
        keys: BaseModel,
        *,
        time: Timestamp | None = None,
        **extra: Any,
    ) -> Self:
        """Wrap *cipher* in a timestamped envelope (now, unless *time*) and pair it with *keys*."""
        message = cls.envelope()(time=time or Timestamp.now(), inner=cipher)
        return cls(message=message, symmetric_keys=keys, **extra)


# --- Variants ---


class AddKey(SealedAction):
    """Register a new public key for an actor."""

    action: Literal["add-key"] = "add-key"
    message: Timestamped[KeyPayload.cipher]
    symmetric_keys: KeyPayload.keyed


class RevokeKey(SealedAction):
    """Revoke one of an actor's public keys."""

    action: Literal["revoke-key"] = "revoke-key"
    message: Timestamped[KeyPayload.cipher]
    symmetric_keys: KeyPayload.keyed


class RevokeKeyThirdParty(ActionModel):
    """Revoke a key with a self-contained revocation token."""

    action: Literal["revoke-key-third-party"] = "revoke-key-third-party"
    revocation_token: RevocationToken


class MoveIdentity(SealedAction):
    action: Literal["move-identity"] = "move-identity"
    message: Timestamped[MoveIdentityPayload.cipher]
    symmetric_keys: MoveIdentityPayload.keyed


class BurnDown(SealedAction):
    """Remove all of an actor's keys; ``otp`` is set when the actor has a second factor."""

    action: Literal["burn-down"] = "burn-down"
    message: Timestamped[BurnDownPayload.cipher]
    otp: str | None = None
    symmetric_keys: BurnDownPayload.keyed


class Fireproof(SealedAction):
    action: Literal["fireproof"] = "fireproof"
    message: Timestamped[FireproofPayload.cipher]
    symmetric_keys: FireproofPayload.keyed


class UndoFireproof(SealedAction):
    action: Literal["undo-fireproof"] = "undo-fireproof"
    message: Timestamped[FireproofPayload.cipher]
    symmetric_keys: FireproofPayload.keyed


class AddAuxData(SealedAction):
    action: Literal["add-aux-data"] = "add-aux-data"
    message: Timestamped[AddAuxDataPayload.cipher]
    symmetric_keys: AddAuxDataPayload.keyed


class RevokeAuxData(SealedAction):
    action: Literal["revoke-aux-data"] = "revoke-aux-data"
    message: Timestamped[RevokeAuxDataPayload.cipher]
    symmetric_keys: RevokeAuxDataPayload.keyed


class Checkpoint(ActionModel):
    """Cross-directory checkpoint; sent in the clear."""

    action: Literal["checkpoint"] = "checkpoint"
    message: Timestamped[CheckpointPayload]

    @classmethod
    def build(cls, payload: CheckpointPayload, *, time: Timestamp | None = None) -> Self:
        return cls(message=cls.envelope()(time=time or Timestamp.now(), inner=payload))


ACTION_VARIANTS: tuple[type[ActionModel], ...] = (
    AddKey,
    RevokeKey,
    RevokeKeyThirdParty,
    MoveIdentity,
    BurnDown,
    Fireproof,
    UndoFireproof,
    AddAuxData,
    RevokeAuxData,
    Checkpoint,
)

ACTION_TAGS: tuple[str, ...] = tuple(variant.tag() for variant in ACTION_VARIANTS)

Action = Annotated[
    AddKey
    | RevokeKey
    | RevokeKeyThirdParty
    | MoveIdentity
    | BurnDown
    | Fireproof
    | UndoFireproof
    | AddAuxData
    | RevokeAuxData
    | Checkpoint,
    Field(discriminator=ACTION_FIELD),
]

ACTION_ADAPTER: TypeAdapter[Action] = TypeAdapter(Action)


def action_tag(action: ActionModel) -> str:
    """Wire tag of *action*."""
    return type(action).tag()


# --- Codec ---


def encode_action(action: ActionModel) -> str:
    """Compact JSON text of *action*; absent optional fields are omitted."""
    return ACTION_ADAPTER.dump_json(action, by_alias=True, exclude_none=True).decode("utf-8")


def action_to_wire(action: ActionModel) -> dict[str, Any]:
    """JSON-compatible dict of *action*."""
    return ACTION_ADAPTER.dump_python(action, mode="json", by_alias=True, exclude_none=True)


def decode_action(text: str | bytes) -> Action:
    """Decode JSON text into the action variant named by its ``action`` member.

    Raises:
        DecodeError: for malformed JSON, an unknown or missing tag, a missing
            or unexpected field, or any field value that fails to decode.
    """
    try:
        return ACTION_ADAPTER.validate_json(text, by_alias=True, by_name=False)
    except ValidationError as exc:
        raise _rejected(exc) from exc


def action_from_wire(data: Any) -> Action:
    """Like :func:`decode_action` for an already-parsed JSON value."""
    try:
        return ACTION_ADAPTER.validate_python(data, by_alias=True, by_name=False)
    except ValidationError as exc:
        raise _rejected(exc) from exc


_PYDANTIC_KINDS: dict[str, ErrorKind] = {
    "missing": ErrorKind.MISSING_FIELD,
    "extra_forbidden": ErrorKind.UNEXPECTED_FIELD,
    "union_tag_invalid": ErrorKind.UNKNOWN_ACTION_TAG,
    "union_tag_not_found": ErrorKind.MISSING_FIELD,
    "json_invalid": ErrorKind.BAD_ENCODING,
}


def _rejected(exc: ValidationError) -> DecodeError:
    error = translate_validation_error(exc)
    logger.debug("Rejected action: %s", error)
    return error


def translate_validation_error(exc: ValidationError) -> DecodeError:
    """Reduce a pydantic failure to one :class:`DecodeError` (its first error)."""
    first = exc.errors(include_url=False)[0]
    error_type = first["type"]
    try:
        kind = ErrorKind(error_type)
    except ValueError:
        kind = _PYDANTIC_KINDS.get(error_type, ErrorKind.BAD_VALUE)

    if error_type in ("union_tag_invalid", "union_tag_not_found"):
        return DecodeError(kind, first["msg"], field=ACTION_FIELD)

    ctx = first.get("ctx") or {}
    path = wire_path(first["loc"])
    if ctx.get("field"):
        path = ctx["field"]
    return DecodeError(kind, first["msg"], field=path or None)


def wire_path(loc: Sequence[int | str]) -> str:
    """Dot-joined wire path for a pydantic error location.

    The leading variant tag and the envelope's ``inner`` hop are dropped:
    ``("add-key", "message", "inner", "actor")`` -> ``"message.actor"``.
    """
    parts = list(loc)
    if parts and parts[0] in ACTION_TAGS:
        parts = parts[1:]
    out: list[str] = []
    for index, part in enumerate(parts):
        if part == INNER_FIELD and index > 0 and parts[index - 1] == MESSAGE_FIELD:
            continue
        out.append(str(part))
    return ".".join(out)
