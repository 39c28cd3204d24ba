"""Representation polymorphism: one payload schema, three wire shapes.

A payload schema is declared once as a :class:`PayloadSchema` subclass.
Fields wrapped in :data:`Sealed` are encrypted in transit; other fields are
clear. Declaring the subclass generates three frozen pydantic models:

============  ===============  ==========================  ==================
shape         clear field      sealed field ``X``          sealed ``X | None``
============  ===============  ==========================  ==================
``plain``     unchanged        ``X``                       ``X | None``
``cipher``    unchanged        ``Encrypted[X]``            ``Encrypted[X] | None``
``keyed``     omitted          ``SymmetricKey``            ``SymmetricKey | None``
============  ===============  ==========================  ==================

INVARIANT: the three shapes come from one field list in one pass, so a field
added to or removed from a schema changes every shape together. The set of
representations is closed; there is no registration hook.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, create_model

from pkdwire.domain.encrypted import Encrypted
from pkdwire.domain.secret import SymmetricKey


def kebab_case(name: str) -> str:
    """Wire spelling of a Python field name: ``public_key`` -> ``public-key``."""
    return name.replace("_", "-")


class WireModel(BaseModel):
    """Base for every wire object: frozen, closed, kebab-case on the wire.

    Python code constructs models by field name; wire decoding accepts
    aliases only (see :func:`pkdwire.domain.actions.decode_action`).
    """

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "alias_generator": kebab_case,
        "validate_by_name": True,
        "validate_by_alias": True,
        "serialize_by_alias": True,
    }


class Representation(StrEnum):
    """How a payload's sealed fields are represented."""

    PLAIN = "plain"
    CIPHER = "cipher"
    KEYED = "keyed"


class _SealedMarker:
    __slots__ = ()

    def __repr__(self) -> str:
        return "SEALED"


SEALED = _SealedMarker()


class Sealed:
    """Annotation marking a schema field as encrypted in transit.

    ``Sealed[ActorId]`` is ``Annotated[ActorId, SEALED]``.
    """

    def __class_getitem__(cls, item: Any) -> Any:
        return Annotated[item, SEALED]


@dataclass(frozen=True)
class SchemaField:
    """One declared field of a payload schema."""

    name: str
    value_type: Any
    sealed: bool
    optional: bool

    @property
    def wire_name(self) -> str:
        return kebab_case(self.name)

    def annotation(self, rep: Representation) -> Any:
        """Field type in the shape for *rep*; None when the shape omits it."""
        if not self.sealed:
            if rep is Representation.KEYED:
                return None
            base = self.value_type
        elif rep is Representation.PLAIN:
            base = self.value_type
        elif rep is Representation.CIPHER:
            base = Encrypted[self.value_type]
        else:
            base = SymmetricKey
        return base | None if self.optional else base


def _split_optional(hint: Any) -> tuple[Any, bool]:
    if get_origin(hint) in (Union, types.UnionType):
        args = get_args(hint)
        if type(None) in args:
            rest = tuple(a for a in args if a is not type(None))
            inner = rest[0] if len(rest) == 1 else Union[rest]
            return inner, True
    return hint, False


def _parse_field(name: str, hint: Any) -> SchemaField:
    sealed = False
    if get_origin(hint) is Annotated:
        base, *extras = get_args(hint)
        if any(extra is SEALED for extra in extras):
            sealed = True
            # Annotated flattens nesting, so keep any other metadata on the type.
            others = [extra for extra in extras if extra is not SEALED]
            hint = Annotated[base, *others] if others else base
    value_type, optional = _split_optional(hint)
    if get_origin(value_type) is Annotated and SEALED in get_args(value_type)[1:]:
        msg = f"field {name!r}: write Sealed[X | None], not Sealed[X] | None"
        raise TypeError(msg)
    return SchemaField(name=name, value_type=value_type, sealed=sealed, optional=optional)


class PayloadSchema:
    """Declare a payload once; get its ``plain``, ``cipher`` and ``keyed`` shapes.

    Usage::

        class FireproofPayload(PayloadSchema):
            actor: Sealed[ActorId]

        FireproofPayload.cipher(actor=Encrypted.from_ciphertext(ct))
        FireproofPayload.keyed(actor=SymmetricKey.from_bytes(k))

    Each generated model carries ``__payload_schema__`` (this class) and
    ``__representation__``.
    """

    fields: ClassVar[tuple[SchemaField, ...]] = ()
    plain: ClassVar[type[WireModel]]
    cipher: ClassVar[type[WireModel]]
    keyed: ClassVar[type[WireModel]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        own = cls.__dict__.get("__annotations__", {})
        hints = get_type_hints(cls, include_extras=True)
        declared = tuple(
            _parse_field(name, hints[name])
            for name in own
            if get_origin(hints[name]) is not ClassVar
        )
        if not declared:
            msg = f"{cls.__name__} declares no fields"
            raise TypeError(msg)
        if not any(field.sealed for field in declared):
            msg = f"{cls.__name__} seals no fields; declare it as a WireModel instead"
            raise TypeError(msg)

        cls.fields = declared
        for rep in Representation:
            model = _build_shape(cls, rep)
            setattr(cls, rep.value, model)

    @classmethod
    def shape(cls, rep: Representation) -> type[WireModel]:
        """Generated model for *rep*."""
        return getattr(cls, Representation(rep).value)

    @classmethod
    def sealed_fields(cls) -> tuple[SchemaField, ...]:
        return tuple(f for f in cls.fields if f.sealed)

    @classmethod
    def clear_fields(cls) -> tuple[SchemaField, ...]:
        return tuple(f for f in cls.fields if not f.sealed)


def _build_shape(schema: type[PayloadSchema], rep: Representation) -> type[WireModel]:
    definitions: dict[str, Any] = {}
    for field in schema.fields:
        annotation = field.annotation(rep)
        if annotation is None:
            continue
        default = None if field.optional else ...
        definitions[field.name] = (annotation, default)

    model = create_model(
        f"{schema.__name__}{rep.value.title()}",
        __base__=WireModel,
        __module__=schema.__module__,
        __doc__=f"{rep.value.title()} shape of :class:`{schema.__qualname__}`.",
        **definitions,
    )
    model.__qualname__ = f"{schema.__qualname__}.{rep.value}"
    model.__payload_schema__ = schema  # type: ignore[attr-defined]
    model.__representation__ = rep  # type: ignore[attr-defined]
    return model


def payload_schema_of(model: type[BaseModel]) -> type[PayloadSchema] | None:
    """The schema a generated shape came from, if any."""
    return getattr(model, "__payload_schema__", None)


def representation_of(model: type[BaseModel]) -> Representation | None:
    return getattr(model, "__representation__", None)
