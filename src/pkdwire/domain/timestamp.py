"""Canonical timestamps and the flattening ``Timestamped`` envelope.

A timestamp is base-10 ASCII seconds since the Unix epoch: no sign, no
fraction. ``Timestamp.now()`` is the only clock-dependent constructor.

``Timestamped[T]`` places ``time`` at the same nesting level as ``T``'s own
fields on the wire::

    {"time": "1700000000", "actor": "...", "public-key": "..."}

INVARIANT: ``T`` must not declare a field named ``time`` (or ``inner``, the
Python-side attribute holding ``T``). Parametrizing with such a model raises
``SchemaError`` with kind ``FLATTEN_NAME_COLLISION``.
"""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Generic, Self, TypeVar

from pydantic import (
    BaseModel,
    RootModel,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)

from pkdwire.domain.errors import ErrorKind, HostClockError, SchemaError

logger = logging.getLogger(__name__)

TIME_FIELD = "time"
INNER_FIELD = "inner"
FLATTEN_RESERVED = frozenset({TIME_FIELD, INNER_FIELD})


class Timestamp(RootModel[str]):
    """Seconds since the Unix epoch, as decimal text.

    Decoding accepts any string; only :meth:`since_epoch` interprets it.
    """

    model_config = {"frozen": True}

    @classmethod
    def now(cls) -> Self:
        """Current system time.

        Raises:
            HostClockError: the host clock reads before the epoch.
        """
        now = time.time()
        if now < 0:
            logger.critical("System clock reads before the Unix epoch: %s", now)
            msg = f"system time {now} is before the Unix epoch"
            raise HostClockError(msg)
        return cls(str(int(now)))

    @classmethod
    def epoch(cls) -> Self:
        """The timestamp of the Unix epoch itself."""
        return cls("0")

    @classmethod
    def from_seconds(cls, seconds: int) -> Self:
        if seconds < 0:
            msg = f"timestamp cannot be negative: {seconds}"
            raise ValueError(msg)
        return cls(str(int(seconds)))

    def since_epoch(self) -> timedelta | None:
        """Duration since the epoch, or None if the text is not a decimal integer."""
        text = self.root
        if not text or not text.isascii() or not text.isdigit():
            return None
        return timedelta(seconds=int(text))

    def __str__(self) -> str:
        return self.root


T = TypeVar("T", bound=BaseModel)


def check_flatten_disjoint(model: type[BaseModel]) -> None:
    """Reject models whose fields would collide with the envelope's own."""
    names: set[str] = set()
    for name, info in model.model_fields.items():
        names.add(name)
        if info.alias:
            names.add(info.alias)
    clash = sorted(names & FLATTEN_RESERVED)
    if clash:
        raise SchemaError(
            ErrorKind.FLATTEN_NAME_COLLISION,
            f"{model.__name__} cannot be timestamped: field {clash[0]!r} collides "
            f"with the envelope",
            field=clash[0],
        )


class Timestamped(BaseModel, Generic[T]):
    """Adds a :class:`Timestamp` to a payload model, flattened on the wire.

    Usage::

        msg = Timestamped[FireproofPayload.cipher].now(FireproofPayload.cipher(actor=enc_actor))
        msg.time, msg.inner.actor
    """

    model_config = {"frozen": True, "extra": "forbid"}

    time: Timestamp
    inner: T

    def __class_getitem__(cls, params: Any) -> Any:
        for param in params if isinstance(params, tuple) else (params,):
            if isinstance(param, type) and issubclass(param, BaseModel):
                check_flatten_disjoint(param)
        return super().__class_getitem__(params)

    @classmethod
    def new(cls, time: Timestamp, inner: T) -> Self:
        return cls(time=time, inner=inner)

    @classmethod
    def now(cls, inner: T) -> Self:
        return cls(time=Timestamp.now(), inner=inner)

    @classmethod
    def epoch(cls, inner: T) -> Self:
        return cls(time=Timestamp.epoch(), inner=inner)

    @model_validator(mode="before")
    @classmethod
    def _unflatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        inner = data.get(INNER_FIELD)
        if isinstance(inner, BaseModel):
            # Python-side construction: Timestamped(time=..., inner=model)
            check_flatten_disjoint(type(inner))
            return data
        fields = dict(data)
        out: dict[str, Any] = {}
        if TIME_FIELD in fields:
            out[TIME_FIELD] = fields.pop(TIME_FIELD)
        out[INNER_FIELD] = fields
        return out

    @model_serializer(mode="wrap")
    def _flatten(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        flat: dict[str, Any] = {TIME_FIELD: data[TIME_FIELD]}
        flat.update(data[INNER_FIELD])
        return flat
