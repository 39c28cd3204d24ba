"""Payload schemas for the PKD protocol messages.

Each schema is declared once and generates its ``plain``, ``cipher`` and
``keyed`` shapes (see :mod:`pkdwire.domain.representation`). Field order
here is wire order.
"""

from __future__ import annotations

from typing import NewType

from pydantic import RootModel

from pkdwire.domain.codec import B64UrlBytes
from pkdwire.domain.keys import MerkleRoot, PublicKey
from pkdwire.domain.representation import PayloadSchema, Sealed, WireModel

ActorId = NewType("ActorId", str)
"""Canonical id of a fediverse actor."""


class RevocationToken(RootModel[str]):
    """Compact token a user can issue at any time to revoke an existing key.

    Self-contained: carried as-is, never encrypted.
    """

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return self.root


# --- Encrypted payloads ---


class KeyPayload(PayloadSchema):
    """AddKey / RevokeKey attributes."""

    actor: Sealed[ActorId]
    public_key: Sealed[PublicKey]


class MoveIdentityPayload(PayloadSchema):
    """MoveIdentity attributes: who is moving, and to which actor id."""

    old_actor: Sealed[ActorId]
    new_actor: Sealed[ActorId]


class BurnDownPayload(PayloadSchema):
    """BurnDown attributes.

    ``operator`` is the instance operator issuing the burn-down on the
    actor's behalf.
    """

    actor: Sealed[ActorId]
    operator: Sealed[ActorId]


class FireproofPayload(PayloadSchema):
    """Fireproof / UndoFireproof attributes."""

    actor: Sealed[ActorId]


class AddAuxDataPayload(PayloadSchema):
    """AddAuxData attributes.

    ``aux_type`` names the auxiliary-data extension; ``aux_id``, when given,
    lets the server check the id against the type and data. Both stay in
    the clear.
    """

    aux_type: str
    aux_id: str | None
    actor: Sealed[ActorId]
    aux_data: Sealed[B64UrlBytes]


class RevokeAuxDataPayload(PayloadSchema):
    """RevokeAuxData attributes; the data itself is optional."""

    aux_type: str
    aux_id: str | None
    actor: Sealed[ActorId]
    aux_data: Sealed[B64UrlBytes | None]


# --- Clear payloads ---


class CheckpointPayload(WireModel):
    """Checkpoint between two directories. Nothing here is encrypted."""

    from_directory: str
    from_root: MerkleRoot
    from_public_key: PublicKey
    to_directory: str
    to_validated_root: MerkleRoot
