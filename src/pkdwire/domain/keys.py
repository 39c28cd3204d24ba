"""Public keys and Merkle roots: the tagged fixed-size wire values.

Both families use the prefixed-base64 codec:

- ``ed25519:<43 chars>`` for an Ed25519 public key (32 bytes).
- ``pkd-mr-v1:<43 chars>`` for a version 1 Merkle root (32 bytes).

Decoding through the family root (``PublicKey.decode``) accepts any
registered tag; decoding through a variant accepts only its own tag.
"""

from __future__ import annotations

from pkdwire.domain.codec import PrefixedBase64


class PublicKey(PrefixedBase64):
    """A directory or actor public key. Family root; see variants below."""

    __slots__ = ()


class Ed25519PublicKey(PublicKey):
    """An Ed25519 public key."""

    __slots__ = ()

    PREFIX = "ed25519"
    LEN = 32
    ENCODED_LEN = 43


class MerkleRoot(PrefixedBase64):
    """Digest summarizing a directory's committed state. Family root."""

    __slots__ = ()


class MerkleRootV1(MerkleRoot):
    """Version 1 Merkle root encoding."""

    __slots__ = ()

    PREFIX = "pkd-mr-v1"
    LEN = 32
    ENCODED_LEN = 43
