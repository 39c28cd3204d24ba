"""Shared pytest fixtures and test helpers for pkdwire tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from pkdwire.domain.actions import (
    ActionModel,
    AddAuxData,
    AddKey,
    BurnDown,
    Checkpoint,
    Fireproof,
    MoveIdentity,
    RevokeAuxData,
    RevokeKey,
    RevokeKeyThirdParty,
    UndoFireproof,
)
from pkdwire.domain.encrypted import Encrypted
from pkdwire.domain.keys import Ed25519PublicKey, MerkleRootV1
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
from pkdwire.domain.secret import SymmetricKey
from pkdwire.domain.timestamp import Timestamp

ED25519_BYTES = bytes.fromhex("4e6d9706f6f49806f895d56e6c2cefcf41cc4dccd1f15185e38b2fe3bf1514b3")
ED25519_TEXT = "ed25519:Tm2XBvb0mAb4ldVubCzvz0HMTczR8VGF44sv478VFLM"
MERKLE_BYTES = bytes(
    [
        237, 60, 10, 1, 185, 34, 40, 32, 144, 184, 42, 67, 5, 93, 134, 110,
        73, 36, 32, 55, 204, 131, 96, 38, 27, 180, 204, 30, 165, 193, 12, 149,
    ]
)  # fmt: skip
MERKLE_TEXT = "pkd-mr-v1:7TwKAbkiKCCQuCpDBV2GbkkkIDfMg2AmG7TMHqXBDJU"
FIXED_TIME = Timestamp("1700000000")


def enc(data: bytes) -> Encrypted:
    return Encrypted.from_ciphertext(data)


def key(fill: int) -> SymmetricKey:
    return SymmetricKey.from_bytes(bytes([fill]) * 32)


def _build(tag: str) -> ActionModel:
    if tag in ("add-key", "revoke-key"):
        variant = AddKey if tag == "add-key" else RevokeKey
        return variant.build(
            KeyPayload.cipher(actor=enc(b"actor"), public_key=enc(b"pk")),
            KeyPayload.keyed(actor=key(1), public_key=key(2)),
            time=FIXED_TIME,
        )
    if tag == "revoke-key-third-party":
        return RevokeKeyThirdParty(revocation_token=RevocationToken("tok-123"))
    if tag == "move-identity":
        return MoveIdentity.build(
            MoveIdentityPayload.cipher(old_actor=enc(b"old"), new_actor=enc(b"new")),
            MoveIdentityPayload.keyed(old_actor=key(3), new_actor=key(4)),
            time=FIXED_TIME,
        )
    if tag == "burn-down":
        return BurnDown.build(
            BurnDownPayload.cipher(actor=enc(b"actor"), operator=enc(b"op")),
            BurnDownPayload.keyed(actor=key(5), operator=key(6)),
            time=FIXED_TIME,
            otp="123456",
        )
    if tag in ("fireproof", "undo-fireproof"):
        variant = Fireproof if tag == "fireproof" else UndoFireproof
        return variant.build(
            FireproofPayload.cipher(actor=enc(b"actor")),
            FireproofPayload.keyed(actor=key(7)),
            time=FIXED_TIME,
        )
    if tag == "add-aux-data":
        return AddAuxData.build(
            AddAuxDataPayload.cipher(
                aux_type="ssh-v2", aux_id=None, actor=enc(b"actor"), aux_data=enc(b"data")
            ),
            AddAuxDataPayload.keyed(actor=key(8), aux_data=key(9)),
            time=FIXED_TIME,
        )
    if tag == "revoke-aux-data":
        return RevokeAuxData.build(
            RevokeAuxDataPayload.cipher(
                aux_type="ssh-v2", aux_id="aux-1", actor=enc(b"actor"), aux_data=None
            ),
            RevokeAuxDataPayload.keyed(actor=key(10), aux_data=None),
            time=FIXED_TIME,
        )
    if tag == "checkpoint":
        return Checkpoint.build(
            CheckpointPayload(
                from_directory="https://pkd-a.example",
                from_root=MerkleRootV1(MERKLE_BYTES),
                from_public_key=Ed25519PublicKey(ED25519_BYTES),
                to_directory="https://pkd-b.example",
                to_validated_root=MerkleRootV1(MERKLE_BYTES),
            ),
            time=FIXED_TIME,
        )
    msg = f"no sample for {tag!r}"
    raise KeyError(msg)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_action() -> Callable[[str], ActionModel]:
    """Factory for a sample action of each variant, keyed by wire tag."""
    return _build


@pytest.fixture
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty directory with no config or env overrides in effect."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PKDWIRE_CONFIG", raising=False)
    monkeypatch.delenv("PKDWIRE_CODEC__MAX_MESSAGE_BYTES", raising=False)
