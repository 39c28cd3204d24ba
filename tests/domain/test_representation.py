"""Tests for payload schemas and their generated wire shapes."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pkdwire.domain.encrypted import Encrypted
from pkdwire.domain.payloads import (
    ActorId,
    AddAuxDataPayload,
    KeyPayload,
    RevocationToken,
    RevokeAuxDataPayload,
)
from pkdwire.domain.representation import (
    PayloadSchema,
    Representation,
    Sealed,
    WireModel,
    kebab_case,
    payload_schema_of,
    representation_of,
)
from pkdwire.domain.secret import SymmetricKey


class TestKebabCase:
    def test_converts_underscores(self) -> None:
        assert kebab_case("to_validated_root") == "to-validated-root"
        assert kebab_case("actor") == "actor"


class TestGeneratedShapes:
    def test_every_representation_generated(self) -> None:
        for rep in Representation:
            model = KeyPayload.shape(rep)
            assert payload_schema_of(model) is KeyPayload
            assert representation_of(model) is rep

    def test_shape_names(self) -> None:
        assert KeyPayload.cipher.__name__ == "KeyPayloadCipher"
        assert KeyPayload.keyed.__qualname__ == "KeyPayload.keyed"

    def test_keyed_omits_clear_fields(self) -> None:
        assert list(AddAuxDataPayload.keyed.model_fields) == ["actor", "aux_data"]
        assert list(AddAuxDataPayload.cipher.model_fields) == [
            "aux_type",
            "aux_id",
            "actor",
            "aux_data",
        ]

    def test_sealed_and_clear_fields(self) -> None:
        assert [f.name for f in AddAuxDataPayload.sealed_fields()] == ["actor", "aux_data"]
        assert [f.wire_name for f in AddAuxDataPayload.clear_fields()] == ["aux-type", "aux-id"]

    def test_cipher_shape_takes_ciphertext(self) -> None:
        value = KeyPayload.cipher(actor=Encrypted(b"a"), public_key=Encrypted(b"k"))
        assert value.model_dump(mode="json") == {"actor": "YQ", "public-key": "aw"}

    def test_keyed_shape_takes_keys(self) -> None:
        value = KeyPayload.keyed(actor=SymmetricKey(b"\x01"), public_key=SymmetricKey(b"\x02"))
        assert value.model_dump(mode="json") == {"actor": "AQ", "public-key": "Ag"}

    def test_plain_shape_keeps_value_types(self) -> None:
        value = AddAuxDataPayload.plain(
            aux_type="ssh-v2", aux_id=None, actor=ActorId("alice"), aux_data=b"x"
        )
        assert value.model_dump(mode="json", exclude_none=True) == {
            "aux-type": "ssh-v2",
            "actor": "alice",
            "aux-data": "eA",
        }

    def test_optional_fields_default_to_none(self) -> None:
        value = RevokeAuxDataPayload.keyed(actor=SymmetricKey(b"\x01"))
        assert value.aux_data is None

    def test_required_field_enforced(self) -> None:
        with pytest.raises(ValidationError):
            KeyPayload.cipher(actor=Encrypted(b"a"))

    def test_shapes_frozen_and_closed(self) -> None:
        value = KeyPayload.cipher(actor=Encrypted(b"a"), public_key=Encrypted(b"k"))
        with pytest.raises(ValidationError):
            value.actor = Encrypted(b"b")  # type: ignore[misc]
        with pytest.raises(ValidationError):
            KeyPayload.cipher(actor=Encrypted(b"a"), public_key=Encrypted(b"k"), extra="x")


class TestSchemaDeclaration:
    def test_optional_outside_sealed_rejected(self) -> None:
        with pytest.raises(TypeError, match="Sealed"):

            class _Broken(PayloadSchema):
                actor: Sealed[ActorId] | None

    def test_empty_schema_rejected(self) -> None:
        with pytest.raises(TypeError, match="no fields"):

            class _Empty(PayloadSchema):
                pass

    def test_schema_without_sealed_fields_rejected(self) -> None:
        with pytest.raises(TypeError, match="seals no fields"):

            class _Clear(PayloadSchema):
                topic: str

    def test_fields_list_drives_every_shape(self) -> None:
        class Note(PayloadSchema):
            topic: str
            body: Sealed[str]

        assert set(Note.plain.model_fields) == {"topic", "body"}
        assert set(Note.cipher.model_fields) == {"topic", "body"}
        assert set(Note.keyed.model_fields) == {"body"}


class TestRevocationToken:
    def test_carried_as_is(self) -> None:
        token = RevocationToken.model_validate_json('"opaque.token"')
        assert str(token) == "opaque.token"


class TestWireModelConfig:
    def test_frozen_closed_and_kebab_case(self) -> None:
        assert WireModel.model_config["frozen"] is True
        assert WireModel.model_config["extra"] == "forbid"
        assert WireModel.model_config["alias_generator"] is kebab_case

    def test_generated_shapes_inherit_config(self) -> None:
        assert KeyPayload.keyed.model_config["extra"] == "forbid"
