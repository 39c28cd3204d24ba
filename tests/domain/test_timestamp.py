"""Tests for Timestamp and the flattening Timestamped envelope."""

from __future__ import annotations

import time
from datetime import timedelta

import pytest
from pydantic import BaseModel

from pkdwire.domain import timestamp as timestamp_module
from pkdwire.domain.errors import ErrorKind, HostClockError, SchemaError
from pkdwire.domain.payloads import FireproofPayload, KeyPayload
from pkdwire.domain.representation import WireModel
from pkdwire.domain.timestamp import Timestamp, Timestamped


class TestTimestamp:
    def test_now_is_decimal_seconds(self) -> None:
        before = int(time.time())
        now = Timestamp.now()
        assert now.root.isdigit()
        assert before <= int(now.root) <= int(time.time())

    def test_clock_before_epoch_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(timestamp_module.time, "time", lambda: -5.0)
        with pytest.raises(HostClockError):
            Timestamp.now()

    def test_host_clock_error_escapes_exception_handlers(self) -> None:
        assert not issubclass(HostClockError, Exception)

    def test_epoch(self) -> None:
        assert str(Timestamp.epoch()) == "0"
        assert Timestamp.epoch().since_epoch() == timedelta(0)

    def test_from_seconds(self) -> None:
        assert str(Timestamp.from_seconds(1700000000)) == "1700000000"
        with pytest.raises(ValueError):
            Timestamp.from_seconds(-1)

    def test_since_epoch(self) -> None:
        assert Timestamp("90").since_epoch() == timedelta(seconds=90)

    @pytest.mark.parametrize("text", ["", "-1", "1.5", "abc", "１２"])
    def test_since_epoch_none_for_non_decimal(self, text: str) -> None:
        assert Timestamp(text).since_epoch() is None

    def test_decode_accepts_any_string(self) -> None:
        assert Timestamp.model_validate_json('"yesterday"').root == "yesterday"

    def test_json_is_bare_string(self) -> None:
        assert Timestamp("12").model_dump_json() == '"12"'


class TestTimestamped:
    def test_flattens_on_dump(self) -> None:
        msg = Timestamped[FireproofPayload.plain].new(
            Timestamp("1700000000"), FireproofPayload.plain(actor="alice")
        )
        assert msg.model_dump(mode="json") == {"time": "1700000000", "actor": "alice"}

    def test_time_comes_first(self) -> None:
        msg = Timestamped[KeyPayload.plain].epoch(
            KeyPayload.plain(
                actor="alice",
                public_key="ed25519:Tm2XBvb0mAb4ldVubCzvz0HMTczR8VGF44sv478VFLM",
            )
        )
        assert list(msg.model_dump(mode="json")) == ["time", "actor", "public-key"]

    def test_unflattens_on_validate(self) -> None:
        msg = Timestamped[FireproofPayload.plain].model_validate(
            {"time": "5", "actor": "alice"}
        )
        assert msg.time == Timestamp("5")
        assert msg.inner.actor == "alice"

    def test_missing_time(self) -> None:
        from pydantic import ValidationError

        with pytest.raises(ValidationError) as exc_info:
            Timestamped[FireproofPayload.plain].model_validate({"actor": "alice"})
        assert exc_info.value.errors()[0]["loc"] == ("time",)

    def test_now(self) -> None:
        msg = Timestamped[FireproofPayload.plain].now(FireproofPayload.plain(actor="a"))
        assert msg.time.since_epoch() is not None

    def test_time_field_collision(self) -> None:
        class Clashing(WireModel):
            time: str

        with pytest.raises(SchemaError) as exc_info:
            Timestamped[Clashing]
        assert exc_info.value.kind is ErrorKind.FLATTEN_NAME_COLLISION
        assert exc_info.value.field == "time"

    def test_inner_field_collision(self) -> None:
        class Nested(BaseModel):
            inner: int

        with pytest.raises(SchemaError) as exc_info:
            Timestamped[Nested]
        assert exc_info.value.kind is ErrorKind.FLATTEN_NAME_COLLISION
