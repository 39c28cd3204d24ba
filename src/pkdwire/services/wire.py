"""WireService: decode and inspect PKD wire values.

Never reports secret material: symmetric keys are described by length only
and wiped as soon as they are checked.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pkdwire.domain.actions import SealedAction, action_tag, action_to_wire, decode_action
from pkdwire.domain.encrypted import Encrypted
from pkdwire.domain.errors import DecodeError, ErrorKind
from pkdwire.domain.keys import MerkleRoot, PublicKey
from pkdwire.domain.secret import SymmetricKey
from pkdwire.domain.timestamp import Timestamp
from pkdwire.services.result import ServiceResult

if TYPE_CHECKING:
    from pkdwire.config.settings import PkdSettings

logger = logging.getLogger(__name__)

INPUT_TOO_LARGE = "input_too_large"
UNKNOWN_KIND = "unknown_kind"


def _check_tagged(family: type[PublicKey] | type[MerkleRoot], text: str) -> dict[str, Any]:
    value = family.decode(text)
    return {"tag": value.PREFIX, "canonical": value.encode(), "length": value.LEN}


def _check_symmetric_key(text: str) -> dict[str, Any]:
    with SymmetricKey.decode(text) as key:
        return {"length": len(key)}


def _check_encrypted(text: str) -> dict[str, Any]:
    value = Encrypted.decode(text)
    return {"canonical": value.encode(), "length": len(value)}


def _check_timestamp(text: str) -> dict[str, Any]:
    since = Timestamp(text).since_epoch()
    return {
        "canonical": text,
        "seconds": int(since.total_seconds()) if since is not None else None,
    }


VALUE_CHECKERS: dict[str, Callable[[str], dict[str, Any]]] = {
    "public-key": lambda text: _check_tagged(PublicKey, text),
    "merkle-root": lambda text: _check_tagged(MerkleRoot, text),
    "symmetric-key": _check_symmetric_key,
    "encrypted": _check_encrypted,
    "timestamp": _check_timestamp,
}


class WireService:
    """Wire-level operations bounded by the ``[codec]`` settings."""

    def __init__(self, settings: PkdSettings) -> None:
        self._settings = settings

    def decode(self, text: str | bytes) -> ServiceResult:
        """Decode one action and describe its structure."""
        op = "decode"
        try:
            raw = text.encode("utf-8") if isinstance(text, str) else text
        except UnicodeEncodeError as exc:
            return ServiceResult.failure(
                op, ErrorKind.BAD_ENCODING.value, f"input is not valid UTF-8 text: {exc.reason}"
            )
        limit = self._settings.codec.max_message_bytes
        if len(raw) > limit:
            return ServiceResult.failure(
                op,
                INPUT_TOO_LARGE,
                f"input is {len(raw)} bytes, limit is {limit}",
                size=len(raw),
                limit=limit,
            )

        try:
            action = decode_action(raw)
        except DecodeError as exc:
            return ServiceResult.failure(op, exc.kind.value, exc.message, field=exc.field)

        wire = action_to_wire(action)
        message = wire.get("message")
        data: dict[str, Any] = {
            "action": action_tag(action),
            "time": message.get("time") if isinstance(message, dict) else None,
            "fields": list(wire),
            "message_fields": list(message) if isinstance(message, dict) else [],
            "sealed": [],
        }
        if isinstance(action, SealedAction):
            data["sealed"] = [f.wire_name for f in action.payload_schema.sealed_fields()]
        logger.debug("Decoded %s action", data["action"])
        return ServiceResult(ok=True, op=op, data=data)

    def check_value(self, kind: str, text: str) -> ServiceResult:
        """Validate a single wire value of *kind* and report its canonical form."""
        op = "check_value"
        checker = VALUE_CHECKERS.get(kind)
        if checker is None:
            return ServiceResult.failure(
                op, UNKNOWN_KIND, f"unknown value kind {kind!r}", known=sorted(VALUE_CHECKERS)
            )
        try:
            data = checker(text)
        except DecodeError as exc:
            return ServiceResult.failure(op, exc.kind.value, exc.message, kind=kind)

        warnings: list[str] = []
        if kind == "timestamp" and data["seconds"] is None:
            warnings.append("timestamp is not decimal seconds since the epoch")
        return ServiceResult(ok=True, op=op, data={"kind": kind, **data}, warnings=warnings)

    def timestamp(self) -> ServiceResult:
        """The current time as a wire timestamp."""
        return ServiceResult(ok=True, op="timestamp", data={"time": str(Timestamp.now())})
