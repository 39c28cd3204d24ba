"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pkdwire.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CodecConfig(BaseModel):
    """[codec] section."""

    model_config = {"frozen": True}

    max_message_bytes: int = Field(default=65536, gt=0)


class PkdConfig(BaseModel):
    """Root of pkdwire.toml."""

    model_config = {"frozen": True}

    codec: CodecConfig = Field(default_factory=CodecConfig)
