"""
Configuration model and YAML I/O for lab-msg-decode.

``DecoderConfig`` holds the handful of knobs the decoders read at
construction time. It is immutable once built, so one config can be
shared by any number of decoder instances.

Key functions:
- load_config(path) -> DecoderConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from lab_msg_decode.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING_CHARACTERS = "^~\\&"


class DecoderConfig(BaseModel):
    """Settings shared by the format decoders and the facade."""

    model_config = ConfigDict(frozen=True)

    default_encoding_characters: str = Field(
        DEFAULT_ENCODING_CHARACTERS,
        description=(
            "Component, repetition, escape and subcomponent separators used "
            "for format B until a header segment declares its own"
        ),
    )
    error_snippet_length: int = Field(
        100,
        ge=0,
        description="Leading characters of the input attached to a whole-message error",
    )
    catalogue_dir: str | None = Field(
        None,
        description="Directory of catalogue YAML files; defaults to the bundled catalogues",
    )

    @field_validator("default_encoding_characters")
    @classmethod
    def _check_encoding_characters(cls, value: str) -> str:
        if len(value) != 4:
            raise ValueError(
                f"Encoding characters must be exactly 4 characters, got {value!r}"
            )
        if len(set(value)) != 4 or "|" in value:
            raise ValueError(
                "Encoding characters must be distinct and must not contain '|', "
                f"got {value!r}"
            )
        return value


def load_config(path: str | Path) -> DecoderConfig:
    """Load and validate a decoder config YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty or not a mapping.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"Config file must contain a mapping at the top level: {path}"
        )
    logger.info("Loaded config from %s", path)
    return DecoderConfig.model_validate(raw)


def save_config(config: DecoderConfig, path: str | Path) -> None:
    """Serialize a DecoderConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# lab-msg-decode configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
