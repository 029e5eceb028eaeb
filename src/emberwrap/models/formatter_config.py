from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, NonNegativeInt, model_validator

from emberwrap.core.exceptions import ConfigurationError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class FormatterConfig(BaseModel):
    """Serializer conventions applied around the envelope transform."""

    model_config = ConfigDict(extra="forbid")

    camel_case: bool = True          # snake_case attributes <-> camelCase JSON keys
    ignore_nulls: bool = True        # omit None-valued fields on write
    trim_strings: bool = True        # strip surrounding whitespace on write and read
    indent: Optional[NonNegativeInt] = None
    meta_key: str = "meta"
    log_level: LogLevel = "INFO"

    @model_validator(mode="after")
    def _validate_meta_key(self) -> "FormatterConfig":
        if not self.meta_key.strip():
            raise ValueError("meta_key must not be empty")
        return self

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FormatterConfig":
        return cls.model_validate(data or {})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FormatterConfig":
        """Load from a .json or .yaml/.yml file."""
        config_file = Path(path)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        with open(config_file, "r") as f:
            if config_file.suffix == ".json":
                data = json.load(f)
            elif config_file.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported config format: {config_file.suffix}. Use .json or .yaml"
                )

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
        return cls.from_dict(data)
