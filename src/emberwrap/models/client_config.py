from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, PositiveFloat, model_validator


class ApiClientConfig(BaseModel):
    system_type: Literal["api"] = "api"

    base_url: str
    timeout_seconds: PositiveFloat = 30.0
    headers: Dict[str, str] = Field(default_factory=dict)

    bearer_token: Optional[str] = None

    @model_validator(mode="after")
    def _validate_base_url(self) -> "ApiClientConfig":
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return self
