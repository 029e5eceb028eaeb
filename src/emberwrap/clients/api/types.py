from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional


HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class ApiConnection:
    base_url: str
    timeout_seconds: float
    headers: Dict[str, str] = field(default_factory=dict)
    bearer_token: Optional[str] = None

    def request_headers(self) -> Dict[str, str]:
        headers = {"Accept": JSON_CONTENT_TYPE}
        headers.update(self.headers)
        if self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"
        return headers
