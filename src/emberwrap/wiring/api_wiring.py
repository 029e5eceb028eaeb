from __future__ import annotations

from emberwrap.clients.api.types import ApiConnection
from emberwrap.models.client_config import ApiClientConfig


def build_api_connection(cfg: ApiClientConfig) -> ApiConnection:
    # The only layer allowed to read the pydantic client config.
    return ApiConnection(
        base_url=cfg.base_url,
        timeout_seconds=float(cfg.timeout_seconds),
        headers=dict(cfg.headers),
        bearer_token=cfg.bearer_token,
    )
