from abc import ABC, abstractmethod
from typing import Any, Mapping

from emberwrap.core.contracts import ShapingContext


class MetaProvider(ABC):
    """Contributes top-level ``meta`` entries to enveloped responses."""

    @abstractmethod
    def get_meta(self, context: ShapingContext) -> Mapping[str, Any]:
        pass


class StaticMetaProvider(MetaProvider):
    """Always contributes the same entries (API version, deprecation notices)."""

    def __init__(self, meta: Mapping[str, Any]):
        self.meta = dict(meta)

    def get_meta(self, context: ShapingContext) -> Mapping[str, Any]:
        return dict(self.meta)
