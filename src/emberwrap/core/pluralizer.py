from __future__ import annotations

from typing import Protocol


class Pluralizer(Protocol):
    def pluralize(self, word: str) -> str:
        ...
