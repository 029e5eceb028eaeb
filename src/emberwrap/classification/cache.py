from __future__ import annotations

import threading
from typing import Any, Callable, Dict, ForwardRef, Generic, TypeVar, get_origin

from emberwrap.classification.shapes import should_envelope, type_name
from emberwrap.core.contracts import EnvelopeRead
from emberwrap.core.exceptions import InvalidTypeError, UnsupportedShapeError
from emberwrap.core.logger import get_logger

logger = get_logger(__name__)

V = TypeVar("V")

_MISSING = object()


class TypeKeyedCache(Generic[V]):
    """Append-only memo table keyed by type descriptor.

    Reads of published entries take no lock. A miss computes outside the lock
    and publishes with ``setdefault`` under it, so racing first writers all
    return the single stored value. Entries are never evicted.
    """

    def __init__(self, compute: Callable[[Any], V]):
        self._compute = compute
        self._entries: Dict[Any, V] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, tp: Any) -> V:
        if tp is None:
            raise InvalidTypeError()
        try:
            cached = self._entries.get(tp, _MISSING)
        except TypeError:
            # unhashable descriptor (e.g. Annotated with dict metadata)
            logger.debug(f"Descriptor {tp!r} is unhashable; computing without cache")
            return self._compute(tp)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]

        value = self._compute(tp)
        with self._lock:
            stored = self._entries.setdefault(tp, value)
        if stored is value:
            self._on_published(tp, value)
        return stored

    def _on_published(self, tp: Any, value: V) -> None:
        pass

    def __contains__(self, tp: Any) -> bool:
        try:
            return tp in self._entries
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._entries)


class ClassificationCache(TypeKeyedCache[bool]):
    """Memoized ``should_envelope`` verdicts."""

    def __init__(self, classify: Callable[[Any], bool] = should_envelope):
        super().__init__(classify)

    def _on_published(self, tp: Any, value: bool) -> None:
        logger.debug(f"Classified {type_name(tp)}: envelope={value}")


def build_read_envelope_type(tp: Any) -> Any:
    """Return ``EnvelopeRead[tp]``, the type an enveloped document is parsed into."""
    if tp is None:
        raise InvalidTypeError()
    if isinstance(tp, (str, ForwardRef)):
        raise UnsupportedShapeError(tp, "forward references must be resolved before reading")
    if isinstance(tp, TypeVar):
        raise UnsupportedShapeError(tp, "type variables must be bound before reading")
    if not (isinstance(tp, type) or get_origin(tp) is not None or hasattr(tp, "__supertype__")):
        raise UnsupportedShapeError(tp, "not a class or parametrized type")
    try:
        return EnvelopeRead[tp]  # type: ignore[valid-type]
    except TypeError as exc:
        raise UnsupportedShapeError(tp, str(exc)) from exc


class EnvelopeTypeCache(TypeKeyedCache[Any]):
    """Memoized target type -> ``EnvelopeRead[target]`` mapping for the read path."""

    def __init__(self, build: Callable[[Any], Any] = build_read_envelope_type):
        super().__init__(build)
