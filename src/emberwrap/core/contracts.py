from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Mapping, Optional, Protocol, Tuple, TypeVar

T = TypeVar("T")

ToPlain = Callable[[Any], Any]


@dataclass(frozen=True)
class EnvelopeWrite:
    """Outgoing payload that must be emitted under a named root key.

    ``payload`` is the handler's value, kept verbatim (``None`` included).
    ``payload_type`` is the effective type it was classified as; the shaper
    names the root key from it, which matters when the payload is absent.
    """

    payload: Any
    payload_type: Any

    def __repr__(self) -> str:
        name = getattr(self.payload_type, "__name__", repr(self.payload_type))
        if self.payload is None:
            preview = "None"
        elif isinstance(self.payload, (list, tuple, set, frozenset)):
            preview = f"<{type(self.payload).__name__} len={len(self.payload)}>"
        else:
            preview = f"<{type(self.payload).__name__}>"
        return f"EnvelopeWrite(payload_type={name}, payload={preview})"


@dataclass
class EnvelopeRead(Generic[T]):
    """Incoming document parsed from its envelope; callers unwrap ``payload``."""

    payload: T
    meta: Dict[str, Any] = field(default_factory=dict)

    def unwrap(self) -> T:
        return self.payload


@dataclass(frozen=True)
class ShapingContext:
    """What the shaper knows about the envelope it is building or reading.

    Handed to meta providers so they can decide what to contribute.
    """

    payload_type: Any                 # effective type that was classified
    element_type: Any                 # type governing the root key
    root_key: str                     # e.g. "customer" / "customers"
    is_collection: bool = False
    sideload: bool = False            # element type carries the side-load marker
    request_id: Optional[str] = None


class ShapingHook(Protocol):
    """Pluggable hook the serializer consults for envelope values."""

    def shape(self, envelope: EnvelopeWrite, to_plain: ToPlain) -> Dict[str, Any]:
        ...

    def unshape(self, document: Any, inner_type: Any) -> Tuple[Any, Mapping[str, Any]]:
        ...
