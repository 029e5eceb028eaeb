from __future__ import annotations

from typing import Any, ClassVar, Optional, Set, Type, TypeVar, overload

C = TypeVar("C", bound=type)


class SideloadRegistry:
    """Per-type capability flag: instances of marked types request side-loading.

    Only the presence of the marker is tracked. Gathering and embedding the
    related resources belongs to the shaping hook.
    """

    _registry: ClassVar[Set[Type[Any]]] = set()

    @classmethod
    def register(cls, domain_type: Type[Any]) -> None:
        if not isinstance(domain_type, type):
            raise TypeError(f"Side-load marker requires a class, got {domain_type!r}")
        cls._registry.add(domain_type)

    @classmethod
    def is_registered(cls, tp: Any) -> bool:
        if not isinstance(tp, type):
            return False
        return any(marked in cls._registry for marked in tp.__mro__)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


@overload
def sideload(domain_type: C) -> C:
    ...


@overload
def sideload(domain_type: None = None) -> Any:
    ...


def sideload(domain_type: Optional[C] = None) -> Any:
    """Mark a domain type as requesting side-loading of related resources.

    Usable bare (``@sideload``) or called (``@sideload()``).
    """

    def decorator(cls: C) -> C:
        SideloadRegistry.register(cls)
        return cls

    if domain_type is None:
        return decorator
    return decorator(domain_type)


def is_sideload(tp: Any) -> bool:
    return SideloadRegistry.is_registered(tp)
