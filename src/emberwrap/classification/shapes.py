"""Type shape classification.

Decides from a type descriptor alone whether a payload of that type is
emitted inside an Ember-style root envelope. Containers are classified by
the shape they hold, so ``list[Decimal]`` stays bare while ``list[Customer]``
is enveloped exactly like ``Customer``.

The checks in :func:`should_envelope` run in a fixed order; the first one
that matches decides.
"""

from __future__ import annotations

import collections
import collections.abc
import datetime
import decimal
import enum
import sys
import types
import uuid
from typing import Any, Annotated, Literal, Optional, Tuple, Union, get_args, get_origin

from emberwrap.core.exceptions import InvalidTypeError

_NONE_TYPE = type(None)
_UNION_ORIGINS: Tuple[Any, ...] = (Union, types.UnionType)

_TEXT_SHAPES: Tuple[type, ...] = (str, bytes, bytearray, uuid.UUID)
# datetime.datetime is a subclass of datetime.date
_DATE_SHAPES: Tuple[type, ...] = (datetime.date, datetime.time)
_DECIMAL_SHAPES: Tuple[type, ...] = (decimal.Decimal,)
_PRIMITIVE_SHAPES: Tuple[type, ...] = (bool, int, float, complex, enum.Enum)

# Bare containers: nothing is known about what they hold.
_UNTYPED_ENUMERABLES: Tuple[Any, ...] = (
    collections.abc.Iterable,
    collections.abc.Iterator,
    collections.abc.Collection,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    list,
    tuple,
    set,
    frozenset,
    collections.deque,
)

# Modules whose iterable classes (generators, range, dict views, map ...) are plain containers.
_LIBRARY_ITERABLE_MODULES = frozenset({"builtins", "collections", "collections.abc", "itertools", "types"})

# Structures a handler builds inline instead of declaring a type.
_AD_HOC_RECORDS: Tuple[Any, ...] = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
    types.MappingProxyType,
    types.SimpleNamespace,
)


def _is_one_of(tp: Any, candidates: Tuple[Any, ...]) -> bool:
    return any(tp is candidate for candidate in candidates)


def _unalias(tp: Any) -> Any:
    """Reduce ``Annotated[X, ...]`` and ``NewType`` aliases to the type they stand for."""
    while True:
        if get_origin(tp) is Annotated:
            tp = get_args(tp)[0]
        elif hasattr(tp, "__supertype__"):
            tp = tp.__supertype__
        else:
            return tp


def _union_members(tp: Any) -> Optional[Tuple[Any, ...]]:
    if get_origin(tp) in _UNION_ORIGINS:
        return tuple(arg for arg in get_args(tp) if arg is not _NONE_TYPE)
    return None


def _strip_optional(tp: Any) -> Any:
    tp = _unalias(tp)
    members = _union_members(tp)
    if members is not None and len(members) == 1:
        return _unalias(members[0])
    return tp


def _as_class(tp: Any) -> Optional[type]:
    origin = get_origin(tp)
    if origin is not None:
        return origin if isinstance(origin, type) else None
    if isinstance(tp, type):
        return tp
    return None


def _is_subclass_of(tp: Any, shapes: Tuple[type, ...]) -> bool:
    cls = _as_class(tp)
    if cls is None:
        return False
    try:
        return issubclass(cls, shapes)
    except TypeError:
        return False


def _is_sequence_origin(origin: Any) -> bool:
    if not isinstance(origin, type):
        return False
    if not issubclass(origin, collections.abc.Iterable):
        return False
    return not issubclass(origin, (str, bytes, bytearray, collections.abc.Mapping))


def is_opaque(tp: Any) -> bool:
    """``object``, ``Any``, ``None`` and unions of several types carry no usable shape."""
    if tp is object or tp is Any or tp is _NONE_TYPE or tp is None:
        return True
    members = _union_members(tp)
    return members is not None and len(members) > 1


def _is_library_iterable(tp: Any) -> bool:
    if get_origin(tp) is not None or not isinstance(tp, type):
        return False
    if tp.__module__ not in _LIBRARY_ITERABLE_MODULES:
        return False
    if not issubclass(tp, collections.abc.Iterable):
        return False
    return not issubclass(tp, (str, bytes, bytearray, collections.abc.Mapping))


def is_untyped_enumerable(tp: Any) -> bool:
    if _is_one_of(tp, _UNTYPED_ENUMERABLES) or _is_library_iterable(tp):
        return True
    # bare typing aliases such as typing.List or typing.Iterable
    origin = get_origin(tp)
    return origin is not None and not get_args(tp) and _is_one_of(origin, _UNTYPED_ENUMERABLES)


def collection_element(tp: Any) -> Optional[Any]:
    """Element type of an array or single-argument sequence shape, else ``None``."""
    tp = _strip_optional(tp)
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return _strip_optional(args[0])
    if _is_sequence_origin(origin) and len(args) == 1:
        return _strip_optional(args[0])
    return None


def element_shape(tp: Any) -> Any:
    """Return the shape that governs classification of ``tp``.

    - ``Optional[X]`` -> ``X``
    - ``tuple[X, ...]`` -> ``X``
    - ``list[X]``, ``set[X]``, ``Sequence[X]``, ``Iterable[X]`` ... -> ``X``
    - anything else -> itself

    Only one container level is unwrapped.
    """
    if tp is None:
        raise InvalidTypeError()
    element = collection_element(tp)
    if element is not None:
        return element
    return _strip_optional(tp)


def is_anonymous_record(tp: Any) -> bool:
    """True for ad-hoc record shapes that are not part of the client's domain model.

    Plain mappings and ``SimpleNamespace`` objects built inline by a handler
    qualify, as do synthesized record classes: produced by the namedtuple
    factory, named with a leading underscore or angle bracket and not exported by their module.
    """
    if tp is None:
        raise InvalidTypeError()
    cls = _as_class(tp)
    if cls is None:
        return False
    if _is_one_of(cls, _AD_HOC_RECORDS):
        return True
    return _is_synthesized_record(cls)


def _is_synthesized_record(cls: type) -> bool:
    if not (issubclass(cls, tuple) and hasattr(cls, "_fields")):
        return False
    if not cls.__name__.startswith(("_", "<")):
        return False
    module = sys.modules.get(cls.__module__)
    return getattr(module, cls.__name__, None) is not cls


def _is_scalar_literal(tp: Any) -> bool:
    return get_origin(tp) is Literal


def should_envelope(tp: Any) -> bool:
    """Decide whether a payload of type ``tp`` must be wrapped in a root envelope.

    Pure and deterministic in ``tp``; never looks at a value. Raises
    :class:`InvalidTypeError` when ``tp`` is ``None``.
    """
    if tp is None:
        raise InvalidTypeError()

    tp = _unalias(tp)
    if is_opaque(tp):
        return False
    if is_untyped_enumerable(tp):
        return False

    inner = element_shape(tp)

    if is_opaque(inner) or is_untyped_enumerable(inner):
        return False
    if _is_subclass_of(inner, _TEXT_SHAPES):
        return False
    if _is_subclass_of(inner, _DATE_SHAPES):
        return False
    if _is_subclass_of(inner, _DECIMAL_SHAPES):
        return False
    if _is_subclass_of(inner, _PRIMITIVE_SHAPES) or _is_scalar_literal(inner):
        return False
    if is_anonymous_record(inner):
        return False
    return True


def type_name(tp: Any) -> str:
    cls = _as_class(tp)
    if cls is not None:
        return cls.__name__
    return getattr(tp, "__name__", None) or repr(tp)
