from __future__ import annotations

import collections.abc
import dataclasses
import types
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from pydantic import BaseModel
from pydantic.alias_generators import to_camel, to_snake

KeyFn = Callable[[str], str]

_NONE_TYPE = type(None)
_UNION_ORIGINS = (Union, types.UnionType)


def camel_case_key(key: str) -> str:
    """``first_name`` -> ``firstName``; keys already without underscores only get a lower first letter."""
    if not key or key.startswith("_"):
        return key
    if "_" not in key:
        return key[0].lower() + key[1:]
    return to_camel(key)


def snake_case_key(key: str) -> str:
    """``firstName`` -> ``first_name``; lower-case keys are returned as is."""
    if not key or key.startswith("_") or key.islower():
        return key
    return to_snake(key)


def rename_keys(obj: Any, key_fn: KeyFn) -> Any:
    """Recursively rename string keys of every mapping inside obj."""
    if isinstance(obj, list):
        return [rename_keys(x, key_fn) for x in obj]

    if isinstance(obj, dict):
        return {
            (key_fn(k) if isinstance(k, str) else k): rename_keys(v, key_fn)
            for k, v in obj.items()
        }

    return obj


def trim_strings(obj: Any) -> Any:
    """Recursively strip surrounding whitespace from string values (keys untouched)."""
    if isinstance(obj, str):
        return obj.strip()

    if isinstance(obj, list):
        return [trim_strings(x) for x in obj]

    if isinstance(obj, dict):
        return {k: trim_strings(v) for k, v in obj.items()}

    return obj


def drop_nulls(obj: Any) -> Any:
    """Recursively remove mapping entries whose value is None.

    List items are kept so positions stay stable.
    """
    if isinstance(obj, list):
        return [drop_nulls(x) for x in obj]

    if isinstance(obj, dict):
        return {k: drop_nulls(v) for k, v in obj.items() if v is not None}

    return obj


def restore_nulls(tp: Any, data: Any) -> Any:
    """Put back the ``None`` entries :func:`drop_nulls` removed, guided by ``tp``.

    Missing fields of dataclasses, pydantic models and TypedDicts are set to
    ``None`` when their annotation accepts it; missing non-nullable fields
    are left for validation to report. Recurses through nested fields,
    sequences, ``Optional`` and mapping values.
    """
    tp = _unannotate(tp)
    origin = get_origin(tp)
    args = get_args(tp)

    if origin in _UNION_ORIGINS:
        members = [arg for arg in args if arg is not _NONE_TYPE]
        return restore_nulls(members[0], data) if len(members) == 1 else data

    if isinstance(data, list):
        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            return [restore_nulls(args[0], item) for item in data]
        if origin is not None and len(args) == 1:
            return [restore_nulls(args[0], item) for item in data]
        return data

    if not isinstance(data, dict):
        return data

    if isinstance(origin, type) and issubclass(origin, collections.abc.Mapping) and len(args) == 2:
        return {k: restore_nulls(args[1], v) for k, v in data.items()}

    fields = _record_fields(tp)
    if fields is None:
        return data

    restored = dict(data)
    for key, annotation in fields.items():
        if key in restored:
            restored[key] = restore_nulls(annotation, restored[key])
        elif _accepts_none(annotation):
            restored[key] = None
    return restored


def _unannotate(tp: Any) -> Any:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def _accepts_none(annotation: Any) -> bool:
    annotation = _unannotate(annotation)
    if annotation is None or annotation is _NONE_TYPE or annotation is Any:
        return True
    return get_origin(annotation) in _UNION_ORIGINS and _NONE_TYPE in get_args(annotation)


def _record_fields(tp: Any) -> Optional[Dict[str, Any]]:
    """Input key -> annotation for the record types whose nulls can be restored."""
    if get_origin(tp) is not None or not isinstance(tp, type):
        return None

    if issubclass(tp, BaseModel):
        return {
            (info.alias or name): info.annotation
            for name, info in tp.model_fields.items()
        }

    if dataclasses.is_dataclass(tp):
        hints = _type_hints(tp)
        return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(tp) if f.init}

    if is_typeddict(tp):
        return dict(_type_hints(tp))

    return None


def _type_hints(tp: type) -> Dict[str, Any]:
    try:
        return get_type_hints(tp, include_extras=True)
    except NameError:
        # forward reference to a name not visible from the defining module
        return {}
