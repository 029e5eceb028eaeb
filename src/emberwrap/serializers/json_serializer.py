from __future__ import annotations

from typing import Any, BinaryIO, Optional, Union, get_args, get_origin

from pydantic import TypeAdapter
from pydantic_core import from_json, to_json, to_jsonable_python

from emberwrap.classification.cache import TypeKeyedCache
from emberwrap.classification.shapes import is_untyped_enumerable
from emberwrap.core.contracts import EnvelopeRead, EnvelopeWrite, ShapingHook
from emberwrap.core.exceptions import EmberwrapException
from emberwrap.core.logger import get_logger
from emberwrap.models.formatter_config import FormatterConfig
from emberwrap.serializers.conventions import (
    camel_case_key,
    drop_nulls,
    rename_keys,
    restore_nulls,
    snake_case_key,
    trim_strings,
)

ReadSource = Union[BinaryIO, bytes, bytearray, str]


def _object_fallback(value: Any) -> Any:
    """Library iterables become lists; plain application objects are emitted through their instance attributes."""
    if is_untyped_enumerable(type(value)):
        return list(value)
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonSerializer:
    """
    Byte-level JSON serializer behind the envelope transform.

    Applies the configured conventions (camelCase keys, trimmed strings,
    omitted nulls, ISO 8601 dates) and hands :class:`EnvelopeWrite` values
    and ``EnvelopeRead[T]`` targets to the shaping hook. Errors from pydantic
    (malformed JSON, validation failures) propagate unchanged.
    """

    def __init__(self, config: Optional[FormatterConfig] = None, shaper: Optional[ShapingHook] = None):
        self.config = config or FormatterConfig()
        self.shaper = shaper
        self.log = get_logger(f"emberwrap.{self.__class__.__name__}")
        self._adapters: TypeKeyedCache[TypeAdapter] = TypeKeyedCache(TypeAdapter)

    # --- Write path ---
    def to_plain(self, value: Any) -> Any:
        """Convert ``value`` to JSON-compatible data, consulting the shaper for envelopes."""
        if isinstance(value, EnvelopeWrite):
            return self._require_shaper().shape(value, self.to_plain)

        data = to_jsonable_python(value, fallback=_object_fallback)
        cfg = self.config
        if cfg.trim_strings:
            data = trim_strings(data)
        if cfg.ignore_nulls:
            data = drop_nulls(data)
        if cfg.camel_case:
            data = rename_keys(data, camel_case_key)
        return data

    def dumps(self, value: Any) -> bytes:
        return to_json(self.to_plain(value), indent=self.config.indent)

    def dump(self, value: Any, sink: BinaryIO) -> int:
        payload = self.dumps(value)
        sink.write(payload)
        self.log.debug(f"Wrote {len(payload)} bytes for {type(value).__name__}")
        return len(payload)

    # --- Read path ---
    def from_plain(self, data: Any, target_type: Any = None) -> Any:
        cfg = self.config
        if cfg.camel_case:
            data = rename_keys(data, snake_case_key)
        if cfg.trim_strings:
            data = trim_strings(data)
        if cfg.ignore_nulls and target_type is not None:
            data = restore_nulls(target_type, data)
        return data

    def load(self, target_type: Any, source: ReadSource) -> Any:
        document = from_json(self._read_all(source))

        if get_origin(target_type) is EnvelopeRead:
            (inner_type,) = get_args(target_type)
            payload, meta = self._require_shaper().unshape(document, inner_type)
            value = self._adapter(inner_type).validate_python(self.from_plain(payload, inner_type))
            return EnvelopeRead(payload=value, meta=dict(self.from_plain(dict(meta))))

        return self._adapter(target_type).validate_python(self.from_plain(document, target_type))

    def _adapter(self, tp: Any) -> TypeAdapter:
        return self._adapters.get_or_compute(tp)

    def _read_all(self, source: ReadSource) -> Union[bytes, bytearray, str]:
        if isinstance(source, (bytes, bytearray, str)):
            return source
        return source.read()

    def _require_shaper(self) -> ShapingHook:
        if self.shaper is None:
            raise EmberwrapException("JsonSerializer needs a shaping hook to handle envelopes")
        return self.shaper
