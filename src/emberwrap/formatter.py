from __future__ import annotations

import collections
import io
from typing import Any, BinaryIO, Optional, Union

from emberwrap.classification.cache import ClassificationCache, EnvelopeTypeCache
from emberwrap.classification.shapes import is_untyped_enumerable, type_name
from emberwrap.core.contracts import EnvelopeRead, EnvelopeWrite, ShapingHook
from emberwrap.core.exceptions import UnsupportedShapeError
from emberwrap.core.logger import get_logger
from emberwrap.core.meta_provider import MetaProvider
from emberwrap.core.pluralizer import Pluralizer
from emberwrap.models.formatter_config import FormatterConfig
from emberwrap.serializers.json_serializer import JsonSerializer, ReadSource
from emberwrap.shaping.ember_shaper import EmberShaper

# Runtime containers whose element type can be recovered from their contents.
_INFERABLE_CONTAINERS = (list, tuple, set, frozenset, collections.deque)


def resolve_effective_type(declared_type: Any, value: Any) -> Any:
    """
    Pick the type a payload is classified as.

    A present value is the more reliable source: a handler declared to return
    ``object`` that returns a ``Customer`` is classified as ``Customer``.
    Python containers do not carry their element type, so a homogeneous
    ``list`` of customers resolves to ``list[Customer]`` (``tuple[Customer, ...]``
    for tuples). ``None`` items make the element ``Optional``. Empty or mixed
    containers, and absent values, fall back to the declared type.
    """
    if value is None:
        return declared_type

    runtime_type = type(value)
    if runtime_type not in _INFERABLE_CONTAINERS:
        return runtime_type

    element_types = {type(item) for item in value if item is not None}
    if len(element_types) != 1:
        return declared_type
    (element_type,) = element_types
    if any(item is None for item in value):
        element_type = Optional[element_type]
    if runtime_type is tuple:
        return tuple[element_type, ...]  # type: ignore[valid-type]
    return runtime_type[element_type]  # type: ignore[index]


def materialize(value: Any) -> Any:
    """Read generators, ranges, dict views and other library iterables into a list.

    Other values, including the inferable containers, are returned as is.
    """
    if value is None or isinstance(value, _INFERABLE_CONTAINERS):
        return value
    if is_untyped_enumerable(type(value)):
        return list(value)
    return value


class EmberJsonFormatter:
    """
    JSON body formatter that applies the Ember Data envelope convention.

    Sits between the hosting request pipeline and the byte-level serializer.
    On write it classifies the outgoing value and wraps it in an
    :class:`EnvelopeWrite` when its type shape calls for a root key. On read
    it swaps the expected type for ``EnvelopeRead[T]`` when ``T`` would have
    been enveloped. Classification verdicts and read-envelope types are
    memoized per type for the lifetime of the formatter.

    Example:
        >>> from emberwrap import EmberJsonFormatter, EnglishPluralizer
        >>> formatter = EmberJsonFormatter(EnglishPluralizer())
        >>> formatter.dumps(Customer(id=1, first_name="Ada"))
        b'{"customer":{"id":1,"firstName":"Ada"}}'
    """

    def __init__(
        self,
        pluralizer: Pluralizer,
        *,
        config: Optional[FormatterConfig] = None,
        shaper: Optional[ShapingHook] = None,
        serializer: Optional[JsonSerializer] = None,
    ):
        """
        Initialize the formatter.

        Args:
            pluralizer: Naming rule for collection root keys, wired into the
                        default shaper.
            config: Serializer conventions. Defaults to ``FormatterConfig()``.
            shaper: Shaping hook; defaults to an :class:`EmberShaper`.
            serializer: Byte-level serializer; defaults to a
                        :class:`JsonSerializer` consulting ``shaper``.
        """
        self.config = config or FormatterConfig()
        self.log = get_logger(f"emberwrap.{self.__class__.__name__}", level=self.config.log_level)
        self.pluralizer = pluralizer
        self.shaper = shaper or EmberShaper(
            pluralizer,
            meta_key=self.config.meta_key,
            camel_case=self.config.camel_case,
        )
        self.serializer = serializer or JsonSerializer(self.config, shaper=self.shaper)
        if getattr(self.serializer, "shaper", None) is None:
            self.serializer.shaper = self.shaper

        self._should_envelope_cache = ClassificationCache()
        self._envelope_type_cache = EnvelopeTypeCache()

    def add_meta_provider(self, provider: MetaProvider) -> None:
        """Forward a meta provider registration to the shaping hook."""
        add = getattr(self.shaper, "add_meta_provider", None)
        if add is None:
            raise TypeError(f"Shaping hook {type(self.shaper).__name__} does not accept meta providers")
        add(provider)

    def should_envelope(self, tp: Any) -> bool:
        return self._should_envelope_cache.get_or_compute(tp)

    def read_envelope_type(self, tp: Any) -> Any:
        return self._envelope_type_cache.get_or_compute(tp)

    # --- Write path ---
    def write_payload(self, declared_type: Any, value: Any, sink: BinaryIO) -> int:
        """
        Serialize ``value`` to ``sink``, enveloping it when its shape requires.

        Returns:
            Number of bytes written.
        """
        value = materialize(value)
        effective_type = resolve_effective_type(declared_type, value)
        shaped: Any = value
        if self.should_envelope(effective_type):
            shaped = EnvelopeWrite(payload=value, payload_type=effective_type)

        self.log.debug(
            f"Writing {type_name(effective_type)} (declared {type_name(declared_type)}), "
            f"enveloped={shaped is not value}"
        )
        return self.serializer.dump(shaped, sink)

    def dumps(self, value: Any, declared_type: Any = object) -> bytes:
        sink = io.BytesIO()
        self.write_payload(declared_type, value, sink)
        return sink.getvalue()

    # --- Read path ---
    def read_payload(self, declared_type: Any, source: ReadSource) -> Any:
        """
        Deserialize ``source`` as ``declared_type``.

        When ``declared_type`` is enveloped on write, the document is parsed
        into ``EnvelopeRead[declared_type]`` and that envelope is returned;
        unwrapping it is up to the caller (see :meth:`read_unwrapped`).

        Raises:
            UnsupportedShapeError: No read envelope can be built for the type.
        """
        target_type = declared_type
        if self.should_envelope(declared_type):
            try:
                target_type = self.read_envelope_type(declared_type)
            except UnsupportedShapeError:
                self.log.error(f"No read envelope for {declared_type!r}")
                raise

        self.log.debug(f"Reading {type_name(declared_type)} as {type_name(target_type)}")
        return self.serializer.load(target_type, source)

    def loads(self, data: Union[bytes, bytearray, str], declared_type: Any) -> Any:
        return self.read_payload(declared_type, data)

    def read_unwrapped(self, declared_type: Any, source: ReadSource) -> Any:
        result = self.read_payload(declared_type, source)
        if isinstance(result, EnvelopeRead):
            return result.unwrap()
        return result
