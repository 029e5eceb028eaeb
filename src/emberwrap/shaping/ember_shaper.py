from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic.alias_generators import to_snake

from emberwrap.classification.shapes import collection_element, element_shape, type_name
from emberwrap.core.contracts import EnvelopeWrite, ShapingContext, ToPlain
from emberwrap.core.exceptions import EnvelopeFormatError
from emberwrap.core.logger import current_request_id, get_logger
from emberwrap.core.meta_provider import MetaProvider
from emberwrap.core.pluralizer import Pluralizer
from emberwrap.core.sideload import is_sideload
from emberwrap.serializers.conventions import camel_case_key


class EmberShaper:
    """
    Default shaping hook: Ember Data REST envelopes.

    A single ``Customer`` is emitted as ``{"customer": {...}}`` and a
    ``list[Customer]`` as ``{"customers": [...]}``. Entries contributed by the
    registered meta providers are merged in registration order (later wins)
    under the meta key; an empty meta section is omitted.

    Side-loading of related resources is not performed here. Whether the
    element type carries the side-load marker is exposed on the
    :class:`ShapingContext` so providers and custom hooks can act on it.
    """

    def __init__(
        self,
        pluralizer: Pluralizer,
        *,
        meta_key: str = "meta",
        camel_case: bool = True,
        meta_providers: Optional[Iterable[MetaProvider]] = None,
    ):
        self.pluralizer = pluralizer
        self.meta_key = meta_key
        self.camel_case = camel_case
        self._meta_providers: List[MetaProvider] = []
        self.log = get_logger(f"emberwrap.{self.__class__.__name__}")
        for provider in meta_providers or ():
            self.add_meta_provider(provider)

    def add_meta_provider(self, provider: MetaProvider) -> None:
        if not isinstance(provider, MetaProvider):
            raise TypeError(f"Expected a MetaProvider, got {type(provider).__name__}")
        self._meta_providers.append(provider)
        self.log.debug(f"Registered meta provider {type(provider).__name__}")

    @property
    def meta_providers(self) -> Tuple[MetaProvider, ...]:
        return tuple(self._meta_providers)

    def root_key(self, element_type: Any, *, plural: bool = False) -> str:
        name = type_name(element_type)
        key = camel_case_key(name) if self.camel_case else to_snake(name)
        return self.pluralizer.pluralize(key) if plural else key

    def context_for(self, payload_type: Any) -> ShapingContext:
        element = collection_element(payload_type)
        is_collection = element is not None
        element_type = element if is_collection else element_shape(payload_type)
        return ShapingContext(
            payload_type=payload_type,
            element_type=element_type,
            root_key=self.root_key(element_type, plural=is_collection),
            is_collection=is_collection,
            sideload=is_sideload(element_type),
            request_id=current_request_id(),
        )

    def collect_meta(self, context: ShapingContext) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for provider in self._meta_providers:
            contributed = provider.get_meta(context)
            if contributed:
                merged.update(contributed)
        return merged

    def shape(self, envelope: EnvelopeWrite, to_plain: ToPlain) -> Dict[str, Any]:
        context = self.context_for(envelope.payload_type)
        document: Dict[str, Any] = {context.root_key: to_plain(envelope.payload)}
        meta = self.collect_meta(context)
        if meta:
            document[self.meta_key] = to_plain(meta)
        return document

    def unshape(self, document: Any, inner_type: Any) -> Tuple[Any, Mapping[str, Any]]:
        if not isinstance(document, dict):
            raise EnvelopeFormatError(
                "Enveloped document must be a JSON object",
                details={"got": type(document).__name__},
            )

        meta = document.get(self.meta_key)
        if meta is None:
            meta = {}
        elif not isinstance(meta, dict):
            raise EnvelopeFormatError(
                "Envelope meta section must be a JSON object",
                details={"meta_key": self.meta_key, "got": type(meta).__name__},
            )

        root_key = self.context_for(inner_type).root_key
        if root_key in document:
            return document[root_key], meta

        candidates = [key for key in document if key != self.meta_key]
        if len(candidates) == 1:
            self.log.debug(f"Envelope root {candidates[0]!r} accepted in place of {root_key!r}")
            return document[candidates[0]], meta

        raise EnvelopeFormatError(
            "Envelope root key not found",
            details={"expected": root_key, "keys": sorted(document)},
        )
