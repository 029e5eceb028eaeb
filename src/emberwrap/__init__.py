"""emberwrap.

Ember Data envelope formatter for JSON HTTP APIs.

Decides from a payload's type shape whether a response body must be wrapped
under a named root key ({"customer": {...}}, {"customers": [...]}) and
rewrites request bodies back into their inner value on read.

Public API for services and clients embedding the formatter.
"""

from emberwrap.classification.shapes import element_shape, is_anonymous_record, should_envelope
from emberwrap.core.contracts import EnvelopeRead, EnvelopeWrite, ShapingContext
from emberwrap.core.exceptions import (
    EmberwrapException,
    EnvelopeFormatError,
    InvalidTypeError,
    UnsupportedShapeError,
)
from emberwrap.core.meta_provider import MetaProvider, StaticMetaProvider
from emberwrap.core.sideload import is_sideload, sideload
from emberwrap.formatter import EmberJsonFormatter, resolve_effective_type
from emberwrap.models.formatter_config import FormatterConfig
from emberwrap.shaping.pluralizers import EnglishPluralizer

__version__ = "0.1.0"

__all__ = [
    "EmberJsonFormatter",
    "EmberwrapException",
    "EnglishPluralizer",
    "EnvelopeFormatError",
    "EnvelopeRead",
    "EnvelopeWrite",
    "FormatterConfig",
    "InvalidTypeError",
    "MetaProvider",
    "ShapingContext",
    "StaticMetaProvider",
    "UnsupportedShapeError",
    "element_shape",
    "is_anonymous_record",
    "is_sideload",
    "resolve_effective_type",
    "should_envelope",
    "sideload",
]
