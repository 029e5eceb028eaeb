import json
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

import pytest

from emberwrap import (
    EmberJsonFormatter,
    EnglishPluralizer,
    EnvelopeWrite,
    MetaProvider,
    ShapingContext,
    StaticMetaProvider,
)
from emberwrap.core.logger import push_request_id, reset_request_id
from emberwrap.core.sideload import SideloadRegistry
from emberwrap.shaping.ember_shaper import EmberShaper


@dataclass
class Author:
    id: int
    name: str


@dataclass
class Comment:
    id: int
    body: str


class RecordingMetaProvider(MetaProvider):
    def __init__(self, meta: Optional[Mapping[str, Any]] = None):
        self.meta = meta or {}
        self.contexts: List[ShapingContext] = []

    def get_meta(self, context: ShapingContext) -> Mapping[str, Any]:
        self.contexts.append(context)
        return self.meta


@pytest.fixture
def restore_sideload_registry():
    snapshot = set(SideloadRegistry._registry)
    yield
    SideloadRegistry._registry.clear()
    SideloadRegistry._registry.update(snapshot)


def test_root_keys_follow_type_name_and_pluralizer():
    shaper = EmberShaper(EnglishPluralizer())

    assert shaper.root_key(Author) == "author"
    assert shaper.root_key(Author, plural=True) == "authors"
    assert shaper.context_for(list[Comment]).root_key == "comments"
    assert shaper.context_for(tuple[Comment, ...]).is_collection is True
    assert shaper.context_for(Optional[Comment]).root_key == "comment"


def test_snake_case_root_keys_when_camel_case_is_off():
    @dataclass
    class BlogPost:
        id: int

    shaper = EmberShaper(EnglishPluralizer(), camel_case=False)
    assert shaper.root_key(BlogPost, plural=True) == "blog_posts"


def test_meta_providers_are_merged_in_registration_order():
    formatter = EmberJsonFormatter(EnglishPluralizer())
    formatter.add_meta_provider(StaticMetaProvider({"api_version": "1", "source": "primary"}))
    formatter.add_meta_provider(StaticMetaProvider({"api_version": "2"}))

    doc = json.loads(formatter.dumps(Author(id=1, name="Ada")))

    assert doc == {
        "author": {"id": 1, "name": "Ada"},
        "meta": {"apiVersion": "2", "source": "primary"},
    }


def test_meta_is_omitted_when_providers_contribute_nothing():
    formatter = EmberJsonFormatter(EnglishPluralizer())
    formatter.add_meta_provider(RecordingMetaProvider())

    assert json.loads(formatter.dumps(Author(id=1, name="Ada"))) == {"author": {"id": 1, "name": "Ada"}}


def test_meta_providers_are_not_consulted_for_bare_payloads():
    formatter = EmberJsonFormatter(EnglishPluralizer())
    provider = RecordingMetaProvider({"count": 1})
    formatter.add_meta_provider(provider)

    assert json.loads(formatter.dumps([1, 2])) == [1, 2]
    assert provider.contexts == []


def test_meta_key_is_configurable():
    from emberwrap import FormatterConfig

    formatter = EmberJsonFormatter(EnglishPluralizer(), config=FormatterConfig(meta_key="_meta"))
    formatter.add_meta_provider(StaticMetaProvider({"page": 1}))

    assert json.loads(formatter.dumps(Author(id=1, name="Ada")))["_meta"] == {"page": 1}


def test_sideload_marker_is_forwarded_to_providers(restore_sideload_registry):
    SideloadRegistry.register(Comment)
    formatter = EmberJsonFormatter(EnglishPluralizer())
    provider = RecordingMetaProvider()
    formatter.add_meta_provider(provider)

    formatter.dumps([Comment(id=1, body="hi")])
    formatter.dumps(Author(id=1, name="Ada"))

    comment_ctx, author_ctx = provider.contexts
    assert comment_ctx.sideload is True
    assert comment_ctx.is_collection is True
    assert comment_ctx.root_key == "comments"
    assert comment_ctx.element_type is Comment
    assert author_ctx.sideload is False


def test_sideload_marker_does_not_change_envelope_verdict(restore_sideload_registry):
    formatter = EmberJsonFormatter(EnglishPluralizer())
    before = formatter.should_envelope(Comment)
    SideloadRegistry.register(Comment)

    assert EmberJsonFormatter(EnglishPluralizer()).should_envelope(Comment) is before


def test_context_carries_request_id():
    shaper = EmberShaper(EnglishPluralizer())
    token = push_request_id("req-42")
    try:
        assert shaper.context_for(Author).request_id == "req-42"
    finally:
        reset_request_id(token)


def test_shape_builds_document_with_to_plain():
    shaper = EmberShaper(EnglishPluralizer())
    envelope = EnvelopeWrite(payload=Author(id=1, name="Ada"), payload_type=Author)

    doc = shaper.shape(envelope, lambda value: {"converted": value.name})

    assert doc == {"author": {"converted": "Ada"}}


def test_non_provider_registration_is_rejected():
    formatter = EmberJsonFormatter(EnglishPluralizer())
    with pytest.raises(TypeError):
        formatter.add_meta_provider({"api_version": "1"})
