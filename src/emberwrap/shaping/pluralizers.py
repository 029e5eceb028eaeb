from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Optional, Tuple

# Last word of a camelCase, PascalCase or snake_case identifier.
_TAIL = re.compile(r"^(.*?)([A-Z]?[a-z]+|[A-Z]+)$")

_IRREGULAR: Dict[str, str] = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "tooth": "teeth",
    "foot": "feet",
    "mouse": "mice",
    "goose": "geese",
    "ox": "oxen",
    "leaf": "leaves",
    "life": "lives",
    "knife": "knives",
    "wife": "wives",
    "half": "halves",
    "criterion": "criteria",
    "datum": "data",
    "index": "indices",
}

_UNCOUNTABLE = frozenset(
    {"equipment", "information", "rice", "money", "species", "series", "fish", "sheep", "news", "metadata", "data"}
)

# (pattern, replacement) applied to the lower-cased tail, first match wins.
_RULES: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(quiz)$"), r"\1zes"),
    (re.compile(r"(matr|vert|append)ix$"), r"\1ices"),
    (re.compile(r"(x|ch|ss|sh|zz)$"), r"\1es"),
    (re.compile(r"([^aeiouy])y$"), r"\1ies"),
    (re.compile(r"(bus|alias|status|campus)$"), r"\1es"),
    (re.compile(r"(octop|vir)us$"), r"\1i"),
    (re.compile(r"(ax|test)is$"), r"\1es"),
    (re.compile(r"(buffal|tomat|potat|her)o$"), r"\1oes"),
    (re.compile(r"s$"), "s"),
    (re.compile(r"$"), "s"),
)


def _match_case(template: str, word: str) -> str:
    if template.isupper() and len(template) > 1:
        return word.upper()
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


class EnglishPluralizer:
    """Rule-based English pluralizer for envelope root keys.

    Works on the last word of an identifier so ``orderLine`` becomes
    ``orderLines`` and ``salesPerson`` becomes ``salesPeople``.
    """

    def __init__(
        self,
        irregular: Optional[Mapping[str, str]] = None,
        uncountable: Optional[Iterable[str]] = None,
    ):
        self.irregular = dict(_IRREGULAR)
        self.irregular.update({k.lower(): v.lower() for k, v in (irregular or {}).items()})
        self.uncountable = set(_UNCOUNTABLE) | {w.lower() for w in (uncountable or ())}

    def pluralize(self, word: str) -> str:
        if not word:
            return word
        match = _TAIL.match(word)
        head, tail = (match.group(1), match.group(2)) if match else ("", word)
        lowered = tail.lower()

        if lowered in self.uncountable:
            return word
        if lowered in self.irregular:
            return head + _match_case(tail, self.irregular[lowered])

        for pattern, replacement in _RULES:
            if pattern.search(lowered):
                return head + _match_case(tail, pattern.sub(replacement, lowered, count=1))
        return word
