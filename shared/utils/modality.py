# shared/utils/modality.py
"""
Modality tag normalisation.

Student modalities reach the store in three shapes: a list of tags, a bare
tag ("Jiu-Jitsu") or a JSON-encoded list ('["Jiu-Jitsu", "Crossfit"]').
`parse_modalities` turns any of them into an ordered, de-duplicated list
and reports which path it took, so callers never branch on raw shapes.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, List

# A JSON array made only of string literals
_STRING_LITERAL = r'"(?:[^"\\\x00-\x1f]|\\(?:["\\/bfnrt]|u[0-9a-fA-F]{4}))*"'
_JSON_STRING_ARRAY = re.compile(
    r'^\[\s*(?:' + _STRING_LITERAL + r'\s*(?:,\s*' + _STRING_LITERAL + r'\s*)*)?\]$'
)
_STRING_LITERAL_RE = re.compile(_STRING_LITERAL)


@dataclass(frozen=True)
class ModalityParse:
    """Tagged parse result: kind is 'ok' (list input) or 'fallback' (single tag)."""
    OK = 'ok'
    FALLBACK = 'fallback'

    kind: str
    tags: List[str] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.kind == self.FALLBACK


def _clean(tags) -> List[str]:
    cleaned = []
    for tag in tags:
        if tag is None:
            continue
        text = str(tag).strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


def _decode_string_array(text: str) -> List[str]:
    # Each literal already matched the grammar above, so json decodes it as a plain str
    return [json.loads(literal) for literal in _STRING_LITERAL_RE.findall(text)]


def parse_modalities(value: Any) -> ModalityParse:
    """
    Normalise a stored or submitted modality value.

    Args:
        value: list/tuple of tags, a bare tag, a JSON-encoded list of tags, or None

    Returns:
        ModalityParse with kind OK for list inputs and FALLBACK for a bare tag.
        Empty inputs give OK with no tags.
    """
    if value is None:
        return ModalityParse(ModalityParse.OK, [])

    if isinstance(value, (list, tuple, set)):
        return ModalityParse(ModalityParse.OK, _clean(value))

    text = str(value).strip()
    if not text:
        return ModalityParse(ModalityParse.OK, [])

    if _JSON_STRING_ARRAY.match(text):
        return ModalityParse(ModalityParse.OK, _clean(_decode_string_array(text)))

    return ModalityParse(ModalityParse.FALLBACK, [text])


def normalize_modalities(value: Any) -> List[str]:
    """Shortcut returning only the tag list."""
    return parse_modalities(value).tags
