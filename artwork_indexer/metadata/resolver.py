"""
Artwork metadata resolution.

Flow:
1. Extract the IPFS content id from the token's metadata locator
2. Rewrite the locator to the canonical gateway URL
3. Fetch and parse the JSON document
4. Copy recognized fields onto the artwork (FIELD_RULES)

Partial success is the normal case. Only a locator without a content id
marks the artwork as broken; fetch and parse failures just leave fields
unset.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ..db.models import ArtworkModel
from .document import JSONKind, JSONValue, parse_document
from .ipfs import ContentFetcher

CONTENT_ID_PREFIX = "Qm"


def extract_content_id(locator: Optional[str]) -> Optional[str]:
    """Return the trailing path segment if it is an IPFS v0 content id.

    >>> extract_content_id("ipfs://ipfs/QmXYZ")
    'QmXYZ'
    >>> extract_content_id("https://example.com/file.png") is None
    True
    """
    if locator is None:
        return None
    segment = locator.split("/")[-1]
    if segment and segment.startswith(CONTENT_ID_PREFIX):
        return segment
    return None


def _unwrap(value: JSONValue) -> Any:
    return value.value


def _all_strings(value: JSONValue) -> bool:
    return all(item.kind is JSONKind.STRING for item in value.items)


def _string_items(value: JSONValue) -> List[str]:
    return [item.value for item in value.items]


def _refresh_media_hash(artwork: ArtworkModel) -> None:
    artwork.media_hash = extract_content_id(artwork.media_uri)


def _refresh_tags_string(artwork: ArtworkModel) -> None:
    if artwork.tags:
        artwork.tags_string = " ".join(artwork.tags)


@dataclass(frozen=True)
class FieldRule:
    """Copies one document field onto an artwork attribute.

    The field is applied only when present with the expected kind and,
    if given, accepted by ``check``; otherwise the attribute keeps
    whatever value it had.
    """

    path: Tuple[str, ...]
    kind: JSONKind
    attribute: str
    convert: Callable[[JSONValue], Any] = _unwrap
    after: Optional[Callable[[ArtworkModel], None]] = None
    check: Optional[Callable[[JSONValue], bool]] = None

    def apply(self, document: JSONValue, artwork: ArtworkModel) -> bool:
        value = document.lookup(self.path)
        if value.kind is not self.kind:
            return False
        if self.check is not None and not self.check(value):
            return False
        setattr(artwork, self.attribute, self.convert(value))
        if self.after is not None:
            self.after(artwork)
        return True


# Order matters: animation_url overrides image
FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule(("name",), JSONKind.STRING, "name"),
    FieldRule(("description",), JSONKind.STRING, "description"),
    FieldRule(("image",), JSONKind.STRING, "media_uri", after=_refresh_media_hash),
    FieldRule(("animation_url",), JSONKind.STRING, "media_uri", after=_refresh_media_hash),
    FieldRule(("media", "mimeType"), JSONKind.STRING, "mime_type"),
    FieldRule(("media", "size"), JSONKind.INTEGER, "size"),
    FieldRule(
        ("tags",),
        JSONKind.ARRAY,
        "tags",
        convert=_string_items,
        after=_refresh_tags_string,
        check=_all_strings,
    ),
)


class MetadataResolver:
    """Enriches artworks with metadata documents from IPFS."""

    def __init__(
        self,
        fetcher: ContentFetcher,
        gateway_url: str = "https://ipfs.io/ipfs",
        rules: Tuple[FieldRule, ...] = FIELD_RULES,
    ):
        self.fetcher = fetcher
        self.gateway_url = gateway_url.rstrip("/")
        self.rules = rules

    def canonical_uri(self, content_id: str) -> str:
        return f"{self.gateway_url}/{content_id}"

    def resolve(self, artwork: ArtworkModel, locator: Optional[str]) -> ArtworkModel:
        """Apply the metadata referenced by ``locator`` to ``artwork``.

        Returns the same artwork instance, mutated in place.
        """
        content_id = extract_content_id(locator)
        if content_id is None:
            artwork.broken = True
            return artwork

        artwork.metadata_uri = self.canonical_uri(content_id)
        artwork.metadata_hash = content_id

        raw = self.fetcher.fetch(content_id)
        if not raw:
            return artwork

        document = parse_document(raw)
        if document is None or document.kind is not JSONKind.OBJECT:
            return artwork

        for rule in self.rules:
            rule.apply(document, artwork)

        return artwork
