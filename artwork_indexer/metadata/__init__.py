"""Off-chain metadata: IPFS fetch, document parsing and field extraction."""

from .document import ABSENT, JSONKind, JSONValue, parse_document
from .ipfs import ContentFetcher, IpfsClient
from .resolver import FIELD_RULES, FieldRule, MetadataResolver, extract_content_id

__all__ = [
    "ABSENT",
    "JSONKind",
    "JSONValue",
    "parse_document",
    "ContentFetcher",
    "IpfsClient",
    "FIELD_RULES",
    "FieldRule",
    "MetadataResolver",
    "extract_content_id",
]
