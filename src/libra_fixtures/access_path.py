"""Storage path derivation for Move resources."""

from __future__ import annotations

from .config import RESOURCE_TAG
from .crypto.hashing import prefixed_hash
from .encoding import encode_struct_tag
from .types import AccessPath, StructTag, check_address


def struct_tag_hash(tag: StructTag) -> bytes:
    return prefixed_hash("StructTag", encode_struct_tag(tag))


def resource_access_vec(tag: StructTag) -> bytes:
    """Path component of a resource slot: [RESOURCE_TAG][hash(struct_tag):32]."""
    return bytes([RESOURCE_TAG]) + struct_tag_hash(tag)


def resource_access_path(address: bytes, tag: StructTag) -> AccessPath:
    """Canonical key of the ``tag`` resource published under ``address``.

    Distinct (address, struct tag) pairs never collide: the address is kept
    verbatim and the tag contributes a SHA3-256 digest of its LCS encoding.
    """
    return AccessPath(address=check_address(address), path=resource_access_vec(tag))
