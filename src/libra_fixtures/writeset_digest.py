"""Canonical write-set digest (v1)."""
from __future__ import annotations

from blake3 import blake3

from .encoding import encode_write_set
from .types import WriteSet


def compute_writeset_digest(write_set: WriteSet) -> str:
    """BLAKE3-256 over the LCS encoding of ``write_set``.

    Entry order is part of the encoding, so the same entries in a different
    order give a different digest.
    """
    return blake3(encode_write_set(write_set)).hexdigest()
