"""
Core cryptographic utilities.

Module 02 provides hashing utilities: SHA-256 content hashes, hex helpers
and the inference record hasher.
"""
from .hashing import (
    DIGEST_SIZE,
    HEX_PREFIX,
    from_hex,
    hash_bytes,
    hash_canonical,
    hash_concat,
    is_content_hash,
    normalize_content_hash,
    normalize_hash,
    sha256,
    to_hex,
)
from .record_hasher import (
    hash_record,
    prepare_for_hashing,
    verify_record_hash,
)

__all__ = [
    "DIGEST_SIZE",
    "HEX_PREFIX",
    "sha256",
    "hash_bytes",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "hash_concat",
    "normalize_hash",
    "normalize_content_hash",
    "is_content_hash",
    "hash_record",
    "prepare_for_hashing",
    "verify_record_hash",
]
