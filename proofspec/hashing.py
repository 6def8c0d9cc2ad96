"""
Specification digests.

All digests are SHA-256 over the canonical JSON encoding, rendered as
lowercase hex with a "sha256:" prefix.
"""

import hashlib
from typing import Any, Dict, Union

from .canonicalization import canonicalize

HASH_PREFIX = "sha256:"


def sha256_hash(data: Union[bytes, str]) -> str:
    """Hash raw bytes (or UTF-8 text) into "sha256:<hex>"."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return HASH_PREFIX + hashlib.sha256(data).hexdigest()


def spec_hash(spec: Dict[str, Any]) -> str:
    """Digest of a specification in its wire (to_dict) form."""
    return sha256_hash(canonicalize(spec))


def clause_hash(clause: Dict[str, Any]) -> str:
    """Digest of a single clause in its wire ({type, clauseData}) form."""
    return sha256_hash(canonicalize(clause))


def verify_hash(declared_hash: str, spec: Dict[str, Any]) -> bool:
    """Recompute a specification digest and compare it to a declared one."""
    if not declared_hash.startswith(HASH_PREFIX):
        return False
    return spec_hash(spec) == declared_hash.lower()
