"""
Canonical JSON encoding for proof specifications.

Semantically identical specifications produce identical bytes, so a
digest of the encoding can be bound into a proof transcript.
"""

import json
from typing import Any, Dict, List, Union


def canonicalize(obj: Any) -> bytes:
    """
    Encode an object as canonical JSON.

    Rules:
    - Object keys sorted lexicographically (Unicode code point order)
    - Compact separators, no whitespace
    - UTF-8, non-ASCII left unescaped
    - Arrays and tuples keep their order
    - Floats are rejected; every number in a specification is an integer

    Returns:
        UTF-8 encoded bytes of canonical JSON
    """
    canonical = _canonicalize_value(obj)
    return json.dumps(canonical, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def canonicalize_str(obj: Any) -> str:
    """Return canonical JSON as string."""
    return canonicalize(obj).decode('utf-8')


def _canonicalize_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, str)):
        return value
    elif isinstance(value, int):
        return int(value)
    elif isinstance(value, dict):
        return _canonicalize_object(value)
    elif isinstance(value, (list, tuple)):
        return _canonicalize_array(value)
    else:
        raise ValueError(f"Cannot canonicalize type: {type(value).__name__}")


def _canonicalize_object(obj: Dict[str, Any]) -> Dict[str, Any]:
    for key in obj:
        if not isinstance(key, str):
            raise ValueError(f"Object keys must be strings, got {type(key).__name__}")
    return {k: _canonicalize_value(obj[k]) for k in sorted(obj)}


def _canonicalize_array(arr: Union[List, tuple]) -> List:
    return [_canonicalize_value(item) for item in arr]
