import hashlib
import json
from collections.abc import Iterable, Mapping
from typing import Any

REDACTED = "[REDACTED]"


def hash_payload(value: Any) -> str:
    """
    Return a stable SHA-256 hash for an outline or ledger payload without leaking contents.

    Strings are encoded as UTF-8 (Arabic labels included), bytes are used as-is,
    and ledger trees are serialized via JSON with sorted keys before hashing.
    """

    if value is None:
        normalized = b"null"
    elif isinstance(value, bytes):
        normalized = value
    elif isinstance(value, str):
        normalized = value.encode("utf-8")
    else:
        try:
            normalized = json.dumps(value, sort_keys=True, ensure_ascii=False, default=str).encode("utf-8")
        except (TypeError, ValueError):
            normalized = repr(value).encode("utf-8")

    return hashlib.sha256(normalized).hexdigest()


def redact_fields(payload: Mapping[str, Any], allowed_keys: Iterable[str]) -> dict[str, Any]:
    """
    Copy `payload` keeping whitelisted keys; every other value becomes "[REDACTED]".

    Used to log edit operations by kind and position without their names or values.
    """

    whitelist = set(allowed_keys)
    return {key: (value if key in whitelist else REDACTED) for key, value in payload.items()}
