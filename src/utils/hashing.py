"""Hash helpers for payload fingerprints and deterministic seeds."""

from __future__ import annotations

import hashlib


def sha256_hex(value: str | bytes) -> str:
    data = value.encode("utf-8") if isinstance(value, str) else value
    return hashlib.sha256(data).hexdigest()


def stable_seed(*parts: str) -> int:
    return int(sha256_hex("|".join(parts))[:16], 16)
