"""Utility helpers for the models package."""

from __future__ import annotations

import secrets
import string
from typing import Collection

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


def generate_id(
    prefix: str,
    existing: Collection[str] = (),
    length: int = 12,
    max_attempts: int = 32,
) -> str:
    """Return an identifier made of ``prefix`` and a base62 random suffix.

    The helper retries while the generated value collides with ``existing``.
    """

    attempts = 0
    while attempts < max_attempts:
        suffix = "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))
        candidate = f"{prefix}-{suffix}"
        if candidate not in existing:
            return candidate
        attempts += 1

    raise RuntimeError(
        f"Unable to generate a unique '{prefix}' identifier after multiple attempts"
    )
