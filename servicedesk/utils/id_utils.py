"""Identifier helpers."""
import secrets

from bson import ObjectId


def new_id() -> str:
    """New entity id (ObjectId hex, same shape as MongoDB ids)."""
    return str(ObjectId())


def short_token(prefix: str, length: int = 8) -> str:
    """Prefixed random identifier, e.g. 'WL-3f9a1c2b'."""
    return f"{prefix}-{secrets.token_hex(length // 2)}"


def format_sequence_id(prefix: str, year: int, sequence: int) -> str:
    """Human readable ITSM ids, e.g. INC-2026-00042."""
    return f"{prefix}-{year}-{sequence:05d}"
