from __future__ import annotations

from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def ensure_id(value: str | None) -> str:
    """Keep a caller-supplied id, or mint a new one."""
    cleaned = (value or "").strip()
    return cleaned or generate_id()


__all__ = ["generate_id", "ensure_id"]
