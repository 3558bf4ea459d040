"""
Identifier and right normalization.

External identifiers arrive as strings (route params, JWT claims) or as
ObjectId instances. Everything is turned into ``bson.ObjectId`` before any
storage lookup; malformed input becomes ``None`` and never reaches MongoDB.
"""

from typing import Any

from bson import ObjectId


def normalize_id(raw: Any) -> ObjectId | None:
    """
    Convert an external identifier to an ObjectId.

    Args:
        raw: ObjectId, 24-character hex string, or anything whose ``str()`` is one

    Returns:
        ObjectId, or None for empty or malformed input. Never raises.
    """
    if raw is None:
        return None
    if isinstance(raw, ObjectId):
        return raw
    try:
        value = str(raw).strip()
    except (TypeError, ValueError):
        return None
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def normalize_right(raw: Any) -> str:
    """
    Trim and stringify a requested right.

    An empty result means "no right requested"; callers must reject it.
    """
    if raw is None:
        return ""
    return str(raw).strip()


def id_to_str(value: Any) -> str | None:
    """Render an identifier for JSON output, keeping None as None."""
    if value is None:
        return None
    return str(value)
