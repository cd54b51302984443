"""
Row mapping for the ``reels`` table.

A row carries a handful of indexed columns used for lookups and ordering
plus the full record as JSON in ``data``. ``document_to_record`` reads only
``data``, so a record survives a write/read cycle unchanged.

Table layout:
    url            text primary key
    reel_id        text
    username       text
    username_key   text   (lowercased username, indexed)
    post_date      timestamptz
    engagement_rate double precision
    category       text
    last_updated   timestamptz
    created_at     timestamptz
    data           jsonb
"""

from typing import Any

from reellens.models.schemas import ReelRecord, normalize_username


def record_to_document(record: ReelRecord) -> dict[str, Any]:
    """Serialize a record into a JSON-safe table row."""
    data = record.model_dump(mode="json")
    return {
        "url": record.url,
        "reel_id": record.reel_id,
        "username": record.username,
        "username_key": normalize_username(record.username),
        "post_date": data["post_date"],
        "engagement_rate": record.engagement_rate,
        "category": record.category,
        "last_updated": data["last_updated"],
        "created_at": data["created_at"],
        "data": data,
    }


def document_to_record(document: dict[str, Any]) -> ReelRecord:
    """Rebuild a record from a table row.

    Raises:
        ValueError: If the row has no ``data`` payload.
    """
    data = document.get("data")
    if not isinstance(data, dict):
        raise ValueError(f"Row for {document.get('url')!r} has no data payload")
    return ReelRecord.model_validate(data)
