"""Standardized API response helpers.

All list endpoints should return a consistent envelope:
    {"items": [...], "total": <int>}

Single-item endpoints return the object directly (no wrapper).
"""

from typing import Optional


def list_response(
    items: list,
    total: Optional[int] = None,
) -> dict:
    """Wrap a list in the standard envelope.

    Args:
        items: The list of serialized items.
        total: Total count (defaults to len(items) when the full list is returned).

    Returns:
        {"items": items, "total": total}
    """
    return {
        "items": items,
        "total": total if total is not None else len(items),
    }


def result_response(result, key: str) -> dict:
    """Render a service result for a write endpoint.

    ``synced`` tells the caller whether the remote write went through; the
    local write has always happened.
    """
    return {
        key: result.payload,
        "synced": result.success,
        "queued": result.queued,
        "message": result.error,
    }
