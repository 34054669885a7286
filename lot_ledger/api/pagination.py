"""List envelope construction with limit/offset paging."""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from lot_ledger.config import AppSettings

RowT = TypeVar("RowT")


def api_build_list_envelope(
    settings: AppSettings,
    rows: Sequence[RowT],
    serialize: Callable[[RowT], dict[str, object]],
    limit: int,
    offset: int,
    filters: dict[str, object],
) -> dict[str, object]:
    """Slice `rows` to one page and wrap it in the list envelope.

    The requested limit is capped at `settings.api_max_limit`.

    Args:
        settings: Runtime settings providing the limit cap.
        rows: Fully ordered rows.
        serialize: Row serializer.
        limit: Requested page size.
        offset: Rows to skip.
        filters: Applied filters echoed back to the caller.

    Returns:
        dict[str, object]: Envelope with items, page, and filters keys.
    """

    applied_limit = min(limit, settings.api_max_limit)
    page_rows = list(rows[offset : offset + applied_limit])
    return {
        "items": [serialize(row) for row in page_rows],
        "page": {
            "limit": limit,
            "applied_limit": applied_limit,
            "offset": offset,
            "returned": len(page_rows),
            "total": len(rows),
        },
        "filters": filters,
    }


__all__ = ["api_build_list_envelope"]
