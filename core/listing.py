"""
Client-side search, filter and pagination for list screens.
All functions are pure - they derive a view from the fetched collection
without modifying it.
"""

import math
import zlib
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

NO_RECORDS_MESSAGE = "No records found"
ROW_NUMBER = "#"

Extractor = Callable[[Mapping[str, Any], int], Any]


def field(name: str) -> Extractor:
    """Extractor returning one field of a record."""
    def _extract(record: Mapping[str, Any], index: int) -> Any:
        return record.get(name)
    _extract.__name__ = f"field_{name}"
    return _extract


def row_number(record: Mapping[str, Any], index: int) -> str:
    """Extractor for the 1-based position of a record in the full collection."""
    return str(index + 1)


def full_name(record: Mapping[str, Any], index: int) -> str:
    """Extractor joining an organiser's first and last name."""
    return f"{record.get('first_name') or ''} {record.get('last_name') or ''}".strip()


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def matches_query(
    record: Mapping[str, Any],
    index: int,
    extractors: Sequence[Extractor],
    query: str
) -> bool:
    """
    Check whether any extracted column contains the query.

    Args:
        record: Record to test
        index: Position of the record in the unfiltered collection
        extractors: Column extractors
        query: Lower-cased, stripped query

    Returns:
        True if the query is empty or a substring of any extracted value.
    """
    if not query:
        return True
    return any(query in _as_text(extract(record, index)).lower() for extract in extractors)


def filter_records(
    records: Sequence[Mapping[str, Any]],
    extractors: Sequence[Extractor],
    query: Optional[str]
) -> List[Dict[str, Any]]:
    """
    Filter records by a free-text query, preserving original order.

    Each returned record carries its absolute row number under '#',
    so row numbers stay stable while searching.
    """
    needle = (query or "").strip().lower()
    filtered = []
    for index, record in enumerate(records):
        if matches_query(record, index, extractors, needle):
            filtered.append({**record, ROW_NUMBER: index + 1})
    return filtered


def total_pages(filtered_count: int, page_size: int) -> int:
    """Number of pages for a filtered count; never less than one."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return max(1, math.ceil(filtered_count / page_size))


def clamp_page(page: int, pages: int) -> int:
    """Clamp a requested page into [1, pages]."""
    return min(max(1, page), pages)


def build_list_view(
    records: Sequence[Mapping[str, Any]],
    extractors: Sequence[Extractor],
    query: Optional[str],
    page: int,
    page_size: int
) -> Dict[str, Any]:
    """
    Derive the filtered, paginated view of a collection.
    Pure function - the same inputs always give the same view.

    Args:
        records: Full collection as fetched from the backend
        extractors: One extractor per searchable column
        query: Free-text query, empty for no filtering
        page: Requested page number (clamped)
        page_size: Rows per page

    Returns:
        Dictionary containing the view data
    """
    filtered = filter_records(records, extractors, query)
    pages = total_pages(len(filtered), page_size)
    current = clamp_page(page, pages)
    start_index = (current - 1) * page_size

    return {
        'query': query or "",
        'filtered': filtered,
        'filtered_count': len(filtered),
        'total_count': len(records),
        'total_pages': pages,
        'page': current,
        'page_size': page_size,
        'start_index': start_index,
        'rows': filtered[start_index:start_index + page_size],
        'is_empty': len(filtered) == 0,
        'has_previous': current > 1,
        'has_next': current < pages,
    }


def initial_list_state() -> Dict[str, Any]:
    """Query and page for a freshly mounted list screen."""
    return {'query': "", 'page': 1}


def change_query(state: Dict[str, Any], query: str) -> Dict[str, Any]:
    """
    Apply a new search query.
    Changing the query always returns to page 1.
    """
    new_state = state.copy()
    new_state['query'] = query
    new_state['page'] = 1
    return new_state


def change_page(state: Dict[str, Any], page: int, pages: int) -> Dict[str, Any]:
    """
    Move to another page; out-of-range requests leave the state unchanged.
    """
    if page < 1 or page > pages:
        return state
    new_state = state.copy()
    new_state['page'] = page
    return new_state


def table_key(prefix: str, view: Mapping[str, Any]) -> str:
    """
    Widget key for the table showing a view.

    A row selection is an index into the rows it was made on, so the key
    is derived from the records on the page. A selection never carries
    over to a different set of rows.
    """
    ids = "\x1f".join(_as_text(record.get('_id', record.get(ROW_NUMBER))) for record in view['rows'])
    digest = zlib.crc32(ids.encode('utf-8'))
    return f"{prefix}:table:{view['page']}:{digest:08x}:{view['query']}"


def to_frame(view: Dict[str, Any], columns: Mapping[str, Extractor]) -> pd.DataFrame:
    """
    Build the table shown for the current page.

    Args:
        view: View returned by build_list_view
        columns: Mapping of column header to extractor

    Returns:
        DataFrame with a leading '#' column and one row per record on the page
    """
    rows = []
    for record in view['rows']:
        index = record[ROW_NUMBER] - 1
        row = {ROW_NUMBER: record[ROW_NUMBER]}
        for header, extract in columns.items():
            value = extract(record, index)
            row[header] = "-" if value is None or value == "" else value
        rows.append(row)
    return pd.DataFrame(rows, columns=[ROW_NUMBER, *columns.keys()])
