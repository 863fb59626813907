"""Searchable, paginated record tables."""
import streamlit as st
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.listing import (
    NO_RECORDS_MESSAGE,
    Extractor,
    build_list_view,
    change_page,
    change_query,
    initial_list_state,
    table_key,
    to_frame,
)


def render_record_table(
    key: str,
    records: Sequence[Mapping[str, Any]],
    search: Sequence[Extractor],
    columns: Mapping[str, Extractor],
    page_size: int,
    placeholder: str = "Search..."
) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Render a search box, the current page of records and pager buttons.

    Args:
        key: Widget key prefix, unique per table
        records: Full collection held by the page
        search: Searchable column extractors
        columns: Table header to extractor
        page_size: Rows per page

    Returns:
        (list view, selected record or None)
    """
    state_key = f"{key}:list"
    state = st.session_state.get(state_key, initial_list_state())

    query = st.text_input("Search", key=f"{key}:query", placeholder=placeholder,
                          label_visibility="collapsed")
    if query != state['query']:
        state = change_query(state, query)

    view = build_list_view(records, search, state['query'], state['page'], page_size)
    state = {**state, 'page': view['page']}
    st.session_state[state_key] = state

    selected = None
    if view['is_empty']:
        st.info(NO_RECORDS_MESSAGE)
    else:
        event = st.dataframe(
            to_frame(view, columns),
            use_container_width=True,
            hide_index=True,
            on_select="rerun",
            selection_mode="single-row",
            key=table_key(key, view),
        )
        rows = event.selection.rows if event is not None else []
        if rows and rows[0] < len(view['rows']):
            selected = view['rows'][rows[0]]

    _render_pager(state_key, state, view)
    return view, selected


def _render_pager(state_key: str, state: Dict[str, Any], view: Dict[str, Any]):
    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if st.button("◀ Previous", key=f"{state_key}:prev", disabled=not view['has_previous']):
            st.session_state[state_key] = change_page(state, view['page'] - 1, view['total_pages'])
            st.rerun()

    with col2:
        first = view['start_index'] + 1 if not view['is_empty'] else 0
        last = view['start_index'] + len(view['rows'])
        st.caption(
            f"Page {view['page']} of {view['total_pages']} · "
            f"showing {first}-{last} of {view['filtered_count']}"
        )

    with col3:
        if st.button("Next ▶", key=f"{state_key}:next", disabled=not view['has_next']):
            st.session_state[state_key] = change_page(state, view['page'] + 1, view['total_pages'])
            st.rerun()


def render_summary_cards(counts: Dict[str, int]):
    """One metric per entry, laid out in a single row."""
    cols = st.columns(len(counts))
    for col, (label, value) in zip(cols, counts.items()):
        with col:
            st.metric(label, value)


def record_details(record: Mapping[str, Any], labels: Dict[str, str], exclude: List[str] = None):
    """Two-column read-only view of a fetched record."""
    exclude = exclude or []
    items = [(label, record.get(name)) for name, label in labels.items() if name not in exclude]
    col1, col2 = st.columns(2)
    for i, (label, value) in enumerate(items):
        with (col1 if i % 2 == 0 else col2):
            st.write(f"**{label}:** {value if value not in (None, '') else '-'}")
