"""
Test suite for core/listing.py.
Covers search filtering, pagination arithmetic and the table frame.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.listing import (
    NO_RECORDS_MESSAGE,
    ROW_NUMBER,
    build_list_view,
    change_page,
    change_query,
    clamp_page,
    field,
    filter_records,
    full_name,
    initial_list_state,
    row_number,
    table_key,
    to_frame,
    total_pages,
)


@pytest.fixture
def products():
    names = ["Solar Panel", "LED Lamp", "Inverter", "Battery Pack", "Solar Inverter",
             "Cable", "Junction Box", "Smart Meter", "Solar Charger", "Fuse", "Relay", "Switch"]
    return [
        {'_id': str(i), 'product_name': name, 'category': "Solar" if "Solar" in name else "Electrical",
         'price': 100 + i}
        for i, name in enumerate(names)
    ]


SEARCH = [row_number, field('product_name'), field('category'), field('price')]


class TestFilterRecords:
    """Test suite for free-text filtering"""

    def test_empty_query_keeps_everything(self, products):
        filtered = filter_records(products, SEARCH, "")
        assert [r['_id'] for r in filtered] == [p['_id'] for p in products]

    def test_case_insensitive_substring(self, products):
        filtered = filter_records(products, SEARCH, "sOLaR")
        assert [r['product_name'] for r in filtered] == [
            "Solar Panel", "Solar Inverter", "Solar Charger"
        ]

    def test_preserves_original_order(self, products):
        filtered = filter_records(products, SEARCH, "inverter")
        assert [r['product_name'] for r in filtered] == ["Inverter", "Solar Inverter"]

    def test_query_is_stripped(self, products):
        assert len(filter_records(products, SEARCH, "  cable  ")) == 1

    def test_row_number_is_position_in_full_collection(self, products):
        filtered = filter_records(products, SEARCH, "solar charger")
        assert filtered[0][ROW_NUMBER] == 9

    def test_row_number_is_searchable(self, products):
        filtered = filter_records(products, [row_number], "12")
        assert [r['product_name'] for r in filtered] == ["Switch"]

    def test_numeric_fields_match_as_text(self, products):
        filtered = filter_records(products, SEARCH, "103")
        assert [r['product_name'] for r in filtered] == ["Battery Pack"]

    def test_missing_fields_do_not_match(self):
        records = [{'product_name': None}, {'product_name': "Fan"}]
        assert len(filter_records(records, [field('product_name')], "none")) == 0

    def test_source_records_are_not_modified(self, products):
        filter_records(products, SEARCH, "solar")
        assert ROW_NUMBER not in products[0]

    def test_record_field_cannot_override_row_number(self, products):
        products[2][ROW_NUMBER] = 99
        filtered = filter_records(products, SEARCH, "")
        assert filtered[2][ROW_NUMBER] == 3

    def test_full_name_extractor(self):
        record = {'first_name': "Asha", 'last_name': "Rao"}
        assert full_name(record, 0) == "Asha Rao"
        assert full_name({'first_name': "Asha"}, 0) == "Asha"


class TestPagination:
    """Test suite for page arithmetic"""

    @pytest.mark.parametrize("count,size,expected", [
        (0, 5, 1), (1, 5, 1), (5, 5, 1), (6, 5, 2), (12, 5, 3), (12, 6, 2),
    ])
    def test_total_pages(self, count, size, expected):
        assert total_pages(count, size) == expected

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError, match="page_size"):
            total_pages(10, 0)

    def test_clamp_page(self):
        assert clamp_page(0, 3) == 1
        assert clamp_page(-4, 3) == 1
        assert clamp_page(2, 3) == 2
        assert clamp_page(9, 3) == 3

    @pytest.mark.parametrize("query", ["", "solar", "e", "zzz"])
    @pytest.mark.parametrize("page_size", [1, 2, 5, 7, 20])
    def test_pages_cover_filtered_exactly_once(self, products, query, page_size):
        first = build_list_view(products, SEARCH, query, 1, page_size)
        seen = []
        for page in range(1, first['total_pages'] + 1):
            view = build_list_view(products, SEARCH, query, page, page_size)
            assert len(view['rows']) <= page_size
            seen.extend(row[ROW_NUMBER] for row in view['rows'])
        assert seen == [row[ROW_NUMBER] for row in first['filtered']]

    def test_no_match_yields_single_empty_page(self, products):
        view = build_list_view(products, SEARCH, "zzz", 4, 5)
        assert view['total_pages'] == 1
        assert view['page'] == 1
        assert view['rows'] == []
        assert view['is_empty'] is True

    def test_empty_collection(self):
        view = build_list_view([], SEARCH, "", 1, 5)
        assert view['total_pages'] == 1
        assert view['rows'] == []
        assert view['total_count'] == 0

    def test_page_is_clamped(self, products):
        view = build_list_view(products, SEARCH, "", 99, 5)
        assert view['page'] == 3
        assert view['start_index'] == 10
        assert [r['product_name'] for r in view['rows']] == ["Relay", "Switch"]
        assert view['has_next'] is False
        assert view['has_previous'] is True


class TestListState:
    """Test suite for query/page state transitions"""

    def test_initial_state(self):
        assert initial_list_state() == {'query': "", 'page': 1}

    @pytest.mark.parametrize("page", [1, 2, 3, 17])
    def test_changing_query_resets_page(self, page):
        state = {'query': "solar", 'page': page}
        assert change_query(state, "led")['page'] == 1

    def test_change_query_returns_new_state(self):
        state = {'query': "", 'page': 3}
        new_state = change_query(state, "led")
        assert state == {'query': "", 'page': 3}
        assert new_state['query'] == "led"

    def test_change_page_within_range(self):
        assert change_page({'query': "", 'page': 1}, 2, 3)['page'] == 2

    @pytest.mark.parametrize("page", [0, 4, -1])
    def test_change_page_out_of_range_is_ignored(self, page):
        state = {'query': "", 'page': 2}
        assert change_page(state, page, 3) == state


class TestTableKey:
    """Test suite for table selection keys"""

    def test_same_rows_same_key(self, products):
        view = build_list_view(products, SEARCH, "", 1, 5)
        assert table_key("products", view) == table_key("products", build_list_view(products, SEARCH, "", 1, 5))

    def test_next_page_gets_new_key(self, products):
        first = build_list_view(products, SEARCH, "", 1, 5)
        second = build_list_view(products, SEARCH, "", 2, 5)
        assert table_key("products", first) != table_key("products", second)

    def test_new_query_gets_new_key(self, products):
        before = build_list_view(products, SEARCH, "", 1, 5)
        after = build_list_view(products, SEARCH, "solar", 1, 5)
        assert table_key("products", before) != table_key("products", after)

    def test_deleted_record_gets_new_key(self, products):
        before = build_list_view(products, SEARCH, "", 1, 5)
        after = build_list_view(products[1:], SEARCH, "", 1, 5)
        assert table_key("products", before) != table_key("products", after)

    def test_prefix_is_kept(self, products):
        assert table_key("admin_products", build_list_view(products, SEARCH, "", 1, 5)).startswith("admin_products:table:")


class TestToFrame:
    """Test suite for the table frame"""

    def test_columns_and_placeholders(self, products):
        products[1]['category'] = None
        view = build_list_view(products, SEARCH, "", 1, 5)
        frame = to_frame(view, {"Product": field('product_name'), "Category": field('category')})

        assert list(frame.columns) == [ROW_NUMBER, "Product", "Category"]
        assert len(frame) == 5
        assert frame.iloc[0][ROW_NUMBER] == 1
        assert frame.iloc[1]["Category"] == "-"

    def test_empty_view_has_headers(self):
        view = build_list_view([], SEARCH, "", 1, 5)
        frame = to_frame(view, {"Product": field('product_name')})
        assert frame.empty
        assert list(frame.columns) == [ROW_NUMBER, "Product"]

    def test_no_records_message(self):
        assert NO_RECORDS_MESSAGE == "No records found"
