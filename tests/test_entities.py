"""
Test suite for the payload builders in core/entities.py.
"""

import sys
from datetime import date
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.entities import (
    company_edit_values,
    company_form_data,
    company_update_payload,
    exhibition_edit_values,
    exhibition_form_data,
    exhibition_update_payload,
    organiser_payload,
    product_form_data,
    product_update_payload,
    service_payload,
)


class TestPayloads:
    """Test suite for turning form values into request bodies"""

    def test_organiser_payload_keeps_password_verbatim(self):
        payload = organiser_payload({'first_name': " Asha ", 'password': " pass word1 "})
        assert payload['first_name'] == "Asha"
        assert payload['password'] == " pass word1 "
        assert payload['website'] == ""

    def test_exhibition_dates_are_iso(self):
        data = exhibition_form_data({
            'exhibition_name': "Expo",
            'starting_date': date(2025, 6, 1),
            'ending_date': "2025-06-03",
        })
        assert data['starting_date'] == "2025-06-01"
        assert data['ending_date'] == "2025-06-03"
        assert data['exhibition_name'] == "Expo"

    def test_exhibition_edit_values_trim_timestamps(self):
        values = exhibition_edit_values({
            'exhibition_name': "Expo",
            'starting_date': "2025-06-01T00:00:00.000Z",
            'ending_date': None,
        })
        assert values['starting_date'] == "2025-06-01"
        assert values['ending_date'] == ""

    def test_exhibition_added_by_is_immutable(self):
        original = {'addedBy': "organiser-1", 'exhibition_name': "Old"}
        payload = exhibition_update_payload(original, {'exhibition_name': "New", 'addedBy': "intruder"})
        assert payload['addedBy'] == "organiser-1"
        assert payload['exhibition_name'] == "New"

    def test_company_form_data_owner(self):
        data = company_form_data({'company_name': "Acme"}, "exhibition-1")
        assert data['createdBy'] == "exhibition-1"

    def test_company_update_numbers(self):
        original = {'createdBy': "exhibition-1"}
        values = company_edit_values({'company_name': "Acme", 'company_phone_number': 9876543210,
                                      'pincode': "411001", 'createdBy': "other"})
        payload = company_update_payload(original, values)
        assert payload['company_phone_number'] == 9876543210
        assert payload['pincode'] == 411001
        assert payload['createdBy'] == "exhibition-1"

    def test_product_form_data(self):
        data = product_form_data({'product_name': "Lamp", 'price': "10"}, "company-1", "exhibition-1")
        assert data['createdBy'] == "company-1"
        assert data['exhibitionid'] == "exhibition-1"
        assert data['price'] == "10"

    def test_product_update_price(self):
        original = {'createdBy': "company-1", 'exhibitionid': "exhibition-1"}
        assert product_update_payload(original, {'price': "19.5"})['price'] == 19.5
        assert product_update_payload(original, {'price': ""})['price'] is None

    def test_service_payload(self):
        payload = service_payload({'full_name': "Ravi", 'mobile_number': 9876543210})
        assert payload['mobile_number'] == "9876543210"
        assert set(payload) == {'full_name', 'service_name', 'country', 'state', 'city',
                                'address', 'mobile_number'}
