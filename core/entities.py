"""
Entity definitions shared by the list screens and the create/edit forms.

One canonical rule set per entity, the searchable columns and table
columns of each list screen, and the payload builders that turn form
values into backend requests.
"""

import re
import logging
from typing import Any, Dict, Mapping, Optional

from core.listing import field, full_name, row_number
from core.validation import (
    DATE_PATTERN,
    EMAIL_PATTERN,
    PASSWORD_PATTERN,
    PRICE_PATTERN,
    URL_PATTERN,
    FieldRule,
    FormValidator,
    PairRule,
    as_text,
    end_not_before_start,
    parse_date,
)

logger = logging.getLogger(__name__)

URL_MESSAGE = "Enter a valid URL (include http/https)."

DESIGNATIONS = {
    'organiser': 'Organiser',
    'exhibition_service': 'Exhibition Service',
}

SERVICE_OFFERINGS = [
    "Printing",
    "Furniture Rental",
    "LED / TV Rental",
    "Fabrication",
    "Protocol Staff",
    "Catalog Printing",
    "Corporate Gifting",
]


def _one_of(options) -> str:
    return '^(' + '|'.join(re.escape(option) for option in options) + ')$'


# Organiser (signup)

def organiser_validator() -> FormValidator:
    return FormValidator([
        FieldRule('first_name', 'First name', required=True),
        FieldRule('last_name', 'Last name', required=True),
        FieldRule('email', 'Email', required=True, pattern=EMAIL_PATTERN,
                  pattern_message="Invalid email address."),
        FieldRule('password', 'Password', required=True, pattern=PASSWORD_PATTERN,
                  pattern_message="Password must be 8+ characters with letters and numbers.", strip=False),
        FieldRule('company_name', 'Company name'),
        FieldRule('designation', 'Designation', pattern=_one_of(DESIGNATIONS),
                  pattern_message="Select a designation from the list."),
        FieldRule('website', 'Website', pattern=URL_PATTERN, pattern_message=URL_MESSAGE),
        FieldRule('mobile_number', 'Mobile number', required=True, exact_digits=10),
        FieldRule('country', 'Country', required=True),
        FieldRule('state', 'State', required=True),
        FieldRule('city', 'City', required=True),
        FieldRule('address', 'Address', required=True),
    ])


ORGANISER_FIELDS = [
    'first_name', 'last_name', 'email', 'password', 'company_name', 'designation',
    'website', 'mobile_number', 'country', 'state', 'city', 'address',
]


def organiser_payload(values: Mapping[str, Any]) -> Dict[str, str]:
    """JSON body for POST /api/signup."""
    payload = {name: as_text(values.get(name)) for name in ORGANISER_FIELDS}
    payload['password'] = "" if values.get('password') is None else str(values['password'])
    return payload


# Exhibition

EXHIBITION_TEXT_FIELDS = [
    'exhibition_name', 'category', 'venue', 'exhibition_address', 'email',
    'about_exhibition', 'speakers', 'session', 'sponsor', 'partners', 'Support',
    'privacy_policy', 'terms_of_service',
]


def exhibition_validator() -> FormValidator:
    return FormValidator(
        [
            FieldRule('exhibition_name', 'Exhibition name', required=True),
            FieldRule('category', 'Category', required=True),
            FieldRule('venue', 'Venue', required=True),
            FieldRule('exhibition_address', 'Address', required=True),
            FieldRule('email', 'Contact email', required=True, pattern=EMAIL_PATTERN,
                      pattern_message="Enter a valid email address."),
            FieldRule('starting_date', 'Start date', required=True, pattern=DATE_PATTERN,
                      pattern_message="Enter the start date as YYYY-MM-DD."),
            FieldRule('ending_date', 'End date', required=True, pattern=DATE_PATTERN,
                      pattern_message="Enter the end date as YYYY-MM-DD."),
            FieldRule('about_exhibition', 'Description', required=True),
            FieldRule('privacy_policy', 'Privacy policy', pattern=URL_PATTERN, pattern_message=URL_MESSAGE),
            FieldRule('terms_of_service', 'Terms of service', pattern=URL_PATTERN, pattern_message=URL_MESSAGE),
        ],
        [
            PairRule('starting_date', 'ending_date', end_not_before_start,
                     "End date must be same or after start date."),
        ],
    )


def exhibition_form_data(values: Mapping[str, Any]) -> Dict[str, str]:
    """Form fields for POST /api/exhibition."""
    data = {name: as_text(values.get(name)) for name in EXHIBITION_TEXT_FIELDS}
    for name in ('starting_date', 'ending_date'):
        parsed = parse_date(values.get(name))
        data[name] = parsed.isoformat() if parsed else as_text(values.get(name))
    return data


EXHIBITION_EDIT_FIELDS = EXHIBITION_TEXT_FIELDS + ['starting_date', 'ending_date', 'exhibtion_url', 'layout_url']


def exhibition_edit_values(record: Mapping[str, Any]) -> Dict[str, str]:
    """Pre-fill the edit form from a fetched exhibition; dates trimmed to YYYY-MM-DD."""
    values = {name: as_text(record.get(name)) for name in EXHIBITION_EDIT_FIELDS}
    for name in ('starting_date', 'ending_date'):
        values[name] = values[name][:10]
    return values


def exhibition_update_payload(original: Mapping[str, Any], values: Mapping[str, Any]) -> Dict[str, str]:
    """
    JSON body for PUT /api/admin/updateexhibitions/{id}.

    addedBy is always taken from the stored record; it cannot be edited.
    """
    payload = {name: as_text(values.get(name)) for name in EXHIBITION_EDIT_FIELDS}
    payload.update(exhibition_form_data(values))
    payload['addedBy'] = as_text(original.get('addedBy'))
    return payload


# Company

COMPANY_FIELDS = [
    'company_name', 'company_email', 'company_nature', 'company_phone_number',
    'company_address', 'pincode', 'about_company', 'company_website', 'stall_no', 'hall_no',
]


def company_validator() -> FormValidator:
    return FormValidator([
        FieldRule('company_name', 'Company name', required=True),
        FieldRule('company_email', 'Email', required=True, pattern=EMAIL_PATTERN,
                  pattern_message="Invalid email."),
        FieldRule('company_nature', 'Nature of business', required=True),
        FieldRule('company_phone_number', 'Phone number', required=True, exact_digits=10),
        FieldRule('company_address', 'Address', required=True),
        FieldRule('pincode', 'Pincode', required=True, exact_digits=6),
        FieldRule('about_company', 'About company', required=True),
        FieldRule('company_website', 'Website', pattern=URL_PATTERN, pattern_message=URL_MESSAGE),
        FieldRule('stall_no', 'Stall number', required=True),
        FieldRule('hall_no', 'Hall number', required=True),
        FieldRule('createdBy', 'Exhibition', required=True,
                  required_message="The owning exhibition is missing."),
    ])


def company_form_data(values: Mapping[str, Any], created_by: Optional[str]) -> Dict[str, str]:
    """Form fields for POST /api/company."""
    data = {name: as_text(values.get(name)) for name in COMPANY_FIELDS}
    data['createdBy'] = as_text(created_by)
    return data


COMPANY_EDIT_FIELDS = [
    'company_name', 'company_email', 'company_nature', 'company_phone_number',
    'company_address', 'pincode', 'about_company', 'company_url', 'createdBy',
]


def company_edit_validator() -> FormValidator:
    return FormValidator([
        FieldRule('company_name', 'Company name', required=True),
        FieldRule('company_email', 'Email', required=True, pattern=EMAIL_PATTERN,
                  pattern_message="Invalid email."),
        FieldRule('company_phone_number', 'Phone number', required=True, exact_digits=10),
        FieldRule('pincode', 'Pincode', required=True, exact_digits=6),
        FieldRule('company_url', 'Website', pattern=URL_PATTERN, pattern_message=URL_MESSAGE),
    ])


def company_edit_values(record: Mapping[str, Any]) -> Dict[str, str]:
    return {name: as_text(record.get(name)) for name in COMPANY_EDIT_FIELDS}


def company_update_payload(original: Mapping[str, Any], values: Mapping[str, Any]) -> Dict[str, Any]:
    """JSON body for PUT /api/admin/updatecompany/{id}; phone and pincode sent as numbers."""
    payload: Dict[str, Any] = {name: as_text(values.get(name)) for name in COMPANY_EDIT_FIELDS}
    payload['createdBy'] = as_text(original.get('createdBy'))
    for name in ('company_phone_number', 'pincode'):
        payload[name] = int(payload[name]) if payload[name].isdigit() else payload[name]
    return payload


# Product

PRODUCT_FIELDS = ['product_name', 'price', 'category', 'details', 'product_url', 'product_video_url']


def product_validator() -> FormValidator:
    return FormValidator([
        FieldRule('product_name', 'Product name', required=True),
        FieldRule('category', 'Category', required=True),
        FieldRule('details', 'Details', required=True),
        FieldRule('price', 'Price', pattern=PRICE_PATTERN, pattern_message="Price must be a number."),
        FieldRule('product_url', 'Product URL', pattern=URL_PATTERN, pattern_message=URL_MESSAGE),
        FieldRule('product_video_url', 'Video URL', pattern=URL_PATTERN, pattern_message=URL_MESSAGE),
    ])


def product_form_data(values: Mapping[str, Any], created_by: Optional[str],
                      exhibition_id: Optional[str]) -> Dict[str, str]:
    """Form fields for POST /api/product."""
    data = {name: as_text(values.get(name)) for name in PRODUCT_FIELDS}
    data['createdBy'] = as_text(created_by)
    data['exhibitionid'] = as_text(exhibition_id)
    return data


def product_edit_values(record: Mapping[str, Any]) -> Dict[str, str]:
    return {name: as_text(record.get(name)) for name in PRODUCT_FIELDS}


def product_update_payload(original: Mapping[str, Any], values: Mapping[str, Any]) -> Dict[str, Any]:
    """JSON body for PUT /api/admin/updateproduct/{id}; price sent as a number."""
    payload: Dict[str, Any] = {name: as_text(values.get(name)) for name in PRODUCT_FIELDS}
    payload['createdBy'] = as_text(original.get('createdBy'))
    payload['exhibitionid'] = as_text(original.get('exhibitionid'))
    payload['price'] = float(payload['price']) if payload['price'] else None
    return payload


# Service

SERVICE_FIELDS = ['full_name', 'service_name', 'country', 'state', 'city', 'address', 'mobile_number']


def service_validator() -> FormValidator:
    return FormValidator([
        FieldRule('full_name', 'Full name', required=True),
        FieldRule('service_name', 'Service', required=True, pattern=_one_of(SERVICE_OFFERINGS),
                  pattern_message="Select a service from the list."),
        FieldRule('country', 'Country', required=True),
        FieldRule('state', 'State', required=True),
        FieldRule('city', 'City', required=True),
        FieldRule('address', 'Address', required=True),
        FieldRule('mobile_number', 'Mobile number', required=True, exact_digits=10),
    ])


def service_payload(values: Mapping[str, Any]) -> Dict[str, str]:
    """JSON body for POST /api/add/service."""
    return {name: as_text(values.get(name)) for name in SERVICE_FIELDS}


# List screens: searchable columns and table columns

ORGANISER_SEARCH = [
    field('first_name'), field('last_name'), field('email'),
    field('mobile_number'), field('company_name'), field('designation'),
]
ORGANISER_COLUMNS = {
    "Full Name": full_name,
    "E-mail": field('email'),
    "Phone": field('mobile_number'),
    "Company": field('company_name'),
    "Designation": field('designation'),
}

EXHIBITION_SEARCH = [
    field('exhibition_name'), field('category'), field('addedBy'), field('exhibition_address'),
]
EXHIBITION_COLUMNS = {
    "Exhibition By": field('addedBy'),
    "Exhibition Name": field('exhibition_name'),
    "Address": field('exhibition_address'),
    "Category": field('category'),
}

COMPANY_SEARCH = [
    row_number, field('company_name'), field('company_email'), field('company_phone_number'),
]
COMPANY_COLUMNS = {
    "Company": field('company_name'),
    "E-mail": field('company_email'),
    "Phone": field('company_phone_number'),
    "Stall": field('stall_no'),
    "Hall": field('hall_no'),
}

PRODUCT_SEARCH = [row_number, field('product_name'), field('category'), field('price')]
PRODUCT_COLUMNS = {
    "Product": field('product_name'),
    "Category": field('category'),
    "Price": field('price'),
}

SERVICE_SEARCH = [
    field('full_name'), field('service_name'), field('country'),
    field('state'), field('city'), field('mobile_number'),
]
SERVICE_COLUMNS = {
    "Full Name": field('full_name'),
    "Service": field('service_name'),
    "Country": field('country'),
    "State": field('state'),
    "City": field('city'),
    "Address": field('address'),
    "Mobile": field('mobile_number'),
}
