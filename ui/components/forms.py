"""
Create/edit dialogs and the signup form.

Every dialog is driven by a PopupSubmission kept in session state under
the dialog's name, takes a single `on_close` callback, and keeps its widget
values under keys prefixed with that name.
"""
import logging
from typing import Any, Callable, Dict, MutableMapping, Optional, Sequence, Tuple

import streamlit as st

from api import ApiError
from config import get_upload_config
from core.entities import (
    DESIGNATIONS,
    SERVICE_OFFERINGS,
    company_edit_validator,
    company_edit_values,
    company_form_data,
    company_update_payload,
    company_validator,
    exhibition_edit_values,
    exhibition_form_data,
    exhibition_update_payload,
    exhibition_validator,
    organiser_payload,
    organiser_validator,
    product_edit_values,
    product_form_data,
    product_update_payload,
    product_validator,
    service_payload,
    service_validator,
)
from core.locations import LocationSelector
from core.submission import PopupState, PopupSubmission
from core.ui import (
    bulk_delete_prompt,
    cancel_bulk_delete,
    confirm_bulk_delete,
    handle_creation_error,
    handle_creation_success,
    handle_deletion_error,
    handle_deletion_success,
    handle_validation_error,
)
from core.uploads import UploadConfig, UploadSlot
from core.validation import as_text, digits_only, parse_date

from .session import flash, notify

logger = logging.getLogger(__name__)

DIALOG_NAMES = (
    "exhibition_form", "exhibition_edit",
    "company_form", "company_edit",
    "product_form", "product_edit",
    "service_form", "organiser_form",
)

# (field, label, kind) where kind is text | area | date | password | digits:N
FieldSpec = Tuple[str, str, str]

EXHIBITION_FORM = [
    ('exhibition_name', "Exhibition Name", 'text'),
    ('category', "Category", 'text'),
    ('venue', "Venue", 'text'),
    ('exhibition_address', "Address", 'text'),
    ('email', "Contact Email", 'text'),
    ('starting_date', "Start Date", 'date'),
    ('ending_date', "End Date", 'date'),
    ('about_exhibition', "About Exhibition", 'area'),
    ('speakers', "Speakers", 'area'),
    ('session', "Sessions", 'area'),
    ('sponsor', "Sponsors", 'area'),
    ('partners', "Partners", 'area'),
    ('Support', "Support", 'area'),
    ('privacy_policy', "Privacy Policy URL", 'text'),
    ('terms_of_service', "Terms of Service URL", 'text'),
]

EXHIBITION_EDIT_FORM = EXHIBITION_FORM + [
    ('exhibtion_url', "Image URL", 'text'),
    ('layout_url', "Layout URL", 'text'),
]

COMPANY_FORM = [
    ('company_name', "Company Name", 'text'),
    ('company_email', "Email", 'text'),
    ('company_nature', "Nature of Business", 'text'),
    ('company_phone_number', "Phone Number", 'digits:10'),
    ('company_address', "Address", 'text'),
    ('pincode', "Pincode", 'digits:6'),
    ('about_company', "About Company", 'area'),
    ('company_website', "Website", 'text'),
    ('stall_no', "Stall No.", 'text'),
    ('hall_no', "Hall No.", 'text'),
]

COMPANY_EDIT_FORM = [
    ('company_name', "Company Name", 'text'),
    ('company_email', "Email", 'text'),
    ('company_nature', "Nature of Business", 'text'),
    ('company_phone_number', "Phone Number", 'digits:10'),
    ('company_address', "Address", 'text'),
    ('pincode', "Pincode", 'digits:6'),
    ('about_company', "About Company", 'area'),
    ('company_url', "Website", 'text'),
]

PRODUCT_FORM = [
    ('product_name', "Product Name", 'text'),
    ('price', "Price", 'text'),
    ('category', "Category", 'text'),
    ('details', "Details", 'area'),
    ('product_url', "Product URL", 'text'),
    ('product_video_url', "Video URL", 'text'),
]

SIGNUP_FORM = [
    ('first_name', "First Name", 'text'),
    ('last_name', "Last Name", 'text'),
    ('email', "Email", 'text'),
    ('password', "Password", 'password'),
    ('company_name', "Company Name", 'text'),
    ('website', "Website", 'text'),
    ('mobile_number', "Mobile Number", 'digits:10'),
]


# Widget plumbing

def _key(name: str, field: str) -> str:
    return f"{name}.{field}"


def _submission(name: str, validator_factory: Callable, on_close: Callable[[], None]) -> PopupSubmission:
    key = f"{name}:submission"
    if key not in st.session_state:
        st.session_state[key] = PopupSubmission(name, validator_factory(), on_close=on_close)
    return st.session_state[key]


def reset_popup(name: str, state: Optional[MutableMapping[str, Any]] = None):
    """
    Forget a dialog's previous instance.

    A still-pending submission is unmounted so its response is dropped,
    and upload previews are released.
    """
    state = st.session_state if state is None else state
    submission = state.pop(f"{name}:submission", None)
    if submission is not None:
        submission.unmount()
    for key in list(state.keys()):
        if not str(key).startswith(f"{name}.") and not str(key).startswith(f"{name}:"):
            continue
        value = state.pop(key)
        if isinstance(value, UploadSlot):
            value.close()


def close_dialogs(state: Optional[MutableMapping[str, Any]] = None):
    """
    Unmount every dialog left over from an earlier run.

    Called at the top of each page run. Dialogs rerun as fragments, so a
    full run means any dialog still holding state was dismissed or
    navigated away from.
    """
    state = st.session_state if state is None else state
    for name in DIALOG_NAMES:
        reset_popup(name, state)


def _location(name: str, initial: Optional[Dict[str, str]] = None) -> LocationSelector:
    key = f"{name}:location"
    if key not in st.session_state:
        initial = initial or {}
        st.session_state[key] = LocationSelector(
            country=initial.get('country', ""),
            state=initial.get('state', ""),
            city=initial.get('city', ""),
        )
    return st.session_state[key]


def _values(name: str, specs: Sequence[FieldSpec], extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    values = {field: st.session_state.get(_key(name, field)) for field, _, _ in specs}
    location = st.session_state.get(f"{name}:location")
    if location is not None:
        values.update(location.as_form_values())
    for field in ('service_name', 'designation'):
        if _key(name, field) in st.session_state:
            values[field] = st.session_state[_key(name, field)]
    values.update(extra or {})
    return values


def _on_change(name: str, field: str, specs: Sequence[FieldSpec], kind: str, extra: Dict[str, Any]):
    if kind.startswith('digits:'):
        key = _key(name, field)
        st.session_state[key] = digits_only(st.session_state.get(key), int(kind.split(':')[1]))
    submission = st.session_state.get(f"{name}:submission")
    if submission is not None:
        submission.touch(field, _values(name, specs, extra))


def _field_error(submission: PopupSubmission, field: str):
    error = submission.visible_errors().get(field)
    if error:
        st.caption(f":red[{error}]")


def _render_fields(name: str, submission: PopupSubmission, specs: Sequence[FieldSpec],
                   extra: Optional[Dict[str, Any]] = None):
    extra = extra or {}
    col1, col2 = st.columns(2)
    short = [spec for spec in specs if spec[2] != 'area']
    long = [spec for spec in specs if spec[2] == 'area']

    for i, (field, label, kind) in enumerate(short):
        with (col1 if i % 2 == 0 else col2):
            _render_input(name, submission, specs, field, label, kind, extra)

    for field, label, kind in long:
        _render_input(name, submission, specs, field, label, kind, extra)


def _render_input(name, submission, specs, field, label, kind, extra):
    key = _key(name, field)
    st.session_state.setdefault(key, None if kind == 'date' else "")
    callback = dict(on_change=_on_change, args=(name, field, specs, kind, extra))
    if kind == 'date':
        st.date_input(label, key=key, format="YYYY-MM-DD", **callback)
    elif kind == 'area':
        st.text_area(label, key=key, **callback)
    elif kind == 'password':
        st.text_input(label, key=key, type="password", **callback)
    else:
        st.text_input(label, key=key, **callback)
    _field_error(submission, field)


def _render_choice(name: str, submission: PopupSubmission, specs: Sequence[FieldSpec],
                   field: str, label: str, options: Dict[str, str]):
    st.session_state.setdefault(_key(name, field), None)
    st.selectbox(
        label,
        options=list(options),
        format_func=options.get,
        placeholder=f"Select {label.lower()}",
        key=_key(name, field),
        on_change=_on_change,
        args=(name, field, specs, 'text', {}),
    )
    _field_error(submission, field)


def _on_location_change(name: str, level: str, specs: Sequence[FieldSpec]):
    selector = st.session_state[f"{name}:location"]
    value = st.session_state.get(_key(name, level))
    if level == 'country':
        selector.set_country(value)
        st.session_state[_key(name, 'state')] = None
        st.session_state[_key(name, 'city')] = None
    elif level == 'state':
        selector.set_state(value)
        st.session_state[_key(name, 'city')] = None
    else:
        selector.set_city(as_text(value))
    submission = st.session_state.get(f"{name}:submission")
    if submission is not None:
        submission.touch(level, _values(name, specs))


def _render_location(name: str, submission: PopupSubmission, specs: Sequence[FieldSpec],
                     initial: Optional[Dict[str, str]] = None):
    """Cascading country, state and city pickers backed by a LocationSelector."""
    selector = _location(name, initial)
    col1, col2, col3 = st.columns(3)

    for col, level, options, parent in (
        (col1, 'country', selector.country_options, True),
        (col2, 'state', selector.state_options, bool(selector.country)),
        (col3, 'city', selector.city_options, bool(selector.state)),
    ):
        labels = {option['value']: option['label'] for option in options}
        key = _key(name, level)
        st.session_state.setdefault(key, getattr(selector, level) or None)
        with col:
            if level == 'city' and selector.city_is_free_text:
                if st.session_state[key] is None:
                    st.session_state[key] = ""
                st.text_input("City", key=key, placeholder="Enter city",
                              on_change=_on_location_change, args=(name, level, specs))
            else:
                st.selectbox(
                    level.capitalize(),
                    options=list(labels),
                    format_func=labels.get,
                    placeholder=f"Select {level}",
                    disabled=not parent,
                    key=key,
                    on_change=_on_location_change,
                    args=(name, level, specs),
                )
            _field_error(submission, level)


def _upload_slot(name: str, field: str, label: str, kind: str) -> UploadSlot:
    """File input whose accepted file survives rejected re-selections."""
    key = f"{name}:slot:{field}"
    if key not in st.session_state:
        st.session_state[key] = UploadSlot(field, UploadConfig.from_config(get_upload_config(kind)))
    slot = st.session_state[key]

    uploaded = st.file_uploader(label, key=_key(name, field), help=slot.config.describe())
    slot.offer(uploaded)
    if slot.error:
        st.caption(f":red[{slot.error}]")
    if slot.preview is not None:
        st.image(str(slot.preview.path), width=160)
    elif slot.file is not None:
        st.caption(f"Selected: {slot.file.name}")
    return slot


def _files(slots: Sequence[UploadSlot]) -> Dict[str, Any]:
    return {slot.name: slot.as_multipart() for slot in slots}


def _prefill(name: str, values: Dict[str, Any], specs: Sequence[FieldSpec]):
    """Seed widget state from a fetched record, once per dialog instance."""
    if f"{name}:prefilled" in st.session_state:
        return
    for field, _, kind in specs:
        value = values.get(field, "")
        st.session_state[_key(name, field)] = parse_date(value) if kind == 'date' else value
    st.session_state[f"{name}:prefilled"] = True


def _fetch_record(name: str, fetch: Callable[[], Dict[str, Any]], label: str) -> Optional[Dict[str, Any]]:
    key = f"{name}:record"
    if key not in st.session_state:
        try:
            st.session_state[key] = fetch() or {}
        except ApiError as e:
            logger.error(f"Failed to load {label}: {e.message}")
            st.error(f"Failed to load {label}: {e.message}")
            return None
    return st.session_state[key]


def _show_outcome(name: str, entity: str):
    outcome = st.session_state.pop(f"{name}:outcome", None)
    if outcome is None:
        return
    if outcome['state'] == PopupState.REJECTED:
        notify(handle_validation_error(outcome['errors']))
    elif outcome['state'] == PopupState.FAILED:
        notify(handle_creation_error(entity, outcome['message']))


def _submit_button(name: str, submission: PopupSubmission, entity: str, label: str = "Submit") -> bool:
    _show_outcome(name, entity)
    return st.button(label, type="primary", disabled=submission.submit_disabled,
                     key=f"{name}:submit", use_container_width=True)


def _finish(name: str, outcome: Dict[str, Any], entity: str, title: Optional[str],
            slots: Sequence[UploadSlot] = ()):
    """Close on success, otherwise rerun the dialog to show what went wrong."""
    if outcome['state'] == PopupState.SUCCEEDED:
        for slot in slots:
            slot.close()
        flash(handle_creation_success(entity, title))
        reset_popup(name)
        st.rerun()
    st.session_state[f"{name}:outcome"] = outcome
    st.rerun(scope="fragment")


# Exhibition

@st.dialog("Add Exhibition", width="large")
def exhibition_dialog(client, on_close: Callable[[], None]):
    name = "exhibition_form"
    submission = _submission(name, exhibition_validator, on_close)

    _render_fields(name, submission, EXHIBITION_FORM)
    col1, col2 = st.columns(2)
    with col1:
        image = _upload_slot(name, 'exhibition_image', "Exhibition Image", 'images')
    with col2:
        layout = _upload_slot(name, 'layout', "Layout", 'layouts')

    if _submit_button(name, submission, "Exhibition"):
        values = _values(name, EXHIBITION_FORM)
        outcome = submission.submit(
            values,
            lambda: client.create_exhibition(exhibition_form_data(values), _files([image, layout])),
        )
        _finish(name, outcome, "Exhibition", as_text(values.get('exhibition_name')), [image, layout])


@st.dialog("Edit Exhibition", width="large")
def exhibition_edit_dialog(client, exhibition_id: str, on_close: Callable[[], None]):
    name = "exhibition_edit"
    record = _fetch_record(name, lambda: client.get_exhibition(exhibition_id), "exhibition")
    if record is None:
        return
    submission = _submission(name, exhibition_validator, on_close)
    _prefill(name, exhibition_edit_values(record), EXHIBITION_EDIT_FORM)

    st.caption(f"Added by: {record.get('addedBy') or '-'}")
    _render_fields(name, submission, EXHIBITION_EDIT_FORM)

    if _submit_button(name, submission, "Exhibition", "Update"):
        values = _values(name, EXHIBITION_EDIT_FORM)
        outcome = submission.submit(
            values,
            lambda: client.update_exhibition(exhibition_id, exhibition_update_payload(record, values)),
        )
        _finish(name, outcome, "Exhibition", as_text(values.get('exhibition_name')))


# Company

@st.dialog("Add Company", width="large")
def company_dialog(client, exhibition_id: str, on_close: Callable[[], None]):
    name = "company_form"
    submission = _submission(name, company_validator, on_close)
    extra = {'createdBy': exhibition_id}

    _render_fields(name, submission, COMPANY_FORM, extra)
    _field_error(submission, 'createdBy')
    col1, col2 = st.columns(2)
    with col1:
        brochure = _upload_slot(name, 'brochure', "Brochure", 'documents')
    with col2:
        image = _upload_slot(name, 'company_image_url', "Company Image", 'company_image')

    if _submit_button(name, submission, "Company"):
        values = _values(name, COMPANY_FORM, extra)
        outcome = submission.submit(
            values,
            lambda: client.create_company(company_form_data(values, exhibition_id), _files([brochure, image])),
        )
        _finish(name, outcome, "Company", as_text(values.get('company_name')), [brochure, image])


@st.dialog("Edit Company", width="large")
def company_edit_dialog(client, company_id: str, on_close: Callable[[], None]):
    name = "company_edit"
    record = _fetch_record(name, lambda: client.get_company(company_id), "company")
    if record is None:
        return
    submission = _submission(name, company_edit_validator, on_close)
    _prefill(name, company_edit_values(record), COMPANY_EDIT_FORM)

    _render_fields(name, submission, COMPANY_EDIT_FORM)

    if _submit_button(name, submission, "Company", "Update"):
        values = _values(name, COMPANY_EDIT_FORM)
        outcome = submission.submit(
            values,
            lambda: client.update_company(company_id, company_update_payload(record, values)),
        )
        _finish(name, outcome, "Company", as_text(values.get('company_name')))


# Product

@st.dialog("Add Product", width="large")
def product_dialog(client, company_id: str, exhibition_id: Optional[str], on_close: Callable[[], None]):
    name = "product_form"
    submission = _submission(name, product_validator, on_close)

    _render_fields(name, submission, PRODUCT_FORM)
    col1, col2 = st.columns(2)
    with col1:
        image = _upload_slot(name, 'image', "Product Image", 'images')
    with col2:
        video = _upload_slot(name, 'video', "Product Video", 'videos')

    if _submit_button(name, submission, "Product"):
        values = _values(name, PRODUCT_FORM)
        outcome = submission.submit(
            values,
            lambda: client.create_product(
                product_form_data(values, company_id, exhibition_id), _files([image, video])
            ),
        )
        _finish(name, outcome, "Product", as_text(values.get('product_name')), [image, video])


@st.dialog("Edit Product", width="large")
def product_edit_dialog(client, product_id: str, on_close: Callable[[], None]):
    name = "product_edit"
    record = _fetch_record(name, lambda: client.get_product(product_id), "product")
    if record is None:
        return
    submission = _submission(name, product_validator, on_close)
    _prefill(name, product_edit_values(record), PRODUCT_FORM)

    _render_fields(name, submission, PRODUCT_FORM)

    if _submit_button(name, submission, "Product", "Update"):
        values = _values(name, PRODUCT_FORM)
        outcome = submission.submit(
            values,
            lambda: client.update_product(product_id, product_update_payload(record, values)),
        )
        _finish(name, outcome, "Product", as_text(values.get('product_name')))


# Service

SERVICE_FORM = [
    ('full_name', "Full Name", 'text'),
    ('mobile_number', "Mobile Number", 'digits:10'),
    ('address', "Address", 'area'),
]


@st.dialog("Add Service", width="large")
def service_dialog(client, on_close: Callable[[], None]):
    name = "service_form"
    submission = _submission(name, service_validator, on_close)

    _render_choice(name, submission, SERVICE_FORM, 'service_name', "Service",
                   {offering: offering for offering in SERVICE_OFFERINGS})
    _render_location(name, submission, SERVICE_FORM)
    _render_fields(name, submission, SERVICE_FORM)

    if _submit_button(name, submission, "Service"):
        values = _values(name, SERVICE_FORM)
        outcome = submission.submit(values, lambda: client.create_service(service_payload(values)))
        _finish(name, outcome, "Service", as_text(values.get('service_name')))


# Signup

ORGANISER_SPECS = SIGNUP_FORM + [('address', "Address", 'area')]


def _render_organiser_fields(name: str, submission: PopupSubmission) -> Sequence[FieldSpec]:
    _render_fields(name, submission, SIGNUP_FORM)
    _render_choice(name, submission, ORGANISER_SPECS, 'designation', "Designation", DESIGNATIONS)
    _render_location(name, submission, ORGANISER_SPECS)
    _render_input(name, submission, ORGANISER_SPECS, 'address', "Address", 'area', {})
    return ORGANISER_SPECS


def render_signup_form(client, on_close: Callable[[], None]):
    """
    Inline organiser registration form.

    Uses the same submission lifecycle as the dialogs; `on_close` runs once
    the backend accepted the registration.
    """
    name = "signup_form"
    submission = _submission(name, organiser_validator, on_close)
    specs = _render_organiser_fields(name, submission)

    _show_outcome(name, "Organiser")

    if st.button("Sign Up", type="primary", disabled=submission.submit_disabled, use_container_width=True):
        values = _values(name, specs)
        outcome = submission.submit(values, lambda: client.create_organiser(organiser_payload(values)))
        if outcome['state'] == PopupState.SUCCEEDED:
            flash(handle_creation_success("Organiser", as_text(values.get('first_name'))))
            reset_popup(name)
            return
        st.session_state[f"{name}:outcome"] = outcome
        st.rerun()


@st.dialog("Add Organiser", width="large")
def organiser_dialog(client, on_close: Callable[[], None]):
    """Register an organiser on someone else's behalf; same form as signup."""
    name = "organiser_form"
    submission = _submission(name, organiser_validator, on_close)
    specs = _render_organiser_fields(name, submission)

    if _submit_button(name, submission, "Organiser"):
        values = _values(name, specs)
        outcome = submission.submit(values, lambda: client.create_organiser(organiser_payload(values)))
        _finish(name, outcome, "Organiser", as_text(values.get('first_name')))


# Bulk delete

@st.dialog("Confirm Delete")
def delete_all_dialog(entity: str, delete: Callable[[], Any], state_key: str, on_close: Callable[[], None]):
    """Second step of a bulk delete; nothing is deleted unless confirmed here."""
    st.warning(bulk_delete_prompt(entity))
    col1, col2 = st.columns(2)

    with col1:
        if st.button("Cancel", use_container_width=True):
            st.session_state[state_key] = cancel_bulk_delete(st.session_state[state_key])
            st.rerun()

    with col2:
        if st.button(f"Delete all {entity}", type="primary", use_container_width=True):
            state = st.session_state[state_key]
            if confirm_bulk_delete(state, entity):
                try:
                    delete()
                    logger.info(f"Deleted all {entity}")
                    flash(handle_deletion_success(entity, bulk=True))
                    on_close()
                except ApiError as e:
                    logger.error(f"Failed to delete all {entity}: {e.message}")
                    flash(handle_deletion_error(entity, e.message, bulk=True))
            st.session_state[state_key] = cancel_bulk_delete(state)
            st.rerun()


def delete_record(entity: str, delete: Callable[[], Any], on_deleted: Callable[[], None]):
    """Delete a single record and queue the outcome notification."""
    try:
        delete()
    except ApiError as e:
        logger.error(f"Failed to delete {entity}: {e.message}")
        flash(handle_deletion_error(entity, e.message))
        return
    logger.info(f"Deleted {entity}")
    flash(handle_deletion_success(entity))
    on_deleted()


def open_dialog(name: str, dialog: Callable, *args):
    """Reset a dialog's previous instance and open it."""
    reset_popup(name)
    dialog(*args)

