"""
Test suite for core/submission.py.
Covers the popup lifecycle end to end with a mocked HTTP session.
"""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from api import ApiClient, ApiError
from core.entities import exhibition_form_data, exhibition_validator, organiser_payload, organiser_validator
from core.submission import PopupState, PopupSubmission


def make_response(status=200, json_body=None):
    response = Mock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.content = b"{}" if json_body is not None else b""
    response.json.return_value = json_body
    response.text = ""
    return response


@pytest.fixture
def session():
    session = Mock()
    session.request.return_value = make_response(201, {'message': "created"})
    return session


@pytest.fixture
def client(session):
    return ApiClient("http://backend", session=session)


@pytest.fixture
def signup():
    return {
        'first_name': "Asha",
        'last_name': "Rao",
        'email': "asha@example.com",
        'password': "abcdefg1",
        'company_name': "",
        'designation': "organiser",
        'website': "",
        'mobile_number': "98765432",
        'country': "IN",
        'state': "MH",
        'city': "Pune",
        'address': "12 FC Road",
    }


class TestEndToEnd:
    """Scenarios driven through the submission and the API client"""

    def test_exhibition_end_before_start_sends_nothing(self, client, session):
        values = {
            'exhibition_name': "Tech Expo", 'category': "Technology", 'venue': "Hall 1",
            'exhibition_address': "BKC, Mumbai", 'email': "info@techexpo.in",
            'starting_date': "2025-06-10", 'ending_date': "2025-06-01",
            'about_exhibition': "Annual expo",
        }
        popup = PopupSubmission("exhibition_form", exhibition_validator())
        outcome = popup.submit(values, lambda: client.create_exhibition(exhibition_form_data(values)))

        assert outcome['state'] == PopupState.REJECTED
        assert 'ending_date' in outcome['errors']
        assert session.request.call_count == 0
        assert popup.state == PopupState.IDLE

    def test_signup_short_mobile_is_blocked(self, client, session, signup):
        popup = PopupSubmission("signup_form", organiser_validator())
        outcome = popup.submit(signup, lambda: client.create_organiser(organiser_payload(signup)))

        assert outcome['errors'] == {'mobile_number': "Mobile number must be 10 digits."}
        assert session.request.call_count == 0

    def test_signup_valid_posts_once(self, client, session, signup):
        signup['mobile_number'] = "9876543210"
        on_close = Mock()
        popup = PopupSubmission("signup_form", organiser_validator(), on_close=on_close)
        outcome = popup.submit(signup, lambda: client.create_organiser(organiser_payload(signup)))

        assert outcome['state'] == PopupState.SUCCEEDED
        assert outcome['errors'] == {}
        session.request.assert_called_once()
        args, kwargs = session.request.call_args
        assert args == ('POST', "http://backend/api/signup")
        assert kwargs['json']['mobile_number'] == "9876543210"
        assert popup.is_closed
        on_close.assert_called_once_with()


class TestPopupLifecycle:
    """Test suite for state transitions"""

    def valid_values(self):
        return {
            'exhibition_name': "Expo", 'category': "Tech", 'venue': "Hall",
            'exhibition_address': "Pune", 'email': "e@x.io",
            'starting_date': "2025-06-01", 'ending_date': "2025-06-02",
            'about_exhibition': "About",
        }

    def test_starts_idle(self):
        popup = PopupSubmission("p", exhibition_validator())
        assert popup.state == PopupState.IDLE
        assert not popup.submit_disabled

    def test_failure_is_recoverable(self):
        on_close = Mock()
        popup = PopupSubmission("p", exhibition_validator(), on_close=on_close)
        send = Mock(side_effect=ApiError("Server exploded", status_code=500))

        outcome = popup.submit(self.valid_values(), send)

        assert outcome['state'] == PopupState.FAILED
        assert outcome['message'] == "Server exploded"
        assert popup.state == PopupState.IDLE
        on_close.assert_not_called()

        send.side_effect = None
        send.return_value = {'_id': "1"}
        assert popup.submit(self.valid_values(), send)['state'] == PopupState.SUCCEEDED
        assert popup.result == {'_id': "1"}
        on_close.assert_called_once()

    def test_submit_disabled_while_in_flight(self):
        popup = PopupSubmission("p", exhibition_validator())
        inner = Mock()

        def send():
            assert popup.submit_disabled
            outcome = popup.submit(self.valid_values(), inner)
            assert outcome['state'] == PopupState.SUBMITTING
            return {}

        popup.submit(self.valid_values(), send)
        inner.assert_not_called()

    def test_closed_popup_ignores_submit(self):
        popup = PopupSubmission("p", exhibition_validator())
        popup.submit(self.valid_values(), lambda: {})
        send = Mock()
        outcome = popup.submit(self.valid_values(), send)
        assert outcome['state'] == PopupState.CLOSED
        send.assert_not_called()

    def test_response_after_unmount_is_dropped(self):
        on_close = Mock()
        popup = PopupSubmission("p", exhibition_validator(), on_close=on_close)

        def send():
            popup.unmount()
            return {}

        popup.submit(self.valid_values(), send)
        assert popup.result is None
        assert not popup.is_closed
        on_close.assert_not_called()

    def test_failure_after_unmount_is_dropped(self):
        popup = PopupSubmission("p", exhibition_validator())

        def send():
            popup.unmount()
            raise ApiError("late")

        popup.submit(self.valid_values(), send)
        assert popup.message is None

    def test_close_runs_callback_once(self):
        on_close = Mock()
        popup = PopupSubmission("p", exhibition_validator(), on_close=on_close)
        popup.close()
        popup.close()
        on_close.assert_called_once()

    def test_touch_shows_only_touched_errors(self):
        popup = PopupSubmission("p", exhibition_validator())
        assert popup.touch('venue', {}) == "Venue is required."
        assert set(popup.visible_errors()) == {'venue'}
