"""
Test suite for core/validation.py and the entity rule sets in core/entities.py.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.entities import (
    company_validator,
    exhibition_validator,
    organiser_validator,
    product_validator,
    service_validator,
)
from core.validation import (
    EMAIL_PATTERN,
    FieldRule,
    FormValidator,
    PairRule,
    as_text,
    digits_only,
    end_not_before_start,
    parse_date,
)


@pytest.fixture
def organiser():
    return {
        'first_name': "Asha",
        'last_name': "Rao",
        'email': "asha@example.com",
        'password': "abcdefg1",
        'company_name': "Rao Events",
        'designation': "organiser",
        'website': "https://raoevents.in",
        'mobile_number': "9876543210",
        'country': "IN",
        'state': "MH",
        'city': "Pune",
        'address': "12 FC Road",
    }


class TestHelpers:
    """Test suite for value helpers"""

    def test_as_text(self):
        assert as_text(None) == ""
        assert as_text("  x ") == "x"
        assert as_text(42) == "42"
        assert as_text(date(2025, 6, 1)) == "2025-06-01"

    def test_digits_only(self):
        assert digits_only("98-765 43210") == "9876543210"
        assert digits_only("12345678901", 10) == "1234567890"

    def test_parse_date(self):
        assert parse_date("2025-06-10") == date(2025, 6, 10)
        assert parse_date("2025-06-10T00:00:00.000Z") == date(2025, 6, 10)
        assert parse_date("") is None
        assert parse_date("June") is None

    def test_end_not_before_start(self):
        assert end_not_before_start("2025-06-01", "2025-06-01")
        assert end_not_before_start("2025-06-01", "2025-06-10")
        assert not end_not_before_start("2025-06-10", "2025-06-01")


class TestFieldRule:
    """Test suite for single-field rules"""

    def test_required(self):
        rule = FieldRule('venue', 'Venue', required=True)
        assert rule.check("") == "Venue is required."
        assert rule.check("   ") == "Venue is required."
        assert rule.check("Hall A") is None

    def test_optional_blank_is_valid(self):
        rule = FieldRule('website', 'Website', pattern=r'^https?://')
        assert rule.check("") is None
        assert rule.check("ftp://x") is not None

    def test_exact_digits(self):
        rule = FieldRule('pincode', 'Pincode', required=True, exact_digits=6)
        assert rule.check("411001") is None
        assert rule.check("41100") == "Pincode must be 6 digits."
        assert rule.check("4110011") == "Pincode must be 6 digits."
        assert rule.check("41100a") == "Pincode must be 6 digits."

    def test_min_length(self):
        rule = FieldRule('code', 'Code', min_length=3)
        assert rule.check("ab") == "Code must be at least 3 characters."
        assert rule.check("abc") is None

    def test_unstripped_rule_checks_raw_value(self):
        rule = FieldRule('password', 'Password', required=True, pattern=r'^\S+$', strip=False)
        assert rule.check(" secret ") is not None
        assert rule.check("secret") is None
        assert rule.check(None) == "Password is required."
        assert rule.check("") == "Password is required."

    def test_pattern(self):
        rule = FieldRule('email', 'Email', pattern=EMAIL_PATTERN, pattern_message="Invalid email.")
        assert rule.check("a@b.co") is None
        assert rule.check("a@b") == "Invalid email."


class TestFormValidator:
    """Test suite for form-level validation and touched tracking"""

    def make_validator(self):
        return FormValidator(
            [
                FieldRule('name', 'Name', required=True),
                FieldRule('start', 'Start', required=True),
                FieldRule('end', 'End', required=True),
            ],
            [PairRule('start', 'end', end_not_before_start, "End before start.")],
        )

    def test_valid_fields_are_absent(self):
        errors = self.make_validator().validate({'name': "x", 'start': "2025-01-01", 'end': ""})
        assert errors == {'end': "End is required."}

    def test_pair_rule_reports_on_target(self):
        errors = self.make_validator().validate(
            {'name': "x", 'start': "2025-01-02", 'end': "2025-01-01"}
        )
        assert errors == {'end': "End before start."}

    def test_errors_hidden_until_touched(self):
        validator = self.make_validator()
        errors = validator.validate({})
        assert validator.visible_errors(errors) == {}
        validator.touch('name')
        assert validator.visible_errors(errors) == {'name': "Name is required."}

    def test_submit_touches_everything(self):
        validator = self.make_validator()
        errors = validator.submit({})
        assert set(validator.visible_errors(errors)) == {'name', 'start', 'end'}

    def test_reset(self):
        validator = self.make_validator()
        validator.touch_all()
        validator.reset()
        assert validator.touched == set()

    def test_rule_for_unknown_field(self):
        with pytest.raises(KeyError):
            self.make_validator().rule_for('missing')


class TestOrganiserRules:
    """Test suite for the signup rule set"""

    def test_valid_signup(self, organiser):
        assert organiser_validator().validate(organiser) == {}

    @pytest.mark.parametrize("password,valid", [
        ("abcdefg1", True),
        ("abcdefg", False),
        ("1234567", False),
        ("abcdefgh", False),
        ("12345678", False),
        ("abc1", False),
        ("P@ssw0rd!", True),
        ("  abcdefg1  ", False),
        (" abcdefg1", False),
    ])
    def test_password(self, organiser, password, valid):
        organiser['password'] = password
        errors = organiser_validator().validate(organiser)
        assert ('password' not in errors) is valid

    @pytest.mark.parametrize("mobile", ["", "98765432", "987654321", "98765432100", "98765abcde"])
    def test_mobile_must_be_ten_digits(self, organiser, mobile):
        organiser['mobile_number'] = mobile
        assert 'mobile_number' in organiser_validator().validate(organiser)

    def test_mobile_message(self, organiser):
        organiser['mobile_number'] = "98765432"
        errors = organiser_validator().validate(organiser)
        assert errors == {'mobile_number': "Mobile number must be 10 digits."}

    def test_optional_fields(self, organiser):
        organiser.update(company_name="", designation="", website="")
        assert organiser_validator().validate(organiser) == {}

    def test_website_needs_scheme(self, organiser):
        organiser['website'] = "raoevents.in"
        assert 'website' in organiser_validator().validate(organiser)

    @pytest.mark.parametrize("website", ["HTTPS://raoevents.in", "Http://raoevents.in/about"])
    def test_website_scheme_is_case_insensitive(self, organiser, website):
        organiser['website'] = website
        assert organiser_validator().validate(organiser) == {}

    def test_unknown_designation(self, organiser):
        organiser['designation'] = "visitor"
        assert 'designation' in organiser_validator().validate(organiser)


class TestEntityRules:
    """Test suite for exhibition, company, product and service rule sets"""

    def test_exhibition_end_before_start(self):
        values = {
            'exhibition_name': "Expo", 'category': "Tech", 'venue': "Hall",
            'exhibition_address': "Mumbai", 'email': "expo@example.com",
            'starting_date': "2025-06-10", 'ending_date': "2025-06-01",
            'about_exhibition': "About",
        }
        errors = exhibition_validator().validate(values)
        assert errors == {'ending_date': "End date must be same or after start date."}

    def test_exhibition_same_day(self):
        values = {
            'exhibition_name': "Expo", 'category': "Tech", 'venue': "Hall",
            'exhibition_address': "Mumbai", 'email': "expo@example.com",
            'starting_date': date(2025, 6, 1), 'ending_date': date(2025, 6, 1),
            'about_exhibition': "About",
        }
        assert exhibition_validator().validate(values) == {}

    @pytest.mark.parametrize("pincode", ["41100", "4110011", ""])
    def test_company_pincode(self, pincode):
        errors = company_validator().validate({'pincode': pincode})
        assert 'pincode' in errors

    def test_company_requires_owner(self):
        errors = company_validator().validate({})
        assert errors['createdBy'] == "The owning exhibition is missing."
        assert errors['company_name'] == "Company name is required."

    @pytest.mark.parametrize("price,valid", [("199", True), ("19.99", True), ("", True),
                                              ("free", False), ("-5", False)])
    def test_product_price(self, price, valid):
        values = {'product_name': "Lamp", 'category': "Lighting", 'details': "LED", 'price': price}
        assert ('price' not in product_validator().validate(values)) is valid

    def test_service_offering_must_be_known(self):
        values = {
            'full_name': "Ravi", 'service_name': "Catering", 'country': "IN", 'state': "MH",
            'city': "Pune", 'address': "Kothrud", 'mobile_number': "9876543210",
        }
        assert set(service_validator().validate(values)) == {'service_name'}
        values['service_name'] = "LED / TV Rental"
        assert service_validator().validate(values) == {}
