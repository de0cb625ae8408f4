"""Tests for the rule predicate catalog."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from fieldcheck.core.errors import ErrorCode
from fieldcheck.core.validation import rules
from fieldcheck.core.validation.rules import RuleKey


class TestRuleKey:
    """Test the closed rule catalog."""

    def test_values_are_table_keys(self):
        assert RuleKey.IN.value == "in"
        assert RuleKey.MAX_STRING.value == "max_string"
        assert RuleKey("email") is RuleKey.EMAIL

    def test_every_key_has_an_error_code(self):
        for key in RuleKey:
            assert isinstance(key.error_code, ErrorCode)

    @pytest.mark.parametrize(
        "key,code",
        [
            (RuleKey.REQUIRED, ErrorCode.E2001_REQUIRED_FIELD_MISSING),
            (RuleKey.EMAIL, ErrorCode.E2010_INVALID_EMAIL),
            (RuleKey.BETWEEN, ErrorCode.E2003_OUT_OF_RANGE),
            (RuleKey.AFTER, ErrorCode.E2012_INVALID_DATE),
            (RuleKey.PASSWORD_MIXED, ErrorCode.E2030_WEAK_PASSWORD),
            (RuleKey.DISTINCT, ErrorCode.E2005_CONSTRAINT_VIOLATION),
        ],
    )
    def test_error_code_mapping(self, key, code):
        assert key.error_code is code


class TestDeepEqual:
    """Test structural equality with strict types."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            (1, 1, True),
            (1, 1.0, False),
            (1, True, False),
            ("a", "a", True),
            ([1, [2, "x"]], [1, [2, "x"]], True),
            ([1, 2], (1, 2), False),
            ({"a": [1]}, {"a": [1]}, True),
            ({"a": 1}, {"a": 1.0}, False),
            (None, None, True),
        ],
    )
    def test_deep_equal(self, a, b, expected):
        assert rules.deep_equal(a, b) is expected


class TestPresence:
    """Test presence rules and the shared emptiness policy."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}, (), b"", False, 0, 0.0, Decimal("0")])
    def test_required_fails_for_empty(self, value):
        assert rules.required(value) is False

    @pytest.mark.parametrize("value", ["x", [0], {"a": None}, True, 1, -3.5, b"\x00", object()])
    def test_required_passes_for_non_empty(self, value):
        assert rules.required(value) is True

    def test_present_and_prohibited_are_complements(self):
        for value in (None, "", "x", 0, 5, [], [1]):
            assert rules.prohibited(value) is not rules.present(value)

    @pytest.mark.parametrize(
        "value,expected",
        [(None, False), ("  ", False), ([], False), (0, True), (False, True), ("a", True)],
    )
    def test_filled(self, value, expected):
        assert rules.filled(value) is expected

    @pytest.mark.parametrize("value", ["yes", "on", "1", "true", "TRUE", True, 1])
    def test_accepted(self, value):
        assert rules.accepted(value) is True

    @pytest.mark.parametrize("value", ["no", "maybe", "", None, 2, False])
    def test_not_accepted(self, value):
        assert rules.accepted(value) is False

    @pytest.mark.parametrize("value", ["no", "declined", " Declined ", "0", "FALSE", False])
    def test_declined(self, value):
        assert rules.declined(value) is True

    @pytest.mark.parametrize("value", ["yes", "nope", "off", None, 0, 5, True])
    def test_not_declined(self, value):
        assert rules.declined(value) is False


class TestConditionalPresence:
    """Conditional rules pass vacuously when the condition is false."""

    @pytest.mark.parametrize("value", [None, "", [], 0])
    def test_required_if_vacuous(self, value):
        assert rules.required_if(value, False) is True
        assert rules.required_if(value, "business", "personal") is True

    def test_required_if_triggered(self):
        assert rules.required_if("", True) is False
        assert rules.required_if("ACME", True) is True
        assert rules.required_if("", " Business ", "business") is False

    def test_condition_matches_form_strings(self):
        assert rules.condition_holds("true", True) is True
        assert rules.condition_holds("1", 1) is True
        assert rules.condition_holds("0", True) is False
        assert rules.condition_holds(1, True) is False

    def test_required_unless(self):
        assert rules.required_unless("", "guest", ["guest", "anonymous"]) is True
        assert rules.required_unless("", "member", ["guest"]) is False
        assert rules.required_unless("x", "member", ["guest"]) is True

    def test_prohibited_if(self):
        assert rules.prohibited_if("x", True) is False
        assert rules.prohibited_if("", True) is True
        assert rules.prohibited_if("x", False) is True

    def test_accepted_if_and_declined_if(self):
        assert rules.accepted_if("no", "pro", "pro") is False
        assert rules.accepted_if("no", "free", "pro") is True
        assert rules.declined_if("yes", "minor", "minor") is False
        assert rules.declined_if("declined", "minor", "minor") is True
        assert rules.declined_if("off", "minor", "minor") is False


class TestTypeAndFormat:
    """Test type and format rules."""

    def test_string_and_boolean(self):
        assert rules.string("") is True
        assert rules.string(b"x") is False
        assert rules.boolean(False) is True
        assert rules.boolean(0) is False

    @pytest.mark.parametrize("value", [0, -12, 10**20, "42", "-7", "+3"])
    def test_integer_passes(self, value):
        assert rules.integer(value) is True

    @pytest.mark.parametrize("value", [True, 1.0, "1.5", " 1", "1_000", "١٢", "", None])
    def test_integer_fails(self, value):
        assert rules.integer(value) is False

    @pytest.mark.parametrize("value", [1, -2.5, Decimal("3.1"), "0", "1e3", "-.5", "12."])
    def test_numeric_passes(self, value):
        assert rules.numeric(value) is True

    @pytest.mark.parametrize("value", [0, 0.0, True, "abc", "1,5", "", None, [1]])
    def test_numeric_fails(self, value):
        assert rules.numeric(value) is False

    def test_numeric_zero_passes_when_optional(self):
        assert rules.numeric(0, optional=True) is True
        assert rules.numeric("x", optional=True) is False

    def test_array(self):
        assert rules.array([]) is True
        assert rules.array((1,)) is True
        assert rules.array("abc") is False
        assert rules.array({"a": 1}) is False

    @pytest.mark.parametrize("value,expected", [('{"a": 1}', True), ("[]", True), ("null", True), ("{a:1}", False), ("", False), ({"a": 1}, False)])
    def test_json(self, value, expected):
        assert rules.json_(value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("user@example.com", True),
            ("first.last+tag@sub.example.co", True),
            ("user@localhost", False),
            ("user@@example.com", False),
            ("user@example.com\n", False),
            ("", False),
            (None, False),
        ],
    )
    def test_email(self, value, expected):
        assert rules.email(value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("https://example.com/path?q=1", True),
            ("mailto:someone@example.com", True),
            ("/relative/path", True),
            ("http://", False),
            ("example dot com", False),
            ("plain", False),
            (42, False),
        ],
    )
    def test_url(self, value, expected):
        assert rules.url(value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [("https://example.com", True), ("http://localhost:8000/x", True), ("ftp://example.com", False), ("/path", False)],
    )
    def test_active_url(self, value, expected):
        assert rules.active_url(value) is expected

    @pytest.mark.parametrize(
        "value,any_ip,v4,v6",
        [
            ("192.168.0.1", True, True, False),
            ("::1", True, False, True),
            ("2001:db8::8a2e:370:7334", True, False, True),
            ("::ffff:192.0.2.1", True, False, False),
            ("256.1.1.1", False, False, False),
            ("not-an-ip", False, False, False),
        ],
    )
    def test_ip_family(self, value, any_ip, v4, v6):
        assert rules.ip(value) is any_ip
        assert rules.ipv4(value) is v4
        assert rules.ipv6(value) is v6

    def test_uuid(self):
        assert rules.uuid(str(uuid4())) is True
        assert rules.uuid(uuid4()) is True
        assert rules.uuid("1234") is False
        assert rules.uuid(1234) is False

    @pytest.mark.parametrize("value,expected", [("Asia/Tehran", True), ("UTC", True), ("Mars/Olympus", False), ("", False), (3, False)])
    def test_timezone(self, value, expected):
        assert rules.timezone(value) is expected

    def test_regex_is_unanchored_search(self):
        assert rules.regex("order-123", r"\d+") is True
        assert rules.regex("order", r"\d+") is False
        assert rules.not_regex("order", r"\d+") is True

    def test_invalid_pattern_fails_both_ways(self):
        assert rules.regex("abc", "(") is False
        assert rules.not_regex("abc", "(") is False

    def test_starts_and_ends_with(self):
        assert rules.starts_with("+98912", ["+98", "0098"]) is True
        assert rules.starts_with("0912", ["+98"]) is False
        assert rules.ends_with("report.pdf", [".pdf", ".doc"]) is True
        assert rules.ends_with(None, [".pdf"]) is False


class TestCharacterClass:
    """Every character is checked; the empty string passes."""

    @pytest.mark.parametrize(
        "value,alpha,alpha_dash,alpha_num",
        [
            ("abc", True, True, True),
            ("abc123", False, True, True),
            ("abc-123", False, True, False),
            ("", True, True, True),
            ("héllo", False, False, False),
            ("a b", False, False, False),
            ("a_b", False, False, False),
        ],
    )
    def test_character_classes(self, value, alpha, alpha_dash, alpha_num):
        assert rules.alpha(value) is alpha
        assert rules.alpha_dash(value) is alpha_dash
        assert rules.alpha_num(value) is alpha_num

    def test_non_strings_fail(self):
        assert rules.alpha(123) is False
        assert rules.alpha_num(123) is False


class TestComparison:
    """Test comparison and membership rules."""

    def test_same_and_different(self):
        assert rules.same("secret", "secret") is True
        assert rules.same(1, 1.0) is False
        assert rules.different(1, True) is True
        assert rules.different([1], [1]) is False

    def test_confirmed_requires_strings(self):
        assert rules.confirmed("pw", "pw") is True
        assert rules.confirmed("pw", "PW") is False
        assert rules.confirmed(1, 1) is False

    @pytest.mark.parametrize(
        "value,expected",
        [([1, 2, 3], True), ([1, 2, 1], False), ([1, 1.0, True], True), ([], True), ([[1], [1]], False), ("aa", False)],
    )
    def test_distinct(self, value, expected):
        assert rules.distinct(value) is expected

    def test_membership(self):
        assert rules.in_("fa", ["en", "fa"]) is True
        assert rules.in_("de", ["en", "fa"]) is False
        assert rules.in_(1, [True]) is False
        assert rules.not_in("root", ["root", "admin"]) is False
        assert rules.not_in("alice", ["root", "admin"]) is True

    def test_not_in_empty_list_passes(self):
        assert rules.not_in("anything", []) is True

    def test_unique_and_exists(self):
        assert rules.unique("bob", ["alice", "carol"]) is True
        assert rules.unique("alice", ["alice", "carol"]) is False
        assert rules.exists(3, [1, 2, 3]) is True
        assert rules.in_array("x", []) is False


class TestRangeAndSize:
    """Test range and size rules."""

    def test_string_length_counts_characters(self):
        assert rules.min_string("سلام", 4) is True
        assert rules.max_string("سلام", 3) is False
        assert rules.min_string(1234, 2) is False

    def test_numeric_bounds(self):
        assert rules.min_numeric(5, 5) is True
        assert rules.min_numeric(4.9, 5) is False
        assert rules.max_numeric(Decimal("10"), 10) is True
        assert rules.max_numeric("3", 10) is False
        assert rules.max_numeric(True, 10) is False

    @pytest.mark.parametrize(
        "value,expected",
        [(5, True), (0, False), (10.5, False), ("abcd", True), ("a", False), ([1, 2, 3], True), (True, False), (None, False)],
    )
    def test_between(self, value, expected):
        assert rules.between(value, 2, 10) is expected

    @pytest.mark.parametrize(
        "value,count,expected",
        [(12345, 5, True), (-123, 3, True), ("09121234567", 11, True), ("12a4", 3, True), (1.5, 2, False), (True, 1, False)],
    )
    def test_digits(self, value, count, expected):
        assert rules.digits(value, count) is expected

    def test_digits_between(self):
        assert rules.digits_between(1234, 3, 5) is True
        assert rules.digits_between(12, 3, 5) is False
        assert rules.digits_between(None, 0, 5) is False


class TestNotANumber:
    """NaN values fail numeric rules instead of raising."""

    NANS = [Decimal("NaN"), Decimal("sNaN"), float("nan")]

    @pytest.mark.parametrize("value", NANS)
    def test_numeric_bounds_fail(self, value):
        assert rules.min_numeric(value, 10) is False
        assert rules.max_numeric(value, 10) is False

    @pytest.mark.parametrize("value", NANS)
    def test_numeric_fails(self, value):
        assert rules.numeric(value) is False
        assert rules.numeric(value, optional=True) is False

    @pytest.mark.parametrize("value", NANS)
    def test_between_fails(self, value):
        assert rules.between(value, 0, 10) is False

    @pytest.mark.parametrize("value", NANS)
    def test_nan_is_present(self, value):
        assert rules.required(value) is True
        assert rules.prohibited(value) is False

    def test_signaling_nan_equals_nothing(self):
        snan = Decimal("sNaN")
        assert rules.same(snan, snan) is False
        assert rules.in_(snan, [Decimal("1"), snan]) is False
        assert rules.not_in(snan, [snan]) is True
        assert rules.required_if("", snan, Decimal("1")) is True


class TestDate:
    """Test date parsing and comparison."""

    LAYOUT = "%Y-%m-%d"

    def test_date(self):
        assert rules.date_("2024-02-29", self.LAYOUT) is True
        assert rules.date_("2023-02-29", self.LAYOUT) is False
        assert rules.date_("29/02/2024", self.LAYOUT) is False
        assert rules.date_(date(2024, 1, 1), self.LAYOUT) is False

    def test_date_format(self):
        assert rules.date_format("29/02/2024", "%d/%m/%Y") is True
        assert rules.date_format("2024-02-29", "%d/%m/%Y") is False
        assert rules.date_format("2024-1-5", "%Y-%m-%d") is False
        assert rules.date_("2024-1-5", "%Y-%m-%d") is False

    @pytest.mark.parametrize("target", ["2024-06-01", date(2024, 6, 1), datetime(2024, 6, 1)])
    def test_comparisons_accept_target_types(self, target):
        assert rules.before("2024-05-31", target, self.LAYOUT) is True
        assert rules.after("2024-06-02", target, self.LAYOUT) is True
        assert rules.date_equals("2024-06-01", target, self.LAYOUT) is True
        assert rules.before_or_equal("2024-06-01", target, self.LAYOUT) is True
        assert rules.after_or_equal("2024-06-01", target, self.LAYOUT) is True
        assert rules.before("2024-06-01", target, self.LAYOUT) is False
        assert rules.after("2024-06-01", target, self.LAYOUT) is False

    def test_aware_target_is_normalized_to_utc(self):
        tehran = timezone(timedelta(hours=3, minutes=30))
        target = datetime(2024, 6, 1, 2, 0, tzinfo=tehran)
        assert rules.date_equals("2024-05-31", target, self.LAYOUT) is False
        assert rules.after("2024-06-01", target, self.LAYOUT) is True

    def test_unparseable_values_fail_every_comparison(self):
        for predicate in (rules.before, rules.after, rules.date_equals, rules.before_or_equal, rules.after_or_equal):
            assert predicate("soon", "2024-01-01", self.LAYOUT) is False
            assert predicate("2024-01-01", "later", self.LAYOUT) is False


class TestMedia:
    """Test media rules with injected collaborators."""

    def test_image_with_fixed_decoder(self, fixed_decoder):
        decoder = fixed_decoder((100, 50))
        assert rules.image(b"\x89PNG", decoder) is True
        assert rules.image(b"", decoder) is False
        assert rules.image("not bytes", decoder) is False

    def test_dimensions_bounds_are_inclusive(self, fixed_decoder):
        decoder = fixed_decoder((100, 50))
        assert rules.dimensions(b"x", decoder, 100, 50, 100, 50) is True
        assert rules.dimensions(b"x", decoder, 101, 0, 500, 500) is False
        assert rules.dimensions(b"x", decoder, 0, 0, 500, 49) is False

    def test_mimes(self, upload):
        assert rules.mimes(upload("image/PNG"), ["image/png", "image/jpeg"]) is True
        assert rules.mimes(upload("application/pdf"), ["image/png"]) is False
        assert rules.mimes("image/png", ["image/png"]) is False


class TestPassword:
    """Test password strength rules."""

    @pytest.mark.parametrize(
        "value,letters,mixed,numbers,symbols",
        [
            ("Passw0rd!", True, True, True, True),
            ("password", True, False, False, False),
            ("12345678", False, False, True, False),
            ("!!!!", False, False, False, True),
            ("رمز۱۲۳", True, False, True, False),
            ("", False, False, False, False),
        ],
    )
    def test_strength(self, value, letters, mixed, numbers, symbols):
        assert rules.password_letters(value) is letters
        assert rules.password_mixed(value) is mixed
        assert rules.password_numbers(value) is numbers
        assert rules.password_symbols(value) is symbols

    def test_uncompromised(self):
        leaked = ["123456", "password"]
        assert rules.password_uncompromised("correct horse", leaked) is True
        assert rules.password_uncompromised("123456", leaked) is False
        assert rules.password_uncompromised(123456, leaked) is False
