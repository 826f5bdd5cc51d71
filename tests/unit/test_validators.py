"""
Unit Tests for Domain Validators
================================

Test Coverage
-------------
- Title trimming and length bounds
- Attribute parsing for quest types and stat keys
- Minutes defaulting, rounding, and bound errors
- Allocation points and notes
"""

import pytest

from questline.domain.models.enums import Attribute
from questline.modules.shared.exceptions import InsufficientResourcesError, ValidationError
from questline.modules.shared.validators import (
    parse_attribute,
    validate_minutes,
    validate_note,
    validate_points,
    validate_resource_cost,
    validate_title,
)


@pytest.mark.unit
class TestValidateTitle:
    def test_title_is_trimmed(self):
        assert validate_title("  Morning run  ") == "Morning run"

    def test_title_shorter_than_three_after_trim_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_title("  ab  ")

        assert exc_info.value.field == "title"
        assert exc_info.value.error_code == "VALIDATION_TITLE"

    def test_title_longer_than_limit_rejected(self):
        with pytest.raises(ValidationError):
            validate_title("x" * 121)

    def test_non_string_title_rejected(self):
        with pytest.raises(ValidationError):
            validate_title(None)


@pytest.mark.unit
class TestParseAttribute:
    @pytest.mark.parametrize("raw", ["physical", " Physical ", Attribute.PHYSICAL])
    def test_accepts_known_values(self, raw):
        assert parse_attribute(raw) is Attribute.PHYSICAL

    @pytest.mark.parametrize("raw", ["strength", "", None, 3])
    def test_rejects_unknown_values(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_attribute(raw, field="stat")

        assert exc_info.value.field == "stat"


@pytest.mark.unit
class TestValidateMinutes:
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_defaults_to_25(self, raw):
        assert validate_minutes(raw, max_minutes=60) == 25

    def test_blank_default_lowered_to_cap(self):
        assert validate_minutes(None, max_minutes=20) == 20

    @pytest.mark.parametrize("raw,expected", [(30, 30), (42.4, 42), (42.5, 43), ("30", 30), (" 12.6 ", 13)])
    def test_rounds_to_whole_minutes(self, raw, expected):
        assert validate_minutes(raw, max_minutes=60) == expected

    def test_above_cap_names_exact_bound(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_minutes(200, max_minutes=180)

        assert exc_info.value.message == "Minutes must be between 1 and 180"
        assert exc_info.value.details["maximum"] == 180

    def test_below_one_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_minutes(0.4, max_minutes=60)

        assert exc_info.value.message == "Minutes must be at least 1"

    @pytest.mark.parametrize("raw", ["1e28", "1e30", 1e300, 180.5])
    def test_huge_values_rejected_as_out_of_range(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            validate_minutes(raw, max_minutes=180)

        assert exc_info.value.message == "Minutes must be between 1 and 180"

    @pytest.mark.parametrize("raw", ["-1e30", -1e300])
    def test_huge_negative_values_rejected(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            validate_minutes(raw, max_minutes=180)

        assert exc_info.value.message == "Minutes must be at least 1"

    @pytest.mark.parametrize("raw", ["abc", True, float("nan"), float("inf"), [30]])
    def test_non_numeric_rejected(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            validate_minutes(raw, max_minutes=60)

        assert exc_info.value.message == "Minutes must be a number"


@pytest.mark.unit
class TestValidatePoints:
    def test_accepts_positive_integers(self):
        assert validate_points(3) == 3
        assert validate_points(2.0) == 2

    @pytest.mark.parametrize("raw", [0, -1, 1.5, "2", True, None])
    def test_rejects_everything_else(self, raw):
        with pytest.raises(ValidationError):
            validate_points(raw)


@pytest.mark.unit
class TestValidateNote:
    def test_absent_note_is_empty(self):
        assert validate_note(None) == ""

    def test_note_trimmed(self):
        assert validate_note("  bring water ") == "bring water"

    def test_note_too_long_rejected(self):
        with pytest.raises(ValidationError):
            validate_note("x" * 501)


@pytest.mark.unit
def test_resource_cost_reports_deficit():
    with pytest.raises(InsufficientResourcesError) as exc_info:
        validate_resource_cost("stat_points", required=5, available=3)

    assert exc_info.value.details["deficit"] == 2
    assert exc_info.value.message == "Not enough stat points: need 5, have 3"
