from datetime import date, datetime, timedelta

import pytest

from verification.checks import CountryRuleValidator, parse_expiry

COMPLETE_FIELDS = {
    "document_number": "L898902C3",
    "date_of_birth": "1990-01-15",
    "expiry_date": "2030-12-31",
    "nationality": "USA",
}


@pytest.fixture
def validator():
    return CountryRuleValidator()


def test_complete_passport_passes(validator):
    result = validator.validate("USA", "passport", COMPLETE_FIELDS, mrz_present=True)

    assert result.passed is True
    assert result.missing_fields == []
    assert result.messages == []
    assert result.country == "USA"
    assert result.document_type == "passport"


def test_missing_number_and_mrz(validator):
    fields = {k: v for k, v in COMPLETE_FIELDS.items() if k != "document_number"}

    result = validator.validate("USA", "passport", fields, mrz_present=False)

    assert result.passed is False
    assert "document_number" in result.missing_fields
    assert "MRZ required but not found" in result.messages


def test_empty_values_count_as_missing(validator):
    fields = dict(COMPLETE_FIELDS, nationality="", date_of_birth=None)

    result = validator.validate("CAN", "passport", fields, mrz_present=True)

    assert result.missing_fields == ["date_of_birth", "nationality"]


def test_expired_passport(validator):
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    result = validator.validate("USA", "passport", dict(COMPLETE_FIELDS, expiry_date=yesterday), True)

    assert "Document expired" in result.messages
    assert result.passed is False


def test_passport_valid_until_tomorrow(validator):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()

    result = validator.validate("USA", "passport", dict(COMPLETE_FIELDS, expiry_date=tomorrow), True)

    assert "Document expired" not in result.messages
    assert result.passed is True


def test_unparseable_expiry_is_not_expired(validator):
    result = validator.validate("USA", "passport", dict(COMPLETE_FIELDS, expiry_date="31/12/2001?"), True)

    assert result.messages == []
    assert result.passed is True


def test_drivers_license_has_no_expiry_or_mrz_rule(validator):
    fields = dict(COMPLETE_FIELDS, expiry_date="2001-01-01")

    result = validator.validate("USA", "drivers_license", fields, mrz_present=False)

    assert result.passed is True


def test_unknown_country(validator):
    assert validator.validate("ZZZ", "passport", COMPLETE_FIELDS, True) is None


def test_unknown_document_type(validator):
    assert validator.validate("CAN", "drivers_license", COMPLETE_FIELDS, True) is None


def test_rule_lookups(validator):
    assert validator.supported_countries() == ["CAN", "USA"]
    assert [r.document_type for r in validator.rules_for("USA")] == ["passport", "drivers_license"]
    assert validator.rules_for("ZZZ") == ()


def test_rule_table_is_read_only(validator):
    with pytest.raises(TypeError):
        validator.rules["GBR"] = ()


@pytest.mark.parametrize("value,expected", [
    ("2030-12-31", datetime(2030, 12, 31)),
    ("31-12-2030", datetime(2030, 12, 31)),
    ("2030-12-31T10:30:00", datetime(2030, 12, 31, 10, 30)),
    ("December 2030", None),
])
def test_parse_expiry(value, expected):
    assert parse_expiry(value) == expected


def test_is_expired_against_fixed_clock(validator):
    now = datetime(2026, 6, 1, 12, 0)
    assert validator.is_expired("2026-06-01", now=now) is True
    assert validator.is_expired("2026-06-02", now=now) is False
    assert validator.is_expired(None, now=now) is False
