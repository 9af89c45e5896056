"""Unit tests for new/returning customer classification."""

from datetime import datetime, timedelta, timezone

from detailhub.shared.customer_type import (
    CustomerType,
    classify_customer,
    classify_from_history,
    parse_datetime,
)

REFERENCE = "2026-01-01T12:00:00Z"


def test_no_completed_services_is_new():
    assert classify_customer(0, None, REFERENCE) == CustomerType.NEW
    assert classify_customer(None, None, REFERENCE) == CustomerType.NEW


def test_prior_completed_service_is_returning():
    assert classify_customer(1, "2025-12-31T12:00:00Z", REFERENCE) == CustomerType.RETURNING


def test_service_at_reference_instant_is_new():
    assert classify_customer(1, "2026-01-01T12:00:00Z", REFERENCE) == CustomerType.NEW


def test_service_after_reference_is_new():
    assert classify_customer(1, "2026-01-02T12:00:00Z", REFERENCE) == CustomerType.NEW


def test_multiple_services_always_returning():
    assert classify_customer(2, None, REFERENCE) == CustomerType.RETURNING
    assert classify_customer(3, "not a date", REFERENCE) == CustomerType.RETURNING
    assert classify_customer(2, "2026-06-01T00:00:00Z", REFERENCE) == CustomerType.RETURNING


def test_single_service_without_valid_timestamp_is_new():
    assert classify_customer(1, None, REFERENCE) == CustomerType.NEW
    assert classify_customer(1, "yesterday", REFERENCE) == CustomerType.NEW


def test_timestamp_without_count_is_new():
    assert classify_customer(0, "2025-12-31T12:00:00Z", REFERENCE) == CustomerType.NEW
    assert classify_customer(-1, "2025-12-31T12:00:00Z", REFERENCE) == CustomerType.NEW


def test_reference_defaults_to_now():
    an_hour_ago = datetime.now(timezone.utc) - timedelta(hours=1)
    in_an_hour = datetime.now(timezone.utc) + timedelta(hours=1)
    assert classify_customer(1, an_hour_ago) == CustomerType.RETURNING
    assert classify_customer(1, in_an_hour) == CustomerType.NEW


def test_accepts_datetime_objects_and_mixed_offsets():
    last = datetime(2026, 1, 1, 6, 0, tzinfo=timezone(timedelta(hours=-7)))  # 13:00 UTC
    assert classify_customer(1, last, REFERENCE) == CustomerType.NEW
    naive_before = datetime(2026, 1, 1, 11, 59)
    assert classify_customer(1, naive_before, REFERENCE) == CustomerType.RETURNING


def test_values_compare_as_strings():
    assert classify_customer(1, "2025-12-31T12:00:00Z", REFERENCE) == "returning"
    assert CustomerType.NEW.value == "new"


def test_parse_datetime():
    assert parse_datetime("2026-01-01T12:00:00Z") == datetime(2026, 1, 1, 12, tzinfo=timezone.utc)
    assert parse_datetime("") is None
    assert parse_datetime("garbage") is None
    assert parse_datetime(12345) is None


def test_parse_datetime_accepts_fractional_and_basic_iso_forms():
    assert parse_datetime("2025-12-31T12:00:00.5Z") == datetime(
        2025, 12, 31, 12, 0, 0, 500000, tzinfo=timezone.utc
    )
    assert parse_datetime("20251231T120000Z") == datetime(2025, 12, 31, 12, tzinfo=timezone.utc)
    assert parse_datetime("2025-11-02") == datetime(2025, 11, 2, tzinfo=timezone.utc)


def test_single_service_with_fractional_timestamp_is_returning():
    assert classify_customer(1, "2025-12-31T12:00:00.5Z", REFERENCE) == CustomerType.RETURNING


def test_classify_from_history():
    assert classify_from_history([], REFERENCE) == CustomerType.NEW
    assert classify_from_history([None], REFERENCE) == CustomerType.NEW
    assert classify_from_history(["2025-12-01T00:00:00Z"], REFERENCE) == CustomerType.RETURNING
    assert classify_from_history([REFERENCE], REFERENCE) == CustomerType.NEW
    assert (
        classify_from_history(["2025-12-01T00:00:00Z", REFERENCE], REFERENCE)
        == CustomerType.RETURNING
    )
