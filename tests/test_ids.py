from apps.sync.ids import (
    CUSTOMER_PREFIX, REPAIR_PREFIX, format_id, next_id_from_count,
    next_id_from_existing, parse_id_number
)


def test_count_based_id_adds_base_and_one():
    assert next_id_from_count(CUSTOMER_PREFIX, 7) == "C-001008"


def test_count_based_id_for_empty_table():
    assert next_id_from_count(CUSTOMER_PREFIX, 0) == "C-001001"
    assert next_id_from_count(REPAIR_PREFIX, None) == "R-001001"


def test_existing_based_id_uses_highest_suffix():
    assert next_id_from_existing(REPAIR_PREFIX, ["R-001000", "R-001003"]) == "R-001004"


def test_existing_based_id_starts_at_base():
    assert next_id_from_existing(CUSTOMER_PREFIX, []) == "C-001000"


def test_existing_based_id_skips_malformed_ids():
    assert next_id_from_existing(CUSTOMER_PREFIX, ["legacy", "C-abc", "C-001002"]) == "C-001003"


def test_format_widens_past_six_digits():
    assert format_id("R", 42) == "R-000042"
    assert format_id("R", 1234567) == "R-1234567"


def test_parse_id_number():
    assert parse_id_number("C-001234") == 1234
    assert parse_id_number("nodash") is None
