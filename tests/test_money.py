import math
from decimal import Decimal

from fintrack.money import (
    data_quality_stats,
    normalize_zero,
    parse_amount,
    sum_amounts,
    to_display,
    to_storage,
)


def test_to_display_divides_by_thousand():
    assert to_display(-120000) == -120
    assert to_display(1500) == 1.5
    assert to_display(0) == 0


def test_to_storage_rounds_to_whole_miliunits():
    assert to_storage(12.5) == 12500
    assert to_storage(0.1 + 0.2) == 300
    assert to_storage(-90) == -90000


def test_parse_amount_accepts_numbers_and_numeric_strings():
    assert parse_amount(30000) == 30000
    assert parse_amount("-120000") == -120000
    assert parse_amount(Decimal("2500")) == 2500
    assert parse_amount(99.0) == 99


def test_parse_amount_rejects_garbage():
    assert parse_amount(None) is None
    assert parse_amount("abc") is None
    assert parse_amount(float("nan")) is None
    assert parse_amount(math.inf) is None
    assert parse_amount(True) is None
    assert parse_amount({"amount": 1}) is None


def test_sum_amounts_skips_and_counts_invalid_entries():
    total = sum_amounts([1000, "oops", None, 2000, float("nan")])
    assert total == 3000
    assert data_quality_stats()["invalid_amounts"] == 3


def test_normalize_zero():
    assert normalize_zero(0) is None
    assert normalize_zero(0.0) is None
    assert normalize_zero(None) is None
    assert normalize_zero(410) == 410
    assert normalize_zero(-0.5) == -0.5


def test_normalize_zero_keeps_negative_and_fractional_amounts():
    assert normalize_zero(-410) == -410
    assert normalize_zero(0.001) == 0.001
