import math

import pytest

from imanage.utils.calculations import compute_line, compute_totals


def test_single_line_amounts():
    """gross = qty * price, tax = gross * pct / 100, total = gross + tax."""
    out = compute_line({"quantity": 2, "unit_price": 150, "tax_percent": 5}, 1)
    assert out["gross_amount"] == pytest.approx(300.0)
    assert out["line_tax_amount"] == pytest.approx(15.0)
    assert out["line_total"] == pytest.approx(315.0)
    assert out["serial_number"] == 1


def test_document_totals_sum_lines_and_number_serials():
    totals = compute_totals([
        {"quantity": 1, "unit_price": 1000, "tax_percent": 5},
        {"quantity": 3, "unit_price": 20, "tax_percent": 0},
    ])
    assert totals.sub_total == pytest.approx(1060.0)
    assert totals.total_tax == pytest.approx(50.0)
    assert totals.total == pytest.approx(1110.0)
    assert [l["serial_number"] for l in totals.lines] == [1, 2]


@pytest.mark.parametrize("bad", [None, "", "abc", -3, float("nan"), float("inf"), True])
def test_bad_inputs_count_as_zero(bad):
    """Missing, negative or unparsable values never poison a total."""
    out = compute_line({"quantity": bad, "unit_price": 10, "tax_percent": bad}, 1)
    assert out["gross_amount"] == 0.0
    assert out["line_total"] == 0.0
    assert not math.isnan(out["line_total"])


def test_numeric_strings_are_parsed():
    out = compute_line({"quantity": "2", "unit_price": "12.5", "tax_percent": "10"}, 3)
    assert out["line_total"] == pytest.approx(27.5)
    assert out["serial_number"] == 3


def test_empty_or_missing_items():
    for items in (None, []):
        totals = compute_totals(items)
        assert (totals.sub_total, totals.total_tax, totals.total) == (0.0, 0.0, 0.0)
        assert totals.lines == []


def test_input_is_not_mutated():
    item = {"quantity": 1, "unit_price": 5, "tax_percent": 0, "description": "x"}
    compute_totals([item])
    assert item == {"quantity": 1, "unit_price": 5, "tax_percent": 0, "description": "x"}


def test_totals_are_idempotent():
    items = [{"quantity": 3, "unit_price": 33.3, "tax_percent": 5}]
    assert compute_totals(items) == compute_totals(items)
    again = compute_totals(compute_totals(items).lines)
    assert again.total == pytest.approx(compute_totals(items).total)
