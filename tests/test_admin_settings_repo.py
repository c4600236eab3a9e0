import pytest

from imanage.database.repositories import AdminSettingsRepo, TOGGLES
from imanage.errors import ValidationError


def test_defaults_from_seeded_row(conn):
    s = AdminSettingsRepo(conn).get()
    assert s.id == "settings_1"
    assert s.currency == "AED"
    assert s.quote_number_pattern == "AAT-YYYYMMDD-NNNN"
    assert s.quote_starting_number == 1
    assert s.show_revenue_trend is True
    assert s.show_invoices_two_pane is False


def test_save_merges_and_stores_only_true_as_on(conn):
    repo = AdminSettingsRepo(conn)
    repo.save({"company_name": "Al Adeed Transport", "show_reports": False})
    s = repo.save({"vat_number": "100200300", "show_quick_actions": "yes"})
    assert s.company_name == "Al Adeed Transport"
    assert s.vat_number == "100200300"
    assert s.show_reports is False
    # only an explicit True is stored as 1
    assert s.show_quick_actions is False
    assert s.show_revenue_trend is True

    stored = conn.execute("SELECT show_reports, show_revenue_trend FROM admin_settings").fetchone()
    assert tuple(stored) == (0, 1)


def test_blank_currency_falls_back(conn):
    s = AdminSettingsRepo(conn).save({"currency": "", "invoice_starting_number": 500})
    assert s.currency == "AED"
    assert s.invoice_starting_number == 500


def test_every_toggle_round_trips(conn):
    repo = AdminSettingsRepo(conn)
    s = repo.save({name: False for name in TOGGLES})
    assert not any(getattr(s, name) for name in TOGGLES)


def test_pattern_without_sequence_is_rejected(conn):
    repo = AdminSettingsRepo(conn)
    with pytest.raises(ValidationError, match="must contain NNNN"):
        repo.save({"quote_number_pattern": "Q-YYYY"})
    assert repo.get().quote_number_pattern == "AAT-YYYYMMDD-NNNN"
