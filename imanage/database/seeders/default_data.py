from ...constants import ADMIN_SETTINGS_ID, PREDEFINED_EXPENSE_CATEGORIES
from ...utils.helpers import utc_now_iso


def seed(conn):
    """Predefined expense categories and the settings row. Safe to run repeatedly."""
    now = utc_now_iso()
    for cat_id, name in PREDEFINED_EXPENSE_CATEGORIES:
        conn.execute(
            "INSERT OR IGNORE INTO expense_categories(id, name, is_custom, created_at) "
            "VALUES (?, ?, 0, ?)",
            (cat_id, name, now),
        )
    conn.execute(
        "INSERT OR IGNORE INTO admin_settings(id, created_at, updated_at) VALUES (?, ?, ?)",
        (ADMIN_SETTINGS_ID, now, now),
    )
    conn.commit()
