# imanage/constants.py
DATA_DIR = "data"
BACKUP_DIR = "backups"
DB_FILE_NAME = "imanage.db"

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "4"

DEFAULT_CURRENCY = "AED"
DEFAULT_QUOTE_NUMBER_PATTERN = "AAT-YYYYMMDD-NNNN"
ADMIN_SETTINGS_ID = "settings_1"

# ---- Statuses ----
INVOICE_STATUSES = ("draft", "invoice_sent", "payment_received")
PURCHASE_ORDER_STATUSES = ("draft", "sent", "accepted")
PAYSLIP_STATUSES = ("draft", "processed", "paid")
VEHICLE_STATUSES = ("active", "maintenance", "sold", "retired")
TRANSACTION_TYPES = ("expense", "revenue")

# ---- Expense categories shipped with every database (is_custom = 0) ----
PREDEFINED_EXPENSE_CATEGORIES = (
    ("cat_purchase", "Purchase"),
    ("cat_maintenance", "Maintenance"),
    ("cat_insurance", "Insurance"),
    ("cat_driver_salary", "Driver Salary"),
    ("cat_fuel", "Fuel"),
    ("cat_registration", "Registration"),
    ("cat_other", "Other"),
)

# ---- Reporting ----
DEFAULT_REVENUE_CATEGORY = "Rental Income"
DEFAULT_EXPENSE_CATEGORY = "Other"
TREND_MONTHS = 12
TOP_N = 5
# vehicle transactions may be back-dated at most this many months
TRANSACTION_LOOKBACK_MONTHS = 12

# ---- Document numbering ----
INVOICE_NUMBER_PATTERN = "INV-YYYYMMDD-NNNN"
PURCHASE_ORDER_NUMBER_PATTERN = "PO-YYYYMMDD-NNNN"

# ---- Uploads ----
UPLOADS_DIR = "uploads"
UPLOAD_TYPES = ("logos", "documents", "signatures")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
UPLOAD_CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".pdf": "application/pdf",
}
