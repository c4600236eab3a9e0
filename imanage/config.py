# imanage/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

from .constants import BACKUP_DIR as BACKUP_DIR_NAME, DATA_DIR, DB_FILE_NAME, UPLOADS_DIR

# .env in the working directory; real environment variables win
load_dotenv(override=False)

BASE_DIR = Path.cwd()
DATA_PATH = Path(os.getenv("IMANAGE_DATA_DIR", BASE_DIR / DATA_DIR))
DB_FILENAME = os.getenv("DB_FILENAME", DB_FILE_NAME)
DB_PATH = Path(os.getenv("IMANAGE_DB_PATH") or os.getenv("DB_PATH") or DATA_PATH / DB_FILENAME)
BACKUP_PATH = DB_PATH.parent / BACKUP_DIR_NAME
UPLOADS_PATH = Path(os.getenv("IMANAGE_UPLOADS_DIR") or DB_PATH.parent / UPLOADS_DIR)

LOG_LEVEL = os.getenv("IMANAGE_LOG_LEVEL", "INFO").upper()

API_HOST = os.getenv("IMANAGE_HOST", "127.0.0.1")
API_PORT = int(os.getenv("IMANAGE_PORT", "3001"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "IMANAGE_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]
