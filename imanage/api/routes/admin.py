import sqlite3

from fastapi import APIRouter, Depends

from ...database.repositories import AdminSettingsRepo
from ..deps import get_db
from ..schemas import AdminSettingsIn, AdminSettingsOut

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/settings", response_model=AdminSettingsOut)
def get_settings(conn: sqlite3.Connection = Depends(get_db)):
    return AdminSettingsRepo(conn).get()


@router.put("/settings", response_model=AdminSettingsOut)
def save_settings(payload: AdminSettingsIn, conn: sqlite3.Connection = Depends(get_db)):
    return AdminSettingsRepo(conn).save(payload.model_dump(exclude_unset=True))
