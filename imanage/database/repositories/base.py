"""
Generic repository shared by every entity adapter.

A concrete repository declares its table, record dataclass and rules:

    required      {column: message} checked for non-empty values
    unique        {column: message template with {value}}
    foreign_keys  ForeignKey entries (flat id or nested {"id": ...} payloads)
    dependents    Dependent entries consulted by the reference guard on delete
    defaults      {column: value} used when the payload leaves a column empty

and gets get_all / get_by_id / create / update / delete. `update` is a full
replace: columns missing from the payload fall back to their defaults.

DocumentRepo adds an owned, ordered item collection. Items are never patched
in place: every write recomputes them with compute_totals() and replaces the
whole set (delete all children, bulk insert) inside the same transaction as
the header, so item ids do not survive an edit.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import asdict, dataclass, fields
from datetime import date
import sqlite3
from typing import Any, ClassVar, Dict, Iterator, List, Mapping, Optional, Sequence

from ...constants import ADMIN_SETTINGS_ID
from ...errors import NotFoundError, ValidationError
from ...utils.calculations import compute_totals
from ...utils.helpers import blank_to_none, new_id, next_document_number, utc_now_iso
from ...utils.loggers import get_logger
from ...utils.validators import non_empty
from .reference_guard import Dependent, ReferenceGuard

_log = get_logger(__name__)

_MANAGED = ("id", "created_at", "updated_at", "items")

ITEM_COLUMNS = (
    "serial_number",
    "vehicle_type_id",
    "vehicle_type_label",
    "vehicle_number",
    "description",
    "rental_basis",
    "quantity",
    "unit_price",
    "tax_percent",
    "gross_amount",
    "line_tax_amount",
    "line_total",
)


@dataclass(frozen=True)
class ForeignKey:
    column: str
    table: str
    label: str
    nested: Optional[str] = None
    required_message: Optional[str] = None


@dataclass
class LineItem:
    id: Optional[str] = None
    serial_number: Optional[int] = None
    vehicle_type_id: Optional[str] = None
    vehicle_type_label: Optional[str] = None
    vehicle_number: Optional[str] = None
    description: Optional[str] = None
    rental_basis: Optional[str] = None
    quantity: float = 0.0
    unit_price: float = 0.0
    tax_percent: float = 0.0
    gross_amount: float = 0.0
    line_tax_amount: float = 0.0
    line_total: float = 0.0


class BaseRepo:
    table: ClassVar[str]
    entity: ClassVar[str]
    record_cls: ClassVar[type]
    required: ClassVar[Dict[str, str]] = {}
    unique: ClassVar[Dict[str, str]] = {}
    foreign_keys: ClassVar[Sequence[ForeignKey]] = ()
    dependents: ClassVar[Sequence[Dependent]] = ()
    defaults: ClassVar[Dict[str, Any]] = {}
    # columns where '' is stored as NULL (besides foreign keys)
    blank_as_null: ClassVar[Sequence[str]] = ()
    order_by: ClassVar[str] = "created_at DESC"

    def __init__(self, conn: sqlite3.Connection):
        # ensure rows behave like dicts/tuples
        conn.row_factory = sqlite3.Row
        self.conn = conn
        self.guard = ReferenceGuard(conn, self.entity, self.dependents)

    # ---- Internal helpers -------------------------------------------------

    @classmethod
    def columns(cls) -> List[str]:
        return [f.name for f in fields(cls.record_cls) if f.name not in _MANAGED]

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """
        BEGIN IMMEDIATE ... COMMIT, rollback on error.
        Nested inside a caller's open transaction it becomes a savepoint.
        """
        if self.conn.in_transaction:
            self.conn.execute("SAVEPOINT repo_write")
            try:
                yield
                self.conn.execute("RELEASE SAVEPOINT repo_write")
            except Exception:
                self.conn.execute("ROLLBACK TO SAVEPOINT repo_write")
                self.conn.execute("RELEASE SAVEPOINT repo_write")
                raise
            return
        self.conn.execute("BEGIN IMMEDIATE")
        try:
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    @staticmethod
    def _normalize_text(s):
        if isinstance(s, str):
            return s.strip()
        return s

    def _from_row(self, row: sqlite3.Row):
        keys = row.keys()
        return self.record_cls(**{
            f.name: row[f.name] for f in fields(self.record_cls) if f.name in keys
        })

    def _exists(self, table: str, record_id: Any) -> bool:
        row = self.conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (record_id,)).fetchone()
        return row is not None

    @staticmethod
    def _nested_id(nested: Any) -> Any:
        if isinstance(nested, Mapping):
            return nested.get("id")
        return getattr(nested, "id", None)

    # ---- Validation -------------------------------------------------------

    def _resolve_foreign_keys(self, values: dict, data: Mapping[str, Any]) -> None:
        for fk in self.foreign_keys:
            value = blank_to_none(values.get(fk.column))
            if value is None and fk.nested and data.get(fk.nested) is not None:
                value = blank_to_none(self._nested_id(data[fk.nested]))
            values[fk.column] = value

    def _check_required(self, values: Mapping[str, Any]) -> None:
        for column, message in self.required.items():
            if not non_empty(values.get(column)):
                raise ValidationError(message)

    def _check_unique(self, values: Mapping[str, Any], exclude_id: Optional[str]) -> None:
        for column, template in self.unique.items():
            value = values.get(column)
            if value is None:
                continue
            sql = f"SELECT id FROM {self.table} WHERE {column} = ?"
            params: list = [value]
            if exclude_id is not None:
                sql += " AND id != ?"
                params.append(exclude_id)
            if self.conn.execute(sql, params).fetchone():
                raise ValidationError(template.format(value=value))

    def _check_foreign_keys(self, values: Mapping[str, Any]) -> None:
        for fk in self.foreign_keys:
            value = values.get(fk.column)
            if value is None:
                if fk.required_message:
                    raise ValidationError(fk.required_message)
                continue
            if not self._exists(fk.table, value):
                raise ValidationError(f'{fk.label} with ID "{value}" does not exist')

    def _derive(self, values: dict, data: Mapping[str, Any], existing) -> None:
        """Hook: fill derived columns (totals, month, ...) before validation."""

    def _prepare(self, data: Mapping[str, Any], existing=None) -> dict:
        values: dict = {}
        for column in self.columns():
            value = self._normalize_text(data.get(column))
            if column in self.blank_as_null:
                value = blank_to_none(value)
            if value is None and column in self.defaults:
                value = self.defaults[column]
            values[column] = value
        self._resolve_foreign_keys(values, data)
        self._derive(values, data, existing)
        self._check_required(values)
        self._check_unique(values, existing.id if existing is not None else None)
        self._check_foreign_keys(values)
        return values

    # ---- Child rows (documents override) ----------------------------------

    def _write_children(self, record_id: str, data: Mapping[str, Any]) -> None:
        pass

    # ---- Queries ----------------------------------------------------------

    def get_all(self) -> list:
        rows = self.conn.execute(
            f"SELECT * FROM {self.table} ORDER BY {self.order_by}"
        ).fetchall()
        return [self._from_row(r) for r in rows]

    def get_by_id(self, record_id: str):
        row = self.conn.execute(
            f"SELECT * FROM {self.table} WHERE id = ?", (record_id,)
        ).fetchone()
        return None if row is None else self._from_row(row)

    # ---- Create / Update / Delete -----------------------------------------

    def create(self, data: Mapping[str, Any]):
        values = self._prepare(data)
        record_id = blank_to_none(data.get("id")) or new_id()
        now = utc_now_iso()
        cols = ["id", *values.keys(), "created_at", "updated_at"]
        params = [record_id, *values.values(), now, now]
        with self._transaction():
            self.conn.execute(
                f"INSERT INTO {self.table}({', '.join(cols)}) "
                f"VALUES ({', '.join('?' for _ in cols)})",
                params,
            )
            self._write_children(record_id, data)
        _log.debug("Created %s %s", self.entity, record_id)
        return self.get_by_id(record_id)

    def update(self, record_id: str, data: Mapping[str, Any]):
        """Full replace of the row. Returns None if the row does not exist."""
        existing = self.get_by_id(record_id)
        if existing is None:
            return None
        values = self._prepare(data, existing=existing)
        assignments = ", ".join(f"{c} = ?" for c in values) + ", updated_at = ?"
        with self._transaction():
            self.conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                [*values.values(), utc_now_iso(), record_id],
            )
            self._write_children(record_id, data)
        _log.debug("Updated %s %s", self.entity, record_id)
        return self.get_by_id(record_id)

    def delete(self, record_id: str) -> bool:
        """
        Reference guard first, then an unconditional delete.
        Returns False if there was nothing to delete.
        """
        def _action() -> bool:
            with self._transaction():
                cur = self.conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
                return cur.rowcount > 0

        deleted = self.guard.delete(record_id, _action)
        if deleted:
            _log.info("Deleted %s %s", self.entity, record_id)
        return deleted


class DocumentRepo(BaseRepo):
    """Quote / purchase order / invoice: header row plus an owned item list."""

    item_table: ClassVar[str]
    item_parent_column: ClassVar[str]
    # header columns receiving (sub_total, total_tax, total)
    totals_columns: ClassVar[tuple] = ("sub_total", "total_tax", "total")
    order_by = "date DESC, created_at DESC"
    number_pattern: ClassVar[str] = "DOC-YYYYMMDD-NNNN"
    # admin_settings columns overriding the pattern / first sequence number
    number_pattern_setting: ClassVar[Optional[str]] = None
    starting_number_setting: ClassVar[Optional[str]] = None

    # ---- Numbering ------------------------------------------------------

    def next_number(self, on_date: Optional[date] = None) -> str:
        """
        Suggest the next free document number from the numbering pattern.
        The sequence starts at the configured starting number plus the count
        of existing documents and skips numbers already taken.
        """
        on_date = on_date or date.today()
        settings = self.conn.execute(
            "SELECT * FROM admin_settings WHERE id = ?", (ADMIN_SETTINGS_ID,)
        ).fetchone()
        pattern, start = self.number_pattern, 1
        if settings is not None:
            if self.number_pattern_setting and settings[self.number_pattern_setting]:
                pattern = settings[self.number_pattern_setting]
            if self.starting_number_setting and settings[self.starting_number_setting]:
                start = int(settings[self.starting_number_setting])
        count = self.conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]
        sequence = start + count
        while True:
            number = next_document_number(pattern, on_date, sequence)
            if not self.conn.execute(
                f"SELECT 1 FROM {self.table} WHERE number = ?", (number,)
            ).fetchone():
                return number
            sequence += 1

    # ---- Items ------------------------------------------------------------

    def list_items(self, record_id: str) -> List[LineItem]:
        rows = self.conn.execute(
            f"SELECT * FROM {self.item_table} WHERE {self.item_parent_column} = ? "
            "ORDER BY serial_number, rowid",
            (record_id,),
        ).fetchall()
        names = {f.name for f in fields(LineItem)}
        return [LineItem(**{k: r[k] for k in r.keys() if k in names}) for r in rows]

    def _from_row(self, row: sqlite3.Row):
        record = super()._from_row(row)
        record.items = self.list_items(record.id)
        return record

    def _derive(self, values: dict, data: Mapping[str, Any], existing) -> None:
        totals = compute_totals(self._incoming_items(data))
        sub_col, tax_col, total_col = self.totals_columns
        values[sub_col] = totals.sub_total
        values[tax_col] = totals.total_tax
        values[total_col] = totals.total

    @staticmethod
    def _incoming_items(data: Mapping[str, Any]) -> list:
        items = data.get("items") or []
        return [it if isinstance(it, Mapping) else asdict(it) for it in items]

    def _write_children(self, record_id: str, data: Mapping[str, Any]) -> None:
        """Replace the item set. No commit here; caller controls transaction."""
        lines = compute_totals(self._incoming_items(data)).lines
        self.conn.execute(
            f"DELETE FROM {self.item_table} WHERE {self.item_parent_column} = ?",
            (record_id,),
        )
        cols = ["id", self.item_parent_column, *ITEM_COLUMNS]
        self.conn.executemany(
            f"INSERT INTO {self.item_table}({', '.join(cols)}) "
            f"VALUES ({', '.join('?' for _ in cols)})",
            [
                [blank_to_none(line.get("id")) or new_id(), record_id,
                 *(self._normalize_text(line.get(c)) for c in ITEM_COLUMNS)]
                for line in lines
            ],
        )

    # ---- Line-item mutations ----------------------------------------------

    def _payload(self, record) -> dict:
        payload = asdict(record)
        payload["items"] = [asdict(it) for it in record.items]
        return payload

    def _save_items(self, record, items: list):
        payload = self._payload(record)
        payload["items"] = items
        return self.update(record.id, payload)

    def add_item(self, record_id: str, item: Mapping[str, Any]):
        record = self.get_by_id(record_id)
        if record is None:
            return None
        items = [asdict(it) for it in record.items]
        items.append(dict(item))
        return self._save_items(record, items)

    def update_item(self, record_id: str, item_id: str, changes: Mapping[str, Any]):
        record = self.get_by_id(record_id)
        if record is None:
            return None
        items = [asdict(it) for it in record.items]
        for it in items:
            if it["id"] == item_id:
                it.update({k: v for k, v in changes.items() if k != "id"})
                break
        else:
            raise NotFoundError(f'Line item "{item_id}" does not exist')
        return self._save_items(record, items)

    def remove_item(self, record_id: str, item_id: str):
        record = self.get_by_id(record_id)
        if record is None:
            return None
        items = [asdict(it) for it in record.items if it.id != item_id]
        if len(items) == len(record.items):
            raise NotFoundError(f'Line item "{item_id}" does not exist')
        return self._save_items(record, items)
