"""
imanage/utils/file_storage.py

Purpose
-------
Stores uploaded logos, documents and signatures on disk.

Files live under `<uploads>/<type>/<uuid><ext>`; the original file name only
contributes its extension. Callers keep the returned reference
('./data/uploads/<type>/<name>') in settings or documents and resolve it back
through `resolve`.

Public interface
----------------
- FileStorage(base_dir)
- FileStorage.save(content, original_name, upload_type) -> str
- FileStorage.read(upload_type, filename) -> Path
- FileStorage.delete(upload_type, filename) -> bool
- content_type_for(filename) -> str
"""
from __future__ import annotations

from pathlib import Path
from typing import Union
import uuid

from ..constants import DATA_DIR, MAX_UPLOAD_BYTES, UPLOAD_CONTENT_TYPES, UPLOAD_TYPES, UPLOADS_DIR
from ..errors import NotFoundError, ValidationError
from .loggers import get_logger

__all__ = ["FileStorage", "content_type_for"]

_log = get_logger(__name__)


def content_type_for(filename: str) -> str:
    return UPLOAD_CONTENT_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")


def _check_type(upload_type: str) -> None:
    if upload_type not in UPLOAD_TYPES:
        raise ValidationError("Invalid file type. Must be: logos, documents, or signatures")


def _check_name(filename: str) -> None:
    # a bare file name; nothing that walks out of the type directory
    if not filename or Path(filename).name != filename or filename.startswith("."):
        raise ValidationError(f'Invalid file name "{filename}"')


class FileStorage:
    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)

    def ensure_directories(self) -> None:
        for upload_type in UPLOAD_TYPES:
            (self.base_dir / upload_type).mkdir(parents=True, exist_ok=True)

    def path_for(self, upload_type: str, filename: str) -> Path:
        _check_type(upload_type)
        _check_name(filename)
        return self.base_dir / upload_type / filename

    def save(self, content: bytes, original_name: str, upload_type: str) -> str:
        """Write `content` under a fresh uuid name and return its reference."""
        _check_type(upload_type)
        if len(content) > MAX_UPLOAD_BYTES:
            raise ValidationError("File is too large. Maximum size is 5MB")
        self.ensure_directories()
        filename = f"{uuid.uuid4()}{Path(original_name or '').suffix.lower()}"
        (self.base_dir / upload_type / filename).write_bytes(content)
        _log.info("Stored %s upload %s (%d bytes)", upload_type, filename, len(content))
        return f"./{DATA_DIR}/{UPLOADS_DIR}/{upload_type}/{filename}"

    def read(self, upload_type: str, filename: str) -> Path:
        path = self.path_for(upload_type, filename)
        if not path.is_file():
            raise NotFoundError("File not found")
        return path

    def delete(self, upload_type: str, filename: str) -> bool:
        """Remove the file; False when it was already gone."""
        path = self.path_for(upload_type, filename)
        if not path.is_file():
            return False
        path.unlink()
        _log.info("Deleted %s upload %s", upload_type, filename)
        return True

    def resolve(self, reference: str) -> Path:
        """Map a stored './data/uploads/<type>/<name>' reference to its file."""
        parts = Path(reference).parts
        if len(parts) < 2:
            raise ValidationError(f'Invalid upload reference "{reference}"')
        return self.path_for(parts[-2], parts[-1])
