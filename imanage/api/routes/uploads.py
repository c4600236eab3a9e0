from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from fastapi.responses import FileResponse

from ...errors import ValidationError
from ...utils.file_storage import FileStorage, content_type_for
from ..deps import get_storage
from ..schemas import UploadOut

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("", response_model=UploadOut)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    upload_type: Optional[str] = Form(None, alias="type"),
    storage: FileStorage = Depends(get_storage),
):
    if file is None:
        raise ValidationError("No file uploaded")
    content = await file.read()
    return UploadOut(path=storage.save(content, file.filename or "", upload_type or ""))


@router.get("/{upload_type}/{filename}")
def get_file(upload_type: str, filename: str, storage: FileStorage = Depends(get_storage)):
    path = storage.read(upload_type, filename)
    return FileResponse(path, media_type=content_type_for(filename))


@router.delete("/{upload_type}/{filename}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(upload_type: str, filename: str, storage: FileStorage = Depends(get_storage)):
    storage.delete(upload_type, filename)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
