"""Standard list / get / create / update / delete routes for one repository."""
from typing import Callable, List, Type

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from ...errors import NotFoundError
from ..deps import repo_dependency
from ..schemas import DeletedOut


def crud_router(
    *,
    prefix: str,
    tag: str,
    repo_cls: Type,
    in_model: Type[BaseModel],
    out_model: Type[BaseModel],
    entity: str,
    extra: Callable[[APIRouter, Callable], None] = None,
) -> APIRouter:
    """
    `extra(router, get_repo)` registers entity-specific routes before the
    generic /{record_id} ones so literal paths win.
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    get_repo = repo_dependency(repo_cls)

    if extra is not None:
        extra(router, get_repo)

    @router.get("", response_model=List[out_model])
    def list_records(repo=Depends(get_repo)):
        return repo.get_all()

    @router.get("/{record_id}", response_model=out_model)
    def get_record(record_id: str, repo=Depends(get_repo)):
        record = repo.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{entity} not found")
        return record

    @router.post("", response_model=out_model, status_code=status.HTTP_201_CREATED)
    def create_record(payload: in_model, repo=Depends(get_repo)):
        return repo.create(payload.model_dump(exclude_unset=True))

    @router.put("/{record_id}", response_model=out_model)
    def update_record(record_id: str, payload: in_model, repo=Depends(get_repo)):
        record = repo.update(record_id, payload.model_dump(exclude_unset=True))
        if record is None:
            raise NotFoundError(f"{entity} not found")
        return record

    @router.delete("/{record_id}", response_model=DeletedOut)
    def delete_record(record_id: str, repo=Depends(get_repo)):
        if not repo.delete(record_id):
            raise NotFoundError(f"{entity} not found")
        return DeletedOut()

    return router
