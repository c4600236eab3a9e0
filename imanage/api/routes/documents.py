"""Quotes, purchase orders and invoices: CRUD plus line-item and numbering routes."""
from typing import Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...database.repositories import InvoicesRepo, PurchaseOrdersRepo, QuotesRepo
from ...errors import NotFoundError
from ..schemas import (
    InvoiceIn,
    InvoiceOut,
    LineItemIn,
    NextNumberOut,
    PurchaseOrderIn,
    PurchaseOrderOut,
    QuoteIn,
    QuoteOut,
)
from .crud import crud_router


def _document_routes(out_model: Type[BaseModel], entity: str):
    def register(router: APIRouter, get_repo) -> None:
        @router.get("/meta/next-number", response_model=NextNumberOut)
        def next_number(repo=Depends(get_repo)):
            return NextNumberOut(number=repo.next_number())

        @router.post("/{record_id}/items", response_model=out_model)
        def add_item(record_id: str, item: LineItemIn, repo=Depends(get_repo)):
            record = repo.add_item(record_id, item.model_dump(exclude_unset=True))
            if record is None:
                raise NotFoundError(f"{entity} not found")
            return record

        @router.put("/{record_id}/items/{item_id}", response_model=out_model)
        def update_item(record_id: str, item_id: str, item: LineItemIn, repo=Depends(get_repo)):
            record = repo.update_item(record_id, item_id, item.model_dump(exclude_unset=True))
            if record is None:
                raise NotFoundError(f"{entity} not found")
            return record

        @router.delete("/{record_id}/items/{item_id}", response_model=out_model)
        def remove_item(record_id: str, item_id: str, repo=Depends(get_repo)):
            record = repo.remove_item(record_id, item_id)
            if record is None:
                raise NotFoundError(f"{entity} not found")
            return record

    return register


quotes_router = crud_router(
    prefix="/api/quotes",
    tag="quotes",
    repo_cls=QuotesRepo,
    in_model=QuoteIn,
    out_model=QuoteOut,
    entity="Quote",
    extra=_document_routes(QuoteOut, "Quote"),
)

purchase_orders_router = crud_router(
    prefix="/api/purchase-orders",
    tag="purchase-orders",
    repo_cls=PurchaseOrdersRepo,
    in_model=PurchaseOrderIn,
    out_model=PurchaseOrderOut,
    entity="Purchase order",
    extra=_document_routes(PurchaseOrderOut, "Purchase order"),
)

invoices_router = crud_router(
    prefix="/api/invoices",
    tag="invoices",
    repo_cls=InvoicesRepo,
    in_model=InvoiceIn,
    out_model=InvoiceOut,
    entity="Invoice",
    extra=_document_routes(InvoiceOut, "Invoice"),
)
