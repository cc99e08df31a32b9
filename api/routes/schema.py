"""
Schema Routes
=============

Catalog browsing for the manual query builder.
"""

from fastapi import APIRouter, Depends

from api.routes.dependencies import get_store
from api.schemas import ColumnResponse, ErrorResponse, TableResponse
from query_wise.store.base import TabularStore

router = APIRouter(prefix="/api/v1", tags=["Schema"])


@router.get(
    "/tables",
    response_model=list[TableResponse],
    responses={500: {"model": ErrorResponse}},
    summary="List tables",
)
async def list_tables(store: TabularStore = Depends(get_store)) -> list[TableResponse]:
    tables = await store.list_tables()
    return [TableResponse(name=t.name, description=t.description) for t in tables]


@router.get(
    "/tables/{table_name}/columns",
    response_model=list[ColumnResponse],
    responses={500: {"model": ErrorResponse}},
    summary="List the columns of a table",
    description="Returns an empty list for an unknown table",
)
async def list_columns(
    table_name: str, store: TabularStore = Depends(get_store)
) -> list[ColumnResponse]:
    columns = await store.list_columns(table_name)
    return [
        ColumnResponse(
            name=c.name,
            type=c.type,
            description=c.description,
            nullable=c.nullable,
            default_value=c.default_value,
        )
        for c in columns
    ]
