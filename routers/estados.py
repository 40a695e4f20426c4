import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import get_or_404
from models.estado import Estado, EstadoCreate, EstadoRead, EstadoUpdate
from models.pagination import PaginatedResponse
from utils.auth import get_current_user
from utils.filters import FilterSet, apply_filters, iequals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/estados",
    tags=["Estados"],
    dependencies=[Depends(get_current_user)],
)

FILTER_RULES = {
    "sigla": iequals(Estado.sigla),
}


def hateoas_estado(request: Request, estado: Estado, in_listing: bool = False) -> EstadoRead:
    return hateoas_item(
        request,
        EstadoRead,
        estado,
        get_route="get_estado",
        list_route="list_estados",
        path_params={"estado_id": estado.id_estado},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[EstadoRead], status_code=200, name="list_estados")
async def list_estados(
    request: Request,
    db: AsyncSession = Depends(get_db),
    sigla: Optional[str] = Query(None, description="Filter by abbreviation (case-insensitive exact match)"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(sigla=sigla)
    query = apply_filters(select(Estado), filters, FILTER_RULES).order_by(Estado.id_estado)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_estados")),
        to_dto=lambda estado: hateoas_estado(request, estado, in_listing=True),
    )


@router.get("/{estado_id}", response_model=EstadoRead, status_code=200, name="get_estado")
async def get_estado(
    request: Request,
    estado_id: int,
    db: AsyncSession = Depends(get_db),
):
    estado = await get_or_404(db, Estado, estado_id, "Estado")
    return hateoas_estado(request, estado)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=EstadoRead, status_code=201, name="create_estado")
async def create_estado(
    request: Request,
    response: Response,
    estado_in: EstadoCreate,
    db: AsyncSession = Depends(get_db),
):
    estado = Estado(**estado_in.model_dump())
    db.add(estado)
    await db.commit()
    await db.refresh(estado)
    logger.info("Created estado %s (%s)", estado.id_estado, estado.sigla)

    response.headers["Location"] = str(request.app.url_path_for("get_estado", estado_id=estado.id_estado))
    return hateoas_estado(request, estado)


@router.put("/{estado_id}", status_code=204, name="update_estado")
async def update_estado(
    estado_id: int,
    estado_in: EstadoUpdate,
    db: AsyncSession = Depends(get_db),
):
    estado = await get_or_404(db, Estado, estado_id, "Estado")

    estado.nome = estado_in.nome
    estado.sigla = estado_in.sigla

    await db.commit()
    logger.info("Updated estado %s", estado_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{estado_id}", status_code=204, name="delete_estado")
async def delete_estado(
    estado_id: int,
    db: AsyncSession = Depends(get_db),
):
    estado = await get_or_404(db, Estado, estado_id, "Estado")

    await db.delete(estado)
    await db.commit()
    logger.info("Deleted estado %s", estado_id)
