import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.cidade import Cidade, CidadeCreate, CidadeRead, CidadeUpdate
from models.estado import Estado
from models.pagination import PaginatedResponse
from utils.filters import FilterSet, apply_filters, contains, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cidades",
    tags=["Cidades"],
)

FILTER_RULES = {
    "nome": contains(Cidade.nome),
    "estadoId": equals(Cidade.id_estado),
}


def hateoas_cidade(request: Request, cidade: Cidade, in_listing: bool = False) -> CidadeRead:
    return hateoas_item(
        request,
        CidadeRead,
        cidade,
        get_route="get_cidade",
        list_route="list_cidades",
        path_params={"cidade_id": cidade.id_cidade},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[CidadeRead], status_code=200, name="list_cidades")
async def list_cidades(
    request: Request,
    db: AsyncSession = Depends(get_db),
    # Filters
    nome: Optional[str] = Query(None, description="Filter by name (case-sensitive substring)"),
    estado_id: Optional[int] = Query(None, alias="estadoId", description="Filter by state id"),
    # Pagination
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    """List cities, optionally filtered by name or state."""
    filters = FilterSet.of(nome=nome, estadoId=estado_id)
    query = apply_filters(select(Cidade), filters, FILTER_RULES).order_by(Cidade.id_cidade)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_cidades")),
        to_dto=lambda cidade: hateoas_cidade(request, cidade, in_listing=True),
    )


@router.get("/{cidade_id}", response_model=CidadeRead, status_code=200, name="get_cidade")
async def get_cidade(
    request: Request,
    cidade_id: int,
    db: AsyncSession = Depends(get_db),
):
    cidade = await get_or_404(db, Cidade, cidade_id, "Cidade")
    return hateoas_cidade(request, cidade)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=CidadeRead, status_code=201, name="create_cidade")
async def create_cidade(
    request: Request,
    response: Response,
    cidade_in: CidadeCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a city linked to an existing state."""
    await ensure_exists(db, Estado, cidade_in.id_estado, "Estado")

    cidade = Cidade(**cidade_in.model_dump())
    db.add(cidade)
    await db.commit()
    await db.refresh(cidade)
    logger.info("Created cidade %s", cidade.id_cidade)

    response.headers["Location"] = str(request.app.url_path_for("get_cidade", cidade_id=cidade.id_cidade))
    return hateoas_cidade(request, cidade)


@router.put("/{cidade_id}", status_code=204, name="update_cidade")
async def update_cidade(
    cidade_id: int,
    cidade_in: CidadeUpdate,
    db: AsyncSession = Depends(get_db),
):
    cidade = await get_or_404(db, Cidade, cidade_id, "Cidade")
    await ensure_changed_exists(db, Estado, cidade.id_estado, cidade_in.id_estado, "Estado")

    for field, value in cidade_in.model_dump().items():
        setattr(cidade, field, value)

    await db.commit()
    logger.info("Updated cidade %s", cidade_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{cidade_id}", status_code=204, name="delete_cidade")
async def delete_cidade(
    cidade_id: int,
    db: AsyncSession = Depends(get_db),
):
    # No cascade: unidades pointing here are left as they are
    cidade = await get_or_404(db, Cidade, cidade_id, "Cidade")

    await db.delete(cidade)
    await db.commit()
    logger.info("Deleted cidade %s", cidade_id)
