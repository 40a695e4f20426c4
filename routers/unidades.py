import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.cidade import Cidade
from models.unidade import Unidade, UnidadeCreate, UnidadeRead, UnidadeUpdate
from models.pagination import PaginatedResponse
from utils.filters import FilterSet, apply_filters, contains, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/unidades",
    tags=["Unidades"],
)

FILTER_RULES = {
    "cidadeId": equals(Unidade.id_cidade),
    "nome": contains(Unidade.nome),
}


def hateoas_unidade(request: Request, unidade: Unidade, in_listing: bool = False) -> UnidadeRead:
    return hateoas_item(
        request,
        UnidadeRead,
        unidade,
        get_route="get_unidade",
        list_route="list_unidades",
        path_params={"unidade_id": unidade.id_unidade},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[UnidadeRead], status_code=200, name="list_unidades")
async def list_unidades(
    request: Request,
    db: AsyncSession = Depends(get_db),
    cidade_id: Optional[int] = Query(None, alias="cidadeId", description="Filter by city id"),
    nome: Optional[str] = Query(None, description="Filter by name (case-sensitive substring)"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(cidadeId=cidade_id, nome=nome)
    query = apply_filters(select(Unidade), filters, FILTER_RULES).order_by(Unidade.id_unidade)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_unidades")),
        to_dto=lambda unidade: hateoas_unidade(request, unidade, in_listing=True),
    )


@router.get("/{unidade_id}", response_model=UnidadeRead, status_code=200, name="get_unidade")
async def get_unidade(
    request: Request,
    unidade_id: int,
    db: AsyncSession = Depends(get_db),
):
    unidade = await get_or_404(db, Unidade, unidade_id, "Unidade")
    return hateoas_unidade(request, unidade)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=UnidadeRead, status_code=201, name="create_unidade")
async def create_unidade(
    request: Request,
    response: Response,
    unidade_in: UnidadeCreate,
    db: AsyncSession = Depends(get_db),
):
    await ensure_exists(db, Cidade, unidade_in.id_cidade, "Cidade")

    unidade = Unidade(**unidade_in.model_dump())
    db.add(unidade)
    await db.commit()
    await db.refresh(unidade)
    logger.info("Created unidade %s", unidade.id_unidade)

    response.headers["Location"] = str(request.app.url_path_for("get_unidade", unidade_id=unidade.id_unidade))
    return hateoas_unidade(request, unidade)


@router.put("/{unidade_id}", status_code=204, name="update_unidade")
async def update_unidade(
    unidade_id: int,
    unidade_in: UnidadeUpdate,
    db: AsyncSession = Depends(get_db),
):
    unidade = await get_or_404(db, Unidade, unidade_id, "Unidade")
    await ensure_changed_exists(db, Cidade, unidade.id_cidade, unidade_in.id_cidade, "Cidade")

    unidade.nome = unidade_in.nome
    unidade.id_cidade = unidade_in.id_cidade

    await db.commit()
    logger.info("Updated unidade %s", unidade_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{unidade_id}", status_code=204, name="delete_unidade")
async def delete_unidade(
    unidade_id: int,
    db: AsyncSession = Depends(get_db),
):
    unidade = await get_or_404(db, Unidade, unidade_id, "Unidade")

    await db.delete(unidade)
    await db.commit()
    logger.info("Deleted unidade %s", unidade_id)
