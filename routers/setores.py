import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.setor import Setor, SetorCreate, SetorRead, SetorUpdate
from models.unidade import Unidade
from models.pagination import PaginatedResponse
from utils.filters import FilterSet, apply_filters, contains, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/setores",
    tags=["Setores"],
)

FILTER_RULES = {
    "unidadeId": equals(Setor.id_unidade),
    "nome": contains(Setor.nome),
}


def hateoas_setor(request: Request, setor: Setor, in_listing: bool = False) -> SetorRead:
    return hateoas_item(
        request,
        SetorRead,
        setor,
        get_route="get_setor",
        list_route="list_setores",
        path_params={"setor_id": setor.id_setor},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[SetorRead], status_code=200, name="list_setores")
async def list_setores(
    request: Request,
    db: AsyncSession = Depends(get_db),
    unidade_id: Optional[int] = Query(None, alias="unidadeId", description="Filter by unit id"),
    nome: Optional[str] = Query(None, description="Filter by name (case-sensitive substring)"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(unidadeId=unidade_id, nome=nome)
    query = apply_filters(select(Setor), filters, FILTER_RULES).order_by(Setor.id_setor)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_setores")),
        to_dto=lambda setor: hateoas_setor(request, setor, in_listing=True),
    )


@router.get("/{setor_id}", response_model=SetorRead, status_code=200, name="get_setor")
async def get_setor(
    request: Request,
    setor_id: int,
    db: AsyncSession = Depends(get_db),
):
    setor = await get_or_404(db, Setor, setor_id, "Setor")
    return hateoas_setor(request, setor)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=SetorRead, status_code=201, name="create_setor")
async def create_setor(
    request: Request,
    response: Response,
    setor_in: SetorCreate,
    db: AsyncSession = Depends(get_db),
):
    await ensure_exists(db, Unidade, setor_in.id_unidade, "Unidade")

    setor = Setor(**setor_in.model_dump())
    db.add(setor)
    await db.commit()
    await db.refresh(setor)
    logger.info("Created setor %s", setor.id_setor)

    response.headers["Location"] = str(request.app.url_path_for("get_setor", setor_id=setor.id_setor))
    return hateoas_setor(request, setor)


@router.put("/{setor_id}", status_code=204, name="update_setor")
async def update_setor(
    setor_id: int,
    setor_in: SetorUpdate,
    db: AsyncSession = Depends(get_db),
):
    setor = await get_or_404(db, Setor, setor_id, "Setor")
    await ensure_changed_exists(db, Unidade, setor.id_unidade, setor_in.id_unidade, "Unidade")

    setor.nome = setor_in.nome
    setor.id_unidade = setor_in.id_unidade

    await db.commit()
    logger.info("Updated setor %s", setor_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{setor_id}", status_code=204, name="delete_setor")
async def delete_setor(
    setor_id: int,
    db: AsyncSession = Depends(get_db),
):
    setor = await get_or_404(db, Setor, setor_id, "Setor")

    await db.delete(setor)
    await db.commit()
    logger.info("Deleted setor %s", setor_id)
