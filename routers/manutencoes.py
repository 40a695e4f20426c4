import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.manutencao import Manutencao, ManutencaoCreate, ManutencaoRead, ManutencaoUpdate
from models.moto import Moto
from models.pagination import PaginatedResponse
from utils.auth import get_current_user
from utils.filters import FilterSet, apply_filters, contains, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/manutencoes",
    tags=["Manutencoes"],
    dependencies=[Depends(get_current_user)],
)

FILTER_RULES = {
    "motoId": equals(Manutencao.id_moto),
    "tipo": contains(Manutencao.tipo),
}


def hateoas_manutencao(request: Request, manutencao: Manutencao, in_listing: bool = False) -> ManutencaoRead:
    return hateoas_item(
        request,
        ManutencaoRead,
        manutencao,
        get_route="get_manutencao",
        list_route="list_manutencoes",
        path_params={"manutencao_id": manutencao.id_manutencao},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[ManutencaoRead], status_code=200, name="list_manutencoes")
async def list_manutencoes(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moto_id: Optional[int] = Query(None, alias="motoId", description="Filter by motorcycle id"),
    tipo: Optional[str] = Query(None, description="Filter by maintenance type (case-sensitive substring)"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(motoId=moto_id, tipo=tipo)
    query = apply_filters(select(Manutencao), filters, FILTER_RULES).order_by(Manutencao.id_manutencao)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_manutencoes")),
        to_dto=lambda manutencao: hateoas_manutencao(request, manutencao, in_listing=True),
    )


@router.get("/{manutencao_id}", response_model=ManutencaoRead, status_code=200, name="get_manutencao")
async def get_manutencao(
    request: Request,
    manutencao_id: int,
    db: AsyncSession = Depends(get_db),
):
    manutencao = await get_or_404(db, Manutencao, manutencao_id, "Manutencao")
    return hateoas_manutencao(request, manutencao)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=ManutencaoRead, status_code=201, name="create_manutencao")
async def create_manutencao(
    request: Request,
    response: Response,
    manutencao_in: ManutencaoCreate,
    db: AsyncSession = Depends(get_db),
):
    await ensure_exists(db, Moto, manutencao_in.id_moto, "Moto")

    manutencao = Manutencao(**manutencao_in.model_dump())
    db.add(manutencao)
    await db.commit()
    await db.refresh(manutencao)
    logger.info("Created manutencao %s for moto %s", manutencao.id_manutencao, manutencao.id_moto)

    response.headers["Location"] = str(
        request.app.url_path_for("get_manutencao", manutencao_id=manutencao.id_manutencao)
    )
    return hateoas_manutencao(request, manutencao)


@router.put("/{manutencao_id}", status_code=204, name="update_manutencao")
async def update_manutencao(
    manutencao_id: int,
    manutencao_in: ManutencaoUpdate,
    db: AsyncSession = Depends(get_db),
):
    manutencao = await get_or_404(db, Manutencao, manutencao_id, "Manutencao")
    await ensure_changed_exists(db, Moto, manutencao.id_moto, manutencao_in.id_moto, "Moto")

    for field, value in manutencao_in.model_dump().items():
        setattr(manutencao, field, value)

    await db.commit()
    logger.info("Updated manutencao %s", manutencao_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{manutencao_id}", status_code=204, name="delete_manutencao")
async def delete_manutencao(
    manutencao_id: int,
    db: AsyncSession = Depends(get_db),
):
    manutencao = await get_or_404(db, Manutencao, manutencao_id, "Manutencao")

    await db.delete(manutencao)
    await db.commit()
    logger.info("Deleted manutencao %s", manutencao_id)
