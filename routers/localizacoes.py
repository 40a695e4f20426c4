import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.localizacao import Localizacao, LocalizacaoCreate, LocalizacaoRead, LocalizacaoUpdate
from models.moto import Moto
from models.setor import Setor
from models.pagination import PaginatedResponse
from utils.auth import get_current_user
from utils.filters import FilterSet, apply_filters, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/localizacoes",
    tags=["Localizacoes"],
    dependencies=[Depends(get_current_user)],
)

FILTER_RULES = {
    "motoId": equals(Localizacao.id_moto),
    "setorId": equals(Localizacao.id_setor),
}


def hateoas_localizacao(request: Request, localizacao: Localizacao, in_listing: bool = False) -> LocalizacaoRead:
    return hateoas_item(
        request,
        LocalizacaoRead,
        localizacao,
        get_route="get_localizacao",
        list_route="list_localizacoes",
        path_params={"localizacao_id": localizacao.id_localizacao},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[LocalizacaoRead], status_code=200, name="list_localizacoes")
async def list_localizacoes(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moto_id: Optional[int] = Query(None, alias="motoId", description="Filter by motorcycle id"),
    setor_id: Optional[int] = Query(None, alias="setorId", description="Filter by sector id"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(motoId=moto_id, setorId=setor_id)
    query = apply_filters(select(Localizacao), filters, FILTER_RULES).order_by(Localizacao.id_localizacao)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_localizacoes")),
        to_dto=lambda localizacao: hateoas_localizacao(request, localizacao, in_listing=True),
    )


@router.get("/{localizacao_id}", response_model=LocalizacaoRead, status_code=200, name="get_localizacao")
async def get_localizacao(
    request: Request,
    localizacao_id: int,
    db: AsyncSession = Depends(get_db),
):
    localizacao = await get_or_404(db, Localizacao, localizacao_id, "Localizacao")
    return hateoas_localizacao(request, localizacao)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=LocalizacaoRead, status_code=201, name="create_localizacao")
async def create_localizacao(
    request: Request,
    response: Response,
    localizacao_in: LocalizacaoCreate,
    db: AsyncSession = Depends(get_db),
):
    await ensure_exists(db, Moto, localizacao_in.id_moto, "Moto")
    await ensure_exists(db, Setor, localizacao_in.id_setor, "Setor")

    localizacao = Localizacao(**localizacao_in.model_dump())
    db.add(localizacao)
    await db.commit()
    await db.refresh(localizacao)
    logger.info("Created localizacao %s for moto %s", localizacao.id_localizacao, localizacao.id_moto)

    response.headers["Location"] = str(
        request.app.url_path_for("get_localizacao", localizacao_id=localizacao.id_localizacao)
    )
    return hateoas_localizacao(request, localizacao)


@router.put("/{localizacao_id}", status_code=204, name="update_localizacao")
async def update_localizacao(
    localizacao_id: int,
    localizacao_in: LocalizacaoUpdate,
    db: AsyncSession = Depends(get_db),
):
    localizacao = await get_or_404(db, Localizacao, localizacao_id, "Localizacao")
    await ensure_changed_exists(db, Moto, localizacao.id_moto, localizacao_in.id_moto, "Moto")
    await ensure_changed_exists(db, Setor, localizacao.id_setor, localizacao_in.id_setor, "Setor")

    for field, value in localizacao_in.model_dump().items():
        setattr(localizacao, field, value)

    await db.commit()
    logger.info("Updated localizacao %s", localizacao_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{localizacao_id}", status_code=204, name="delete_localizacao")
async def delete_localizacao(
    localizacao_id: int,
    db: AsyncSession = Depends(get_db),
):
    localizacao = await get_or_404(db, Localizacao, localizacao_id, "Localizacao")

    await db.delete(localizacao)
    await db.commit()
    logger.info("Deleted localizacao %s", localizacao_id)
