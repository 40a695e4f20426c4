import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.historico_manutencao import (
    HistoricoManutencao,
    HistoricoManutencaoCreate,
    HistoricoManutencaoRead,
    HistoricoManutencaoUpdate,
)
from models.moto import Moto
from models.setor import Setor
from models.pagination import PaginatedResponse
from utils.filters import FilterSet, apply_filters, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/historicos",
    tags=["Historicos"],
)

FILTER_RULES = {
    "motoId": equals(HistoricoManutencao.id_moto),
    "setorOrigemId": equals(HistoricoManutencao.id_setor_origem),
    "setorDestinoId": equals(HistoricoManutencao.id_setor_destino),
}


def hateoas_historico(
    request: Request, historico: HistoricoManutencao, in_listing: bool = False
) -> HistoricoManutencaoRead:
    return hateoas_item(
        request,
        HistoricoManutencaoRead,
        historico,
        get_route="get_historico",
        list_route="list_historicos",
        path_params={"historico_id": historico.id_movimentacao},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[HistoricoManutencaoRead], status_code=200, name="list_historicos")
async def list_historicos(
    request: Request,
    db: AsyncSession = Depends(get_db),
    # Filters
    moto_id: Optional[int] = Query(None, alias="motoId", description="Filter by motorcycle id"),
    setor_origem_id: Optional[int] = Query(None, alias="setorOrigemId", description="Filter by origin sector"),
    setor_destino_id: Optional[int] = Query(None, alias="setorDestinoId", description="Filter by destination sector"),
    # Pagination
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    """List sector-to-sector movements of motorcycles."""
    filters = FilterSet.of(
        motoId=moto_id,
        setorOrigemId=setor_origem_id,
        setorDestinoId=setor_destino_id,
    )
    query = apply_filters(select(HistoricoManutencao), filters, FILTER_RULES).order_by(
        HistoricoManutencao.id_movimentacao
    )

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_historicos")),
        to_dto=lambda historico: hateoas_historico(request, historico, in_listing=True),
    )


@router.get("/{historico_id}", response_model=HistoricoManutencaoRead, status_code=200, name="get_historico")
async def get_historico(
    request: Request,
    historico_id: int,
    db: AsyncSession = Depends(get_db),
):
    historico = await get_or_404(db, HistoricoManutencao, historico_id, "Historico")
    return hateoas_historico(request, historico)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=HistoricoManutencaoRead, status_code=201, name="create_historico")
async def create_historico(
    request: Request,
    response: Response,
    historico_in: HistoricoManutencaoCreate,
    db: AsyncSession = Depends(get_db),
):
    await ensure_exists(db, Moto, historico_in.id_moto, "Moto")
    await ensure_exists(db, Setor, historico_in.id_setor_origem, "Origin Setor")
    await ensure_exists(db, Setor, historico_in.id_setor_destino, "Destination Setor")

    historico = HistoricoManutencao(**historico_in.model_dump())
    db.add(historico)
    await db.commit()
    await db.refresh(historico)
    logger.info(
        "Recorded movement %s: moto %s from setor %s to %s",
        historico.id_movimentacao,
        historico.id_moto,
        historico.id_setor_origem,
        historico.id_setor_destino,
    )

    response.headers["Location"] = str(
        request.app.url_path_for("get_historico", historico_id=historico.id_movimentacao)
    )
    return hateoas_historico(request, historico)


@router.put("/{historico_id}", status_code=204, name="update_historico")
async def update_historico(
    historico_id: int,
    historico_in: HistoricoManutencaoUpdate,
    db: AsyncSession = Depends(get_db),
):
    historico = await get_or_404(db, HistoricoManutencao, historico_id, "Historico")
    await ensure_changed_exists(db, Moto, historico.id_moto, historico_in.id_moto, "Moto")
    await ensure_changed_exists(
        db, Setor, historico.id_setor_origem, historico_in.id_setor_origem, "Origin Setor"
    )
    await ensure_changed_exists(
        db, Setor, historico.id_setor_destino, historico_in.id_setor_destino, "Destination Setor"
    )

    for field, value in historico_in.model_dump().items():
        setattr(historico, field, value)

    await db.commit()
    logger.info("Updated movement %s", historico_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{historico_id}", status_code=204, name="delete_historico")
async def delete_historico(
    historico_id: int,
    db: AsyncSession = Depends(get_db),
):
    historico = await get_or_404(db, HistoricoManutencao, historico_id, "Historico")

    await db.delete(historico)
    await db.commit()
    logger.info("Deleted movement %s", historico_id)
