import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.defeito import Defeito
from models.defeito_moto import DefeitoMoto, DefeitoMotoCreate, DefeitoMotoRead, DefeitoMotoUpdate
from models.moto import Moto
from models.pagination import PaginatedResponse
from utils.filters import FilterSet, apply_filters, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/defeitos-moto",
    tags=["Defeitos por Moto"],
)

FILTER_RULES = {
    "motoId": equals(DefeitoMoto.id_moto),
    "defeitoId": equals(DefeitoMoto.id_defeito),
}


def hateoas_defeito_moto(request: Request, report: DefeitoMoto, in_listing: bool = False) -> DefeitoMotoRead:
    return hateoas_item(
        request,
        DefeitoMotoRead,
        report,
        get_route="get_defeito_moto",
        list_route="list_defeitos_moto",
        path_params={"defeito_moto_id": report.id_defeito_moto},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[DefeitoMotoRead], status_code=200, name="list_defeitos_moto")
async def list_defeitos_moto(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moto_id: Optional[int] = Query(None, alias="motoId", description="Filter by motorcycle id"),
    defeito_id: Optional[int] = Query(None, alias="defeitoId", description="Filter by defect type id"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(motoId=moto_id, defeitoId=defeito_id)
    query = apply_filters(select(DefeitoMoto), filters, FILTER_RULES).order_by(DefeitoMoto.id_defeito_moto)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_defeitos_moto")),
        to_dto=lambda report: hateoas_defeito_moto(request, report, in_listing=True),
    )


@router.get("/{defeito_moto_id}", response_model=DefeitoMotoRead, status_code=200, name="get_defeito_moto")
async def get_defeito_moto(
    request: Request,
    defeito_moto_id: int,
    db: AsyncSession = Depends(get_db),
):
    report = await get_or_404(db, DefeitoMoto, defeito_moto_id, "DefeitoMoto")
    return hateoas_defeito_moto(request, report)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=DefeitoMotoRead, status_code=201, name="create_defeito_moto")
async def create_defeito_moto(
    request: Request,
    response: Response,
    report_in: DefeitoMotoCreate,
    db: AsyncSession = Depends(get_db),
):
    """Report a defect on a motorcycle. Both the moto and the defect type must exist."""
    await ensure_exists(db, Moto, report_in.id_moto, "Moto")
    await ensure_exists(db, Defeito, report_in.id_defeito, "Defeito")

    now = datetime.now(timezone.utc)
    report = DefeitoMoto(
        id_moto=report_in.id_moto,
        id_defeito=report_in.id_defeito,
        data_registro=report_in.data_registro or now,
        data_atualizacao=report_in.data_atualizacao or now,
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    logger.info("Created defeito-moto %s (moto=%s, defeito=%s)", report.id_defeito_moto, report.id_moto, report.id_defeito)

    response.headers["Location"] = str(
        request.app.url_path_for("get_defeito_moto", defeito_moto_id=report.id_defeito_moto)
    )
    return hateoas_defeito_moto(request, report)


@router.put("/{defeito_moto_id}", status_code=204, name="update_defeito_moto")
async def update_defeito_moto(
    defeito_moto_id: int,
    report_in: DefeitoMotoUpdate,
    db: AsyncSession = Depends(get_db),
):
    report = await get_or_404(db, DefeitoMoto, defeito_moto_id, "DefeitoMoto")
    await ensure_changed_exists(db, Moto, report.id_moto, report_in.id_moto, "Moto")
    await ensure_changed_exists(db, Defeito, report.id_defeito, report_in.id_defeito, "Defeito")

    report.id_moto = report_in.id_moto
    report.id_defeito = report_in.id_defeito
    if report_in.data_registro is not None:
        report.data_registro = report_in.data_registro
    report.data_atualizacao = report_in.data_atualizacao or datetime.now(timezone.utc)

    await db.commit()
    logger.info("Updated defeito-moto %s", defeito_moto_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{defeito_moto_id}", status_code=204, name="delete_defeito_moto")
async def delete_defeito_moto(
    defeito_moto_id: int,
    db: AsyncSession = Depends(get_db),
):
    report = await get_or_404(db, DefeitoMoto, defeito_moto_id, "DefeitoMoto")

    await db.delete(report)
    await db.commit()
    logger.info("Deleted defeito-moto %s", defeito_moto_id)
