import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.moto import Moto, MotoCreate, MotoRead, MotoUpdate
from models.setor import Setor
from models.pagination import PaginatedResponse
from utils.auth import get_current_user
from utils.filters import FilterSet, apply_filters, contains, equals
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/motos",
    tags=["Motos"],
    dependencies=[Depends(get_current_user)],
)

FILTER_RULES = {
    "placa": contains(Moto.placa),
    "modelo": contains(Moto.modelo),
    "status": contains(Moto.status),
    "setorId": equals(Moto.id_setor),
}


def hateoas_moto(request: Request, moto: Moto, in_listing: bool = False) -> MotoRead:
    return hateoas_item(
        request,
        MotoRead,
        moto,
        get_route="get_moto",
        list_route="list_motos",
        path_params={"moto_id": moto.id_moto},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[MotoRead], status_code=200, name="list_motos")
async def list_motos(
    request: Request,
    db: AsyncSession = Depends(get_db),
    # Filters
    placa: Optional[str] = Query(None, description="Filter by plate (case-sensitive substring)"),
    modelo: Optional[str] = Query(None, description="Filter by model (case-sensitive substring)"),
    status: Optional[str] = Query(None, description="Filter by status (case-sensitive substring)"),
    setor_id: Optional[int] = Query(None, alias="setorId", description="Filter by sector id"),
    # Pagination
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    """List motorcycles with filtering and pagination."""
    filters = FilterSet.of(placa=placa, modelo=modelo, status=status, setorId=setor_id)
    query = apply_filters(select(Moto), filters, FILTER_RULES).order_by(Moto.id_moto)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_motos")),
        to_dto=lambda moto: hateoas_moto(request, moto, in_listing=True),
    )


@router.get("/{moto_id}", response_model=MotoRead, status_code=200, name="get_moto")
async def get_moto(
    request: Request,
    moto_id: int,
    db: AsyncSession = Depends(get_db),
):
    moto = await get_or_404(db, Moto, moto_id, "Moto")
    return hateoas_moto(request, moto)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=MotoRead, status_code=201, name="create_moto")
async def create_moto(
    request: Request,
    response: Response,
    moto_in: MotoCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a motorcycle in an existing sector."""
    await ensure_exists(db, Setor, moto_in.id_setor, "Setor")

    moto = Moto(**moto_in.model_dump())
    db.add(moto)
    await db.commit()
    await db.refresh(moto)
    logger.info("Created moto %s (placa=%s)", moto.id_moto, moto.placa)

    response.headers["Location"] = str(request.app.url_path_for("get_moto", moto_id=moto.id_moto))
    return hateoas_moto(request, moto)


@router.put("/{moto_id}", status_code=204, name="update_moto")
async def update_moto(
    moto_id: int,
    moto_in: MotoUpdate,
    db: AsyncSession = Depends(get_db),
):
    moto = await get_or_404(db, Moto, moto_id, "Moto")
    await ensure_changed_exists(db, Setor, moto.id_setor, moto_in.id_setor, "Setor")

    moto.modelo = moto_in.modelo
    moto.placa = moto_in.placa
    moto.status = moto_in.status
    moto.id_setor = moto_in.id_setor
    moto.data_atualizacao = datetime.now(timezone.utc)

    await db.commit()
    logger.info("Updated moto %s", moto_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{moto_id}", status_code=204, name="delete_moto")
async def delete_moto(
    moto_id: int,
    db: AsyncSession = Depends(get_db),
):
    # Trackers, defects and history rows that reference this moto are kept
    moto = await get_or_404(db, Moto, moto_id, "Moto")

    await db.delete(moto)
    await db.commit()
    logger.info("Deleted moto %s", moto_id)
