import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.lora import Lora, LoraCreate, LoraRead, LoraUpdate
from models.moto import Moto
from models.pagination import PaginatedResponse
from utils.filters import FilterSet, apply_filters, equals, text_contains
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/lora",
    tags=["LoRa"],
)

FILTER_RULES = {
    "motoId": equals(Lora.moto),
    "numeroLora": text_contains(Lora.numero_lora),
}


def hateoas_lora(request: Request, lora: Lora, in_listing: bool = False) -> LoraRead:
    return hateoas_item(
        request,
        LoraRead,
        lora,
        get_route="get_lora",
        list_route="list_lora",
        path_params={"lora_id": lora.id_lora},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[LoraRead], status_code=200, name="list_lora")
async def list_lora(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moto_id: Optional[int] = Query(None, alias="motoId", description="Filter by carrying motorcycle"),
    numero_lora: Optional[str] = Query(None, alias="numeroLora", description="Substring of the device number"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(motoId=moto_id, numeroLora=numero_lora)
    query = apply_filters(select(Lora), filters, FILTER_RULES).order_by(Lora.id_lora)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_lora")),
        to_dto=lambda lora: hateoas_lora(request, lora, in_listing=True),
    )


@router.get("/{lora_id}", response_model=LoraRead, status_code=200, name="get_lora")
async def get_lora(
    request: Request,
    lora_id: int,
    db: AsyncSession = Depends(get_db),
):
    lora = await get_or_404(db, Lora, lora_id, "Lora")
    return hateoas_lora(request, lora)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=LoraRead, status_code=201, name="create_lora")
async def create_lora(
    request: Request,
    response: Response,
    lora_in: LoraCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a LoRa device. Unassigned devices (moto 0 or null) skip the moto check."""
    if lora_in.moto is not None:
        await ensure_exists(db, Moto, lora_in.moto, "Moto")

    lora = Lora(numero_lora=lora_in.numero_lora, moto=lora_in.moto)
    db.add(lora)
    await db.commit()
    await db.refresh(lora)
    logger.info("Created lora %s (numero=%s, moto=%s)", lora.id_lora, lora.numero_lora, lora.moto)

    response.headers["Location"] = str(request.app.url_path_for("get_lora", lora_id=lora.id_lora))
    return hateoas_lora(request, lora)


@router.put("/{lora_id}", status_code=204, name="update_lora")
async def update_lora(
    lora_id: int,
    lora_in: LoraUpdate,
    db: AsyncSession = Depends(get_db),
):
    lora = await get_or_404(db, Lora, lora_id, "Lora")
    await ensure_changed_exists(db, Moto, lora.moto, lora_in.moto, "Moto")

    lora.numero_lora = lora_in.numero_lora
    lora.moto = lora_in.moto

    await db.commit()
    logger.info("Updated lora %s", lora_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{lora_id}", status_code=204, name="delete_lora")
async def delete_lora(
    lora_id: int,
    db: AsyncSession = Depends(get_db),
):
    lora = await get_or_404(db, Lora, lora_id, "Lora")

    await db.delete(lora)
    await db.commit()
    logger.info("Deleted lora %s", lora_id)
