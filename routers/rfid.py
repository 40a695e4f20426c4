import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import ensure_changed_exists, ensure_exists, get_or_404
from models.moto import Moto
from models.rfid import Rfid, RfidCreate, RfidRead, RfidUpdate
from models.pagination import PaginatedResponse
from utils.auth import get_current_user
from utils.filters import FilterSet, apply_filters, equals, text_contains
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/rfid",
    tags=["RFID"],
    dependencies=[Depends(get_current_user)],
)

FILTER_RULES = {
    "motoId": equals(Rfid.id_moto),
    "numeroRfid": text_contains(Rfid.numero_rfid),
}


def hateoas_rfid(request: Request, rfid: Rfid, in_listing: bool = False) -> RfidRead:
    return hateoas_item(
        request,
        RfidRead,
        rfid,
        get_route="get_rfid",
        list_route="list_rfid",
        path_params={"rfid_id": rfid.id_rfid},
        in_listing=in_listing,
    )


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[RfidRead], status_code=200, name="list_rfid")
async def list_rfid(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moto_id: Optional[int] = Query(None, alias="motoId", description="Filter by carrying motorcycle"),
    numero_rfid: Optional[str] = Query(None, alias="numeroRfid", description="Substring of the tag number"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(motoId=moto_id, numeroRfid=numero_rfid)
    query = apply_filters(select(Rfid), filters, FILTER_RULES).order_by(Rfid.id_rfid)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_rfid")),
        to_dto=lambda rfid: hateoas_rfid(request, rfid, in_listing=True),
    )


@router.get("/{rfid_id}", response_model=RfidRead, status_code=200, name="get_rfid")
async def get_rfid(
    request: Request,
    rfid_id: int,
    db: AsyncSession = Depends(get_db),
):
    rfid = await get_or_404(db, Rfid, rfid_id, "Rfid")
    return hateoas_rfid(request, rfid)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=RfidRead, status_code=201, name="create_rfid")
async def create_rfid(
    request: Request,
    response: Response,
    rfid_in: RfidCreate,
    db: AsyncSession = Depends(get_db),
):
    await ensure_exists(db, Moto, rfid_in.id_moto, "Moto")

    rfid = Rfid(**rfid_in.model_dump())
    db.add(rfid)
    await db.commit()
    await db.refresh(rfid)
    logger.info("Created rfid %s (numero=%s, moto=%s)", rfid.id_rfid, rfid.numero_rfid, rfid.id_moto)

    response.headers["Location"] = str(request.app.url_path_for("get_rfid", rfid_id=rfid.id_rfid))
    return hateoas_rfid(request, rfid)


@router.put("/{rfid_id}", status_code=204, name="update_rfid")
async def update_rfid(
    rfid_id: int,
    rfid_in: RfidUpdate,
    db: AsyncSession = Depends(get_db),
):
    rfid = await get_or_404(db, Rfid, rfid_id, "Rfid")
    await ensure_changed_exists(db, Moto, rfid.id_moto, rfid_in.id_moto, "Moto")

    rfid.numero_rfid = rfid_in.numero_rfid
    rfid.id_moto = rfid_in.id_moto

    await db.commit()
    logger.info("Updated rfid %s", rfid_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{rfid_id}", status_code=204, name="delete_rfid")
async def delete_rfid(
    rfid_id: int,
    db: AsyncSession = Depends(get_db),
):
    rfid = await get_or_404(db, Rfid, rfid_id, "Rfid")

    await db.delete(rfid)
    await db.commit()
    logger.info("Deleted rfid %s", rfid_id)
