import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.references import get_or_404
from models.defeito import Defeito, DefeitoCreate, DefeitoRead, DefeitoUpdate
from models.pagination import PaginatedResponse
from utils.auth import get_current_user
from utils.filters import FilterSet, apply_filters, contains, is_active
from utils.hateoas import hateoas_item
from utils.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/defeitos",
    tags=["Defeitos"],
    dependencies=[Depends(get_current_user)],
)

FILTER_RULES = {
    "nome": contains(Defeito.nome),
}


def hateoas_defeito(request: Request, defeito: Defeito, in_listing: bool = False) -> DefeitoRead:
    return hateoas_item(
        request,
        DefeitoRead,
        defeito,
        get_route="get_defeito",
        list_route="list_defeitos",
        path_params={"defeito_id": defeito.id_defeito},
        in_listing=in_listing,
    )


def require_nome(nome: Optional[str]) -> str:
    if not is_active(nome):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Defeito nome is required.",
        )
    return nome


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[DefeitoRead], status_code=200, name="list_defeitos")
async def list_defeitos(
    request: Request,
    db: AsyncSession = Depends(get_db),
    nome: Optional[str] = Query(None, description="Filter by name (case-sensitive substring)"),
    page: int = Query(1, description="Page number (1-based); lower values become 1"),
    page_size: int = Query(10, alias="pageSize", description="Page size; clamped to 1..100"),
):
    filters = FilterSet.of(nome=nome)
    query = apply_filters(select(Defeito), filters, FILTER_RULES).order_by(Defeito.id_defeito)

    return await paginate(
        db,
        query,
        page_request=PageRequest.normalize(page, page_size),
        filters=filters,
        base_path=str(request.app.url_path_for("list_defeitos")),
        to_dto=lambda defeito: hateoas_defeito(request, defeito, in_listing=True),
    )


@router.get("/{defeito_id}", response_model=DefeitoRead, status_code=200, name="get_defeito")
async def get_defeito(
    request: Request,
    defeito_id: int,
    db: AsyncSession = Depends(get_db),
):
    defeito = await get_or_404(db, Defeito, defeito_id, "Defeito")
    return hateoas_defeito(request, defeito)


# -----------------------------------------------------------------------------
# POST/PUT Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=DefeitoRead, status_code=201, name="create_defeito")
async def create_defeito(
    request: Request,
    response: Response,
    defeito_in: DefeitoCreate,
    db: AsyncSession = Depends(get_db),
):
    defeito = Defeito(
        nome=require_nome(defeito_in.nome),
        descricao=defeito_in.descricao,
    )
    db.add(defeito)
    await db.commit()
    await db.refresh(defeito)
    logger.info("Created defeito %s", defeito.id_defeito)

    response.headers["Location"] = str(request.app.url_path_for("get_defeito", defeito_id=defeito.id_defeito))
    return hateoas_defeito(request, defeito)


@router.put("/{defeito_id}", status_code=204, name="update_defeito")
async def update_defeito(
    defeito_id: int,
    defeito_in: DefeitoUpdate,
    db: AsyncSession = Depends(get_db),
):
    defeito = await get_or_404(db, Defeito, defeito_id, "Defeito")

    defeito.nome = require_nome(defeito_in.nome)
    defeito.descricao = defeito_in.descricao

    await db.commit()
    logger.info("Updated defeito %s", defeito_id)


# -----------------------------------------------------------------------------
# DELETE Endpoints
# -----------------------------------------------------------------------------

@router.delete("/{defeito_id}", status_code=204, name="delete_defeito")
async def delete_defeito(
    defeito_id: int,
    db: AsyncSession = Depends(get_db),
):
    defeito = await get_or_404(db, Defeito, defeito_id, "Defeito")

    await db.delete(defeito)
    await db.commit()
    logger.info("Deleted defeito %s", defeito_id)
