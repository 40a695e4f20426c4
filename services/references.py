from __future__ import annotations

import logging
from typing import Optional, Type, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(db: AsyncSession, model: Type[ModelT], key: int, label: str) -> ModelT:
    """Load a row by primary key or raise 404."""
    obj = await db.get(model, key)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} {key} not found.")
    return obj


async def ensure_exists(db: AsyncSession, model: Type[Base], key: int, label: str) -> None:
    """
    Reject a write that points at a missing row. The check and the write
    are separate statements; a concurrent delete in between is not caught.
    """
    if await db.get(model, key) is None:
        logger.info("Rejected reference to missing %s %s", label, key)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label} {key} not found.",
        )


async def ensure_changed_exists(
    db: AsyncSession,
    model: Type[Base],
    current: Optional[int],
    new: Optional[int],
    label: str,
) -> None:
    """On update, only a reference that actually changes is re-validated."""
    if current != new and new is not None:
        await ensure_exists(db, model, new, label)
