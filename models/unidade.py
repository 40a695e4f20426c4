from __future__ import annotations
from typing import Optional, List

from pydantic import Field
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Unidade(Base):
    __tablename__ = "unidades"

    id_unidade: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(2000), nullable=False)
    id_cidade: Mapped[int] = mapped_column(nullable=False, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class UnidadeBase(APIModel):
    nome: str = Field(
        ...,
        description="Unit (branch/yard) name"
    )
    id_cidade: int = Field(
        ...,
        description="ID of the city where this unit is located"
    )

class UnidadeCreate(UnidadeBase):
    pass

class UnidadeUpdate(UnidadeBase):
    """Full replacement; ID is taken from path"""
    pass

class UnidadeRead(UnidadeBase):
    id_unidade: int = Field(
        ...,
        description="Internal unique identifier for this unit"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
