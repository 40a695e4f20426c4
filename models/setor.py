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
class Setor(Base):
    __tablename__ = "setores"

    id_setor: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(2000), nullable=False)
    id_unidade: Mapped[int] = mapped_column(nullable=False, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class SetorBase(APIModel):
    nome: str = Field(
        ...,
        description="Sector name inside a unit's yard"
    )
    id_unidade: int = Field(
        ...,
        description="ID of the unit this sector belongs to"
    )

class SetorCreate(SetorBase):
    pass

class SetorUpdate(SetorBase):
    """Full replacement; ID is taken from path"""
    pass

class SetorRead(SetorBase):
    id_setor: int = Field(
        ...,
        description="Internal unique identifier for this sector"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
