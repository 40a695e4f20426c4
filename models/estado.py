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
class Estado(Base):
    __tablename__ = "estados"

    id_estado: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(2000), nullable=False)
    sigla: Mapped[str] = mapped_column(String(10), nullable=False, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class EstadoBase(APIModel):
    nome: str = Field(
        ...,
        description="State name",
        examples=["São Paulo"]
    )
    sigla: str = Field(
        ...,
        description="State abbreviation",
        examples=["SP"]
    )

class EstadoCreate(EstadoBase):
    pass

class EstadoUpdate(EstadoBase):
    """Full replacement; ID is taken from path"""
    pass

class EstadoRead(EstadoBase):
    id_estado: int = Field(
        ...,
        description="Internal unique identifier for this state"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
