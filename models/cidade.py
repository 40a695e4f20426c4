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
class Cidade(Base):
    __tablename__ = "cidades"

    id_cidade: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(2000), nullable=False)

    # References estados.id_estado; existence is checked by the router, not the DB
    id_estado: Mapped[int] = mapped_column(nullable=False, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class CidadeBase(APIModel):
    nome: str = Field(
        ...,
        description="City name"
    )
    id_estado: int = Field(
        ...,
        description="ID of the state this city belongs to"
    )

class CidadeCreate(CidadeBase):
    pass

class CidadeUpdate(CidadeBase):
    """Full replacement; ID is taken from path"""
    pass

class CidadeRead(CidadeBase):
    id_cidade: int = Field(
        ...,
        description="Internal unique identifier for this city"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
