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
class Defeito(Base):
    __tablename__ = "defeitos"

    id_defeito: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(2000), nullable=False)
    descricao: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class DefeitoBase(APIModel):
    # Optional here so a missing name gets the same 400 as a blank one
    nome: Optional[str] = Field(
        None,
        description="Defect name (required, must not be blank)"
    )
    descricao: Optional[str] = Field(
        None,
        description="Free-text description of the defect"
    )

class DefeitoCreate(DefeitoBase):
    pass

class DefeitoUpdate(DefeitoBase):
    """Full replacement; ID is taken from path"""
    pass

class DefeitoRead(DefeitoBase):
    id_defeito: int = Field(
        ...,
        description="Internal unique identifier for this defect"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
