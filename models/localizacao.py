from __future__ import annotations
from typing import Optional, List

from pydantic import Field
from sqlalchemy import Numeric
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Localizacao(Base):
    __tablename__ = "localizacoes"

    id_localizacao: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    latitude: Mapped[float] = mapped_column(Numeric(12, 8, asdecimal=False), nullable=False)
    longitude: Mapped[float] = mapped_column(Numeric(12, 8, asdecimal=False), nullable=False)
    id_moto: Mapped[int] = mapped_column(nullable=False, index=True)
    id_setor: Mapped[int] = mapped_column(nullable=False, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class LocalizacaoBase(APIModel):
    latitude: float = Field(
        ...,
        ge=-90,
        le=90,
        description="Latitude in decimal degrees"
    )
    longitude: float = Field(
        ...,
        ge=-180,
        le=180,
        description="Longitude in decimal degrees"
    )
    id_moto: int = Field(
        ...,
        description="ID of the located motorcycle"
    )
    id_setor: int = Field(
        ...,
        description="ID of the sector the position falls in"
    )

class LocalizacaoCreate(LocalizacaoBase):
    pass

class LocalizacaoUpdate(LocalizacaoBase):
    """Full replacement; ID is taken from path"""
    pass

class LocalizacaoRead(LocalizacaoBase):
    id_localizacao: int = Field(
        ...,
        description="Internal unique identifier for this position"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
