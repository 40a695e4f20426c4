from __future__ import annotations
from datetime import datetime
from typing import Optional, List

from pydantic import Field
from sqlalchemy import String, DateTime, Float
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Manutencao(Base):
    __tablename__ = "manutencoes"

    id_manutencao: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    id_moto: Mapped[int] = mapped_column(nullable=False, index=True)
    descricao: Mapped[str] = mapped_column(String(2000), nullable=False)
    data_manutencao: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    custo_estimado: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tipo: Mapped[str] = mapped_column(String(2000), nullable=False)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class ManutencaoBase(APIModel):
    id_moto: int = Field(
        ...,
        description="ID of the motorcycle under maintenance"
    )
    descricao: str = Field(
        ...,
        description="What is being done"
    )
    data_manutencao: datetime = Field(
        ...,
        description="Scheduled or performed maintenance date"
    )
    custo_estimado: float = Field(
        0.0,
        description="Estimated cost"
    )
    tipo: str = Field(
        ...,
        description="Maintenance type (e.g. 'Preventiva', 'Corretiva')"
    )

class ManutencaoCreate(ManutencaoBase):
    pass

class ManutencaoUpdate(ManutencaoBase):
    """Full replacement; ID is taken from path"""
    pass

class ManutencaoRead(ManutencaoBase):
    id_manutencao: int = Field(
        ...,
        description="Internal unique identifier for this maintenance record"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
