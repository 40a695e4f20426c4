from __future__ import annotations
from datetime import datetime
from typing import Optional, List

from pydantic import Field
from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class HistoricoManutencao(Base):
    """Movement of a motorcycle from one sector to another."""
    __tablename__ = "historico_manutencoes"

    id_movimentacao: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    id_moto: Mapped[int] = mapped_column(nullable=False, index=True)
    id_setor_origem: Mapped[int] = mapped_column(nullable=False, index=True)
    id_setor_destino: Mapped[int] = mapped_column(nullable=False, index=True)
    data_movimento: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class HistoricoManutencaoBase(APIModel):
    id_moto: int = Field(
        ...,
        description="ID of the motorcycle that moved"
    )
    id_setor_origem: int = Field(
        ...,
        description="Sector the motorcycle left"
    )
    id_setor_destino: int = Field(
        ...,
        description="Sector the motorcycle arrived at"
    )
    data_movimento: datetime = Field(
        ...,
        description="When the movement happened"
    )

class HistoricoManutencaoCreate(HistoricoManutencaoBase):
    pass

class HistoricoManutencaoUpdate(HistoricoManutencaoBase):
    """Full replacement; ID is taken from path"""
    pass

class HistoricoManutencaoRead(HistoricoManutencaoBase):
    id_movimentacao: int = Field(
        ...,
        description="Internal unique identifier for this movement"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
