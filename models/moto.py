from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, List

from pydantic import Field
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Moto(Base):
    __tablename__ = "motos"

    id_moto: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    modelo: Mapped[str] = mapped_column(String(2000), nullable=False)
    placa: Mapped[str] = mapped_column(String(2000), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(2000), nullable=False)

    data_cadastro: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    data_atualizacao: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    id_setor: Mapped[int] = mapped_column(nullable=False, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class MotoBase(APIModel):
    modelo: str = Field(
        ...,
        description="Motorcycle model",
        examples=["Honda Pop 110i"]
    )
    placa: str = Field(
        ...,
        description="License plate",
        examples=["ABC1D23"]
    )
    status: str = Field(
        ...,
        description="Operational status (free text, e.g. 'Ativa', 'Em manutenção')"
    )
    id_setor: int = Field(
        ...,
        description="ID of the sector where the motorcycle is parked"
    )

class MotoCreate(MotoBase):
    pass

class MotoUpdate(MotoBase):
    """Full replacement; ID is taken from path"""
    pass

class MotoRead(MotoBase):
    id_moto: int = Field(
        ...,
        description="Internal unique identifier for this motorcycle"
    )
    data_cadastro: datetime = Field(
        ...,
        description="Timestamp when this motorcycle was registered"
    )
    data_atualizacao: datetime = Field(
        ...,
        description="Timestamp when this motorcycle was last updated"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
