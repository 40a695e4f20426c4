from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, List

from pydantic import Field
from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class DefeitoMoto(Base):
    """A defect reported against a specific motorcycle."""
    __tablename__ = "defeitos_moto"

    id_defeito_moto: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    id_moto: Mapped[int] = mapped_column(nullable=False, index=True)
    id_defeito: Mapped[int] = mapped_column(nullable=False, index=True)

    data_registro: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    data_atualizacao: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class DefeitoMotoBase(APIModel):
    id_moto: int = Field(
        ...,
        description="ID of the affected motorcycle"
    )
    id_defeito: int = Field(
        ...,
        description="ID of the defect type"
    )

class DefeitoMotoCreate(DefeitoMotoBase):
    data_registro: Optional[datetime] = Field(
        None,
        description="When the defect was registered (defaults to now)"
    )
    data_atualizacao: Optional[datetime] = Field(
        None,
        description="When the record was last updated (defaults to now)"
    )

class DefeitoMotoUpdate(DefeitoMotoCreate):
    """Full replacement; ID is taken from path"""
    pass

class DefeitoMotoRead(DefeitoMotoBase):
    id_defeito_moto: int = Field(
        ...,
        description="Internal unique identifier for this defect report"
    )
    data_registro: datetime
    data_atualizacao: datetime
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )
