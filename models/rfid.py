from __future__ import annotations
from typing import Optional, List

from pydantic import Field, field_validator
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Rfid(Base):
    __tablename__ = "rfids"

    id_rfid: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    numero_rfid: Mapped[int] = mapped_column(nullable=False, index=True)
    id_moto: Mapped[int] = mapped_column(nullable=False, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class RfidCreate(APIModel):
    numero_rfid: int = Field(
        ...,
        description="Tag number of the RFID device"
    )
    id_moto: int = Field(
        ...,
        description="ID of the motorcycle carrying the tag"
    )

class RfidUpdate(RfidCreate):
    """Full replacement; ID is taken from path"""
    pass

class RfidRead(APIModel):
    id_rfid: int
    numero_rfid: str = Field(
        ...,
        description="Tag number, rendered as text"
    )
    id_moto: int
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )

    @field_validator("numero_rfid", mode="before")
    @classmethod
    def numero_as_text(cls, v):
        return str(v)
