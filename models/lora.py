from __future__ import annotations
from typing import Optional, List

from pydantic import Field, field_validator
from sqlalchemy.orm import Mapped, mapped_column

from services.database import Base
from models.hateoas import APIModel, HATEOASLink

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class Lora(Base):
    """LoRa tracker. May sit on the shelf without a motorcycle."""
    __tablename__ = "loras"

    id_lora: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    numero_lora: Mapped[int] = mapped_column(nullable=False, index=True)
    moto: Mapped[Optional[int]] = mapped_column(nullable=True, index=True)

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
def _unassigned_to_none(v: Optional[int]) -> Optional[int]:
    """0 has always meant "no motorcycle"."""
    return None if v == 0 else v


class LoraCreate(APIModel):
    numero_lora: int = Field(
        ...,
        description="Device number printed on the LoRa module"
    )
    moto: Optional[int] = Field(
        None,
        description="ID of the motorcycle carrying the device; 0 or null when unassigned"
    )

    @field_validator("moto")
    @classmethod
    def normalize_moto(cls, v: Optional[int]) -> Optional[int]:
        return _unassigned_to_none(v)

class LoraUpdate(LoraCreate):
    """Full replacement; ID is taken from path"""
    pass

class LoraRead(APIModel):
    id_lora: int = Field(
        ...,
        description="Internal unique identifier for this device"
    )
    numero_lora: str = Field(
        ...,
        description="Device number, rendered as text"
    )
    moto: Optional[int] = Field(
        None,
        description="Carrying motorcycle, null when unassigned"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )

    @field_validator("numero_lora", mode="before")
    @classmethod
    def numero_as_text(cls, v):
        return str(v)

    @field_validator("moto")
    @classmethod
    def normalize_moto(cls, v: Optional[int]) -> Optional[int]:
        return _unassigned_to_none(v)
