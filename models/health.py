from __future__ import annotations

from pydantic import Field

from models.hateoas import APIModel


class Health(APIModel):
    status: int = Field(..., description="HTTP-style status code of the service")
    status_message: str = Field(..., description="Human-readable status")
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp of the check")
