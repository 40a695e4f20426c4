from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HATEOASLink(BaseModel):
    rel: str          # "self", "update", "delete", "all", "first", "previous", "next", "last"
    href: str         # resource-relative path, e.g. "/cidades/3"
    method: str       # "GET", "PUT", "DELETE"


class APIModel(BaseModel):
    """Base for request/response schemas: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
