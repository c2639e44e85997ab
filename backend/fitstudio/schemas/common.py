# backend/fitstudio/schemas/common.py

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON in camelCase, attributes in snake_case."""

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class SuccessResponse(CamelModel):
    success: bool = True
    message: str | None = None
