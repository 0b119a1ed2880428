"""
Taskboard - Pydantic Schemas
Shared base model and generic responses
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Snake_case in Python, camelCase on the wire.

    Both spellings are accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============ Generic Responses ============

class SuccessResponse(CamelModel):
    success: bool = True


class HealthCheck(BaseModel):
    """Health check response"""
    status: str
    version: str
    database: str
