from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Wire format is camelCase; snake_case keys are accepted on input too."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(BaseModel, Generic[T]):
    data: T
    message: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
