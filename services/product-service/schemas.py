from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import NAME_MAX_LENGTH


class ProductSchema(BaseModel):
    """Product as returned by the API. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    price: float
    availability: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductCreate(BaseModel):
    """Validated input for creating a product."""

    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    price: float = Field(gt=0)
    availability: bool = True


class ProductUpdate(BaseModel):
    """Validated input for a full product update."""

    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    price: float = Field(gt=0)
    availability: bool


class ProductResponse(BaseModel):
    """Response model for a single product."""

    data: ProductSchema


class ProductListResponse(BaseModel):
    """Response model for the product list."""

    data: List[ProductSchema]


class MessageResponse(BaseModel):
    """Response model for operations that only report a message."""

    data: str


class ValidationErrorItem(BaseModel):
    """One failed validation rule."""

    type: str = "field"
    value: Any = None
    msg: str
    path: Optional[str] = None
    location: str


class ValidationErrorResponse(BaseModel):
    """Response model for validation failures."""

    errors: List[ValidationErrorItem]


class NotFoundResponse(BaseModel):
    """Response model for unknown ids."""

    error: str


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str
    version: str
    database: str
