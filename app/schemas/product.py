from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional, Literal


class ProductPayload(BaseModel):
    """
    Normalized product fields that passed the product rule set.

    Only the fields present in the request are set, so
    ``model_dump(exclude_unset=True)`` gives exactly what to write.
    """
    product_name: Optional[str] = Field(None, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    product_price: Optional[float] = Field(None, ge=0, description="Product price (must be non-negative)")
    stock: Optional[int] = Field(None, ge=0, description="Available stock (must be non-negative)")


class ProductResponse(BaseModel):
    """Schema for a stored product."""
    id: int
    product_name: str
    description: Optional[str] = None
    product_price: float
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaginationMeta(BaseModel):
    """Navigation metadata for a product page."""
    total: int
    current_page: int
    per_page: int
    last_page: int
    next_page_url: Optional[str] = None
    previous_page_url: Optional[str] = None


class ProductListResponse(BaseModel):
    """Envelope for a paginated product list."""
    status: Literal["success"] = "success"
    message: str
    data: list[ProductResponse]
    pagination: PaginationMeta


class ProductEnvelope(BaseModel):
    """Envelope for a single product."""
    status: Literal["success"] = "success"
    message: str
    data: ProductResponse


class MessageResponse(BaseModel):
    """Envelope carrying only a status and a message."""
    status: Literal["success", "error"]
    message: str


class ErrorResponse(BaseModel):
    """Envelope for a failed operation."""
    status: Literal["error"] = "error"
    message: str
    error: str


class ValidationErrorResponse(BaseModel):
    """Envelope for rejected input, keyed by field name."""
    message: str
    errors: dict[str, list[str]]
