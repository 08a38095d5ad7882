"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

DTOs only coerce types.  Business rules (non-empty name, non-negative
stock, positive adjustment) belong to ``ProductService`` so they are
reported with the same error codes whatever the entry point.

- ``ProductInputDTO``: input for product creation and full replacement.
- ``StockIncrementDTO`` / ``StockDecrementDTO``: stock adjustment bodies.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class ProductInputDTO(BaseModel):
    """Immutable DTO for create and update (full replace) requests."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    description: str = ""
    stock_quantity: int = 0
    low_stock_threshold: int = 0

    # ``null`` is treated as absent; an empty name is then reported by the
    # service as MISSING_REQUIRED_DATA.
    @field_validator("name", "description", mode="before")
    @classmethod
    def null_text_is_empty(cls, v):
        return "" if v is None else v


class StockIncrementDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    # Missing or null amount falls through to the service as 0 (INVALID_INPUT).
    stock_increment: int = 0

    @field_validator("stock_increment", mode="before")
    @classmethod
    def null_amount_is_zero(cls, v):
        return 0 if v is None else v


class StockDecrementDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    stock_decrement: int = 0

    @field_validator("stock_decrement", mode="before")
    @classmethod
    def null_amount_is_zero(cls, v):
        return 0 if v is None else v
