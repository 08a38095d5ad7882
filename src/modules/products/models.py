"""Product model with stock control.

Rules held by the schema:
- ``name`` is required.
- ``stock_quantity`` cannot be negative (``PositiveIntegerField`` plus an
  explicit CHECK constraint, so concurrent writers cannot overdraw it).
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import SoftDeleteModel


class Product(SoftDeleteModel):
    """A stocked item.

    ``low_stock_threshold`` is informational: ``is_low_stock`` reports it,
    nothing enforces it.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    stock_quantity = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.IntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        errors = {}
        if not (self.name or "").strip():
            errors["name"] = "Name must not be empty."
        if self.stock_quantity is not None and self.stock_quantity < 0:
            errors["stock_quantity"] = "Stock quantity cannot be negative."
        if errors:
            raise ValidationError(errors)

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold

    def __str__(self) -> str:
        return f"{self.name} ({self.stock_quantity} in stock)"
