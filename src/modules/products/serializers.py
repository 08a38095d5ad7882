"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views) and only
renders records.  Request bodies are parsed into Pydantic DTOs from
``dtos.py`` and validated by the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "stock_quantity",
            "low_stock_threshold",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
