"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: reads return ``None`` and
writes return ``WriteResult.NOT_FOUND`` instead of raising, so the Service
Layer decides how to report a missing product.  A broken connection is
surfaced as ``StorageConnectionError``; other database errors propagate.
"""

from __future__ import annotations

import functools
from typing import Any, List, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import InterfaceError, transaction

from modules.core.repositories.interfaces import WriteResult
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository
from shared.domain.errors import StorageConnectionError

logger = structlog.get_logger(__name__)


def _connection_guard(method):
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except InterfaceError as exc:
            logger.error("product.connection_lost", error=str(exc))
            raise StorageConnectionError(str(exc)) from exc

    return wrapper


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def _alive(self, id: str):
        return Product.objects.alive().filter(id=id)

    @_connection_guard
    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a live product by primary key.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            return self._alive(id).first()
        except (ValueError, ValidationError):
            return None

    @_connection_guard
    def list(self) -> List[Product]:
        return list(Product.objects.alive())

    @_connection_guard
    @transaction.atomic
    def create(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    @_connection_guard
    @transaction.atomic
    def update_all_columns(self, id: str, entity: Product) -> WriteResult:
        values = {column: getattr(entity, column) for column in Product.data_columns()}
        try:
            rows = self._alive(id).stamp(**values)
        except (ValueError, ValidationError):
            return WriteResult.NOT_FOUND
        if not rows:
            return WriteResult.NOT_FOUND
        logger.info("product.columns_updated", product_id=str(id))
        return WriteResult.APPLIED

    @_connection_guard
    @transaction.atomic
    def update_single_column(
        self,
        id: str,
        column: str,
        value: Any,
        expected: Optional[Any] = None,
    ) -> WriteResult:
        """Write one column, optionally as ``UPDATE ... WHERE column = expected``."""
        if column not in Product.data_columns():
            raise ValueError(f"Unknown product column: {column}")

        try:
            queryset = self._alive(id)
            target = queryset
            if expected is not None:
                target = queryset.filter(**{column: expected})
            rows = target.stamp(**{column: value})
        except (ValueError, ValidationError):
            return WriteResult.NOT_FOUND

        if rows:
            logger.info(
                "product.column_updated",
                product_id=str(id),
                column=column,
            )
            return WriteResult.APPLIED
        if expected is not None and queryset.exists():
            return WriteResult.STALE
        return WriteResult.NOT_FOUND

    @_connection_guard
    @transaction.atomic
    def delete(self, id: str) -> WriteResult:
        """Soft-delete a product by ID."""
        try:
            rows = Product.objects.filter(id=id).soft_delete()
        except (ValueError, ValidationError):
            return WriteResult.NOT_FOUND
        if not rows:
            return WriteResult.NOT_FOUND
        logger.info("product.soft_deleted", product_id=str(id))
        return WriteResult.APPLIED
