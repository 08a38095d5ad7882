"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Rules enforced here, always before any storage access:
- ``id`` must be non-empty (MISSING_REQUIRED_DATA).
- ``name`` must be non-empty on create and full update (MISSING_REQUIRED_DATA).
- ``stock_quantity`` must be non-negative (INVALID_INPUT).
- Stock adjustments must be positive integers (INVALID_FORMAT / INVALID_INPUT).
- Quantities and thresholds must fit the 32-bit integer columns
  (INVALID_INPUT), including the stock level an increment would produce.

Then, in this order: the product must exist (PRODUCT_NOT_FOUND), and a
decrement may not exceed the stock on hand (INSUFFICIENT_STOCK).  Any other
repository failure is reported as DATABASE_ERROR with the original message.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, List

import structlog
from django.db import transaction

from modules.core.repositories.interfaces import WriteResult
from modules.products.models import Product
from shared.domain.errors import (
    AppError,
    InsufficientStock,
    InvalidFormat,
    InvalidInput,
    MissingRequiredField,
    ProductNotFound,
    StorageError,
)

if TYPE_CHECKING:
    from modules.products.dtos import ProductInputDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

STOCK_COLUMN = "stock_quantity"

# Largest value every supported database stores in the integer columns.
MAX_COLUMN_INT = 2_147_483_647

# First attempt plus one retry after a concurrent stock change.
_STOCK_WRITE_ATTEMPTS = 2


@contextmanager
def _repository_call(operation: str, **context) -> Iterator[None]:
    """Classify failures raised by the repository.

    Taxonomy errors pass through; anything else becomes ``StorageError``.
    """
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.error(
            "product.repository_failure",
            operation=operation,
            error=str(exc),
            **context,
        )
        raise StorageError(f"{operation} failed: {exc}") from exc


def _require_id(id) -> str:
    if id is None or not str(id).strip():
        raise MissingRequiredField("id")
    return str(id)


def _validate_payload(dto: ProductInputDTO) -> None:
    if not dto.name or not dto.name.strip():
        raise MissingRequiredField("name")
    if dto.stock_quantity < 0:
        raise InvalidInput("stock_quantity cannot be negative")
    if dto.stock_quantity > MAX_COLUMN_INT:
        raise InvalidInput(f"stock_quantity cannot exceed {MAX_COLUMN_INT}")
    if not -MAX_COLUMN_INT <= dto.low_stock_threshold <= MAX_COLUMN_INT:
        raise InvalidInput(
            f"low_stock_threshold must be between {-MAX_COLUMN_INT} and {MAX_COLUMN_INT}"
        )


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidFormat("quantity")
    if quantity <= 0:
        raise InvalidInput("quantity must be greater than 0")
    if quantity > MAX_COLUMN_INT:
        raise InvalidInput(f"quantity cannot exceed {MAX_COLUMN_INT}")
    return quantity


class ProductService:
    """Application service for Product and stock use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    Holds no state of its own: every call round-trips through the
    repository, which is the only source of truth.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: ProductInputDTO) -> Product:
        """Create a new product.

        Raises:
            MissingRequiredField: if ``name`` is empty.
            InvalidInput: if ``stock_quantity`` is negative.
            StorageError: if the repository fails.
        """
        _validate_payload(dto)

        product = Product(
            name=dto.name.strip(),
            description=dto.description,
            stock_quantity=dto.stock_quantity,
            low_stock_threshold=dto.low_stock_threshold,
        )
        with _repository_call("create product"):
            product = self._repo.create(product)
        logger.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: ProductInputDTO) -> Product:
        """Replace every mutable field of an existing product.

        Raises:
            MissingRequiredField: if ``id`` or ``name`` is empty.
            InvalidInput: if ``stock_quantity`` is negative.
            ProductNotFound: if the product does not exist.
        """
        id = _require_id(id)
        _validate_payload(dto)
        self._get_existing(id)

        replacement = Product(
            name=dto.name.strip(),
            description=dto.description,
            stock_quantity=dto.stock_quantity,
            low_stock_threshold=dto.low_stock_threshold,
        )
        with _repository_call("update product", product_id=id):
            result = self._repo.update_all_columns(id, replacement)
        if result is WriteResult.NOT_FOUND:
            raise ProductNotFound(id)

        logger.info("product.updated", product_id=id)
        return self._get_existing(id)

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Delete a product (soft delete in the Django repository).

        Raises:
            ProductNotFound: if the product does not exist.
        """
        id = _require_id(id)
        self._get_existing(id)
        with _repository_call("delete product", product_id=id):
            result = self._repo.delete(id)
        if result is WriteResult.NOT_FOUND:
            raise ProductNotFound(id)
        logger.info("product.deleted", product_id=id)

    @transaction.atomic
    def increment_stock(self, id: str, quantity: int) -> int:
        """Add ``quantity`` units and return the new stock level."""
        id = _require_id(id)
        quantity = _validate_quantity(quantity)
        new_quantity = self._adjust_stock(id, quantity)
        logger.info(
            "product.stock_incremented",
            product_id=id,
            amount=quantity,
            stock_quantity=new_quantity,
        )
        return new_quantity

    @transaction.atomic
    def decrement_stock(self, id: str, quantity: int) -> int:
        """Remove ``quantity`` units and return the new stock level.

        Raises:
            InsufficientStock: if fewer than ``quantity`` units are on hand;
                the stored quantity is left unchanged.
        """
        id = _require_id(id)
        quantity = _validate_quantity(quantity)
        new_quantity = self._adjust_stock(id, -quantity)
        logger.info(
            "product.stock_decremented",
            product_id=id,
            amount=quantity,
            stock_quantity=new_quantity,
        )
        return new_quantity

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        with _repository_call("list products"):
            return self._repo.list()

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            MissingRequiredField: if ``id`` is empty.
            ProductNotFound: if the product does not exist.
        """
        id = _require_id(id)
        return self._get_existing(id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_existing(self, id: str) -> Product:
        with _repository_call("get product", product_id=id):
            product = self._repo.get_by_id(id)
        if product is None:
            raise ProductNotFound(id)
        return product

    def _adjust_stock(self, id: str, delta: int) -> int:
        """Read-modify-write of the stock column guarded by the read value."""
        for attempt in range(1, _STOCK_WRITE_ATTEMPTS + 1):
            current = self._get_existing(id).stock_quantity
            new_quantity = current + delta
            if new_quantity < 0:
                logger.warning(
                    "product.insufficient_stock",
                    product_id=id,
                    available=current,
                    required=-delta,
                )
                raise InsufficientStock(available=current, required=-delta)
            if new_quantity > MAX_COLUMN_INT:
                raise InvalidInput(
                    f"stock_quantity would exceed {MAX_COLUMN_INT} (current {current})"
                )

            with _repository_call("update stock", product_id=id):
                result = self._repo.update_single_column(
                    id, STOCK_COLUMN, new_quantity, expected=current
                )
            if result is WriteResult.APPLIED:
                return new_quantity
            if result is WriteResult.NOT_FOUND:
                raise ProductNotFound(id)
            logger.warning(
                "product.stock_write_conflict",
                product_id=id,
                attempt=attempt,
                expected=current,
            )

        raise StorageError(
            f"Stock of product {id} changed concurrently; adjustment aborted",
            details={"id": id, "attempts": _STOCK_WRITE_ATTEMPTS},
        )
