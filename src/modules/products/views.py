"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Taxonomy errors raised by the service propagate to
``modules.core.exceptions.exception_handler``, which renders them as JSON
envelopes; the view never builds error responses itself.
"""

from __future__ import annotations

from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core import responses
from modules.core.exceptions import input_error_from_pydantic
from modules.products.dtos import ProductInputDTO, StockDecrementDTO, StockIncrementDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService
from shared.domain.errors import InvalidInput

DTO = TypeVar("DTO", bound=BaseModel)


def _parse(dto_class: Type[DTO], data: Any, *, body_error: bool = False) -> DTO:
    """Build ``dto_class`` from a request body.

    Field type errors become VALIDATION_ERROR with per-field details, or a
    single INVALID_INPUT when ``body_error`` is set.
    """
    if not isinstance(data, Mapping):
        raise InvalidInput("invalid request body format: expected a JSON object")
    # Form-encoded bodies arrive as a QueryDict; keep the last value per key.
    payload = data.dict() if hasattr(data, "dict") else dict(data)
    try:
        return dto_class.model_validate(payload)
    except PydanticValidationError as exc:
        if body_error:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise InvalidInput(
                f"invalid request body format: {field}: {first['msg']}"
            ) from exc
        raise input_error_from_pydantic(exc) from exc


class ProductViewSet(ViewSet):
    """ViewSet for Product CRUD and stock operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    All ORM access goes through the service/repository layer.
    """

    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        products = self._service.list_products()
        return responses.success(ProductSerializer(products, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(pk)
        return responses.success(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        dto = _parse(ProductInputDTO, request.data)
        product = self._service.create_product(dto)
        return responses.created(ProductSerializer(product).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/ (full replacement)"""
        dto = _parse(ProductInputDTO, request.data)
        product = self._service.update_product(pk, dto)
        return responses.success(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete_product(pk)
        return responses.no_content()

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="increment-stock")
    def increment_stock(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/products/{pk}/increment-stock/

        Body: ``{"stock_increment": N}`` with ``N > 0``.
        """
        dto = _parse(StockIncrementDTO, request.data, body_error=True)
        self._service.increment_stock(pk, dto.stock_increment)
        product = self._service.get_product(pk)
        return responses.success(
            {
                "product": ProductSerializer(product).data,
                "increment_amount": dto.stock_increment,
            },
            message="Stock incremented successfully",
        )

    @action(detail=True, methods=["post"], url_path="decrement-stock")
    def decrement_stock(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/products/{pk}/decrement-stock/

        Body: ``{"stock_decrement": N}`` with ``N > 0``.  Fails with
        INSUFFICIENT_STOCK (``{available, required}``) leaving stock as is.
        """
        dto = _parse(StockDecrementDTO, request.data, body_error=True)
        self._service.decrement_stock(pk, dto.stock_decrement)
        product = self._service.get_product(pk)
        return responses.success(
            {
                "product": ProductSerializer(product).data,
                "decrement_amount": dto.stock_decrement,
            },
            message="Stock decremented successfully",
        )
