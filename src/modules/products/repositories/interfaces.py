"""Product repository interface.

Narrows ``IRepository[Product]`` to the Product aggregate.  The stock
operations rely on ``update_single_column`` with ``expected`` so that a
concurrent adjustment is detected instead of silently overwritten.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate.

    Implementations must hide soft-deleted rows from every read and write
    and must reject unknown column names in ``update_single_column``.
    """
