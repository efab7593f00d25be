"""Product repository interface.

Extends ``IRepository[Product]`` with the locking reads and writes the
stock ledger needs.  Every method runs inside the caller's unit of work.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import InventoryRecord, Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate (product + inventory)."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def lock_many(self, ids: Iterable[str]) -> List["Product"]:
        """Lock several products at once, in ascending id order."""

    @abstractmethod
    def get_inventory_for_update(
        self, product: "Product"
    ) -> Optional["InventoryRecord"]:
        """Retrieve the inventory shadow of *product* with a row-level lock."""

    @abstractmethod
    def create_inventory(self, product: "Product") -> "InventoryRecord":
        """Create the inventory shadow of *product* from its current state."""

    @abstractmethod
    def write_stock(
        self, product: "Product", inventory: "InventoryRecord", quantity: int
    ) -> None:
        """Write *quantity* to both the product and its inventory shadow."""
