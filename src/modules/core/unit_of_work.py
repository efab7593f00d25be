"""Explicit transaction/session object for the core order workflow.

A ``UnitOfWork`` is the single transaction boundary of a use case.  It
carries the repositories the use case may touch and is passed explicitly
into every core operation (stock ledger, profile gate, order assembly),
so none of them reaches for an ambient connection on its own.

Usage::

    with DjangoUnitOfWork() as session:
        ledger.adjust_stock(session, product_id, -3)
        session.on_commit(lambda: notify(...))

Leaving the ``with`` block normally commits; any exception rolls back
every write made through the session and propagates unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from django.db import DEFAULT_DB_ALIAS, transaction

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerProfileRepository
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository


class UnitOfWork(ABC):
    """Session contract: repositories plus commit/rollback scope."""

    products: IProductRepository
    customers: ICustomerProfileRepository
    orders: IOrderRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> bool | None: ...

    @abstractmethod
    def on_commit(self, func: Callable[[], None]) -> None:
        """Run *func* only if and after the session commits."""


class DjangoUnitOfWork(UnitOfWork):
    """Unit of work backed by ``django.db.transaction.atomic``.

    Nested sessions become savepoints, exactly like nested ``atomic``
    blocks.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        from modules.customers.repositories.django_repository import (
            CustomerProfileDjangoRepository,
        )
        from modules.orders.repositories.django_repository import (
            OrderDjangoRepository,
        )
        from modules.products.repositories.django_repository import (
            ProductDjangoRepository,
        )

        self.using = using
        self.products = ProductDjangoRepository()
        self.customers = CustomerProfileDjangoRepository()
        self.orders = OrderDjangoRepository()
        self._atomic: transaction.Atomic | None = None

    def __enter__(self) -> DjangoUnitOfWork:
        if self._atomic is not None:
            raise RuntimeError("This unit of work is already active.")
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool | None:
        atomic, self._atomic = self._atomic, None
        return atomic.__exit__(exc_type, exc, tb)

    def on_commit(self, func: Callable[[], None]) -> None:
        transaction.on_commit(func, using=self.using)
