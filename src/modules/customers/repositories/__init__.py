"""Customer repositories package."""

from modules.customers.repositories.django_repository import (
    CustomerProfileDjangoRepository,
)
from modules.customers.repositories.interfaces import ICustomerProfileRepository

__all__ = ["CustomerProfileDjangoRepository", "ICustomerProfileRepository"]
