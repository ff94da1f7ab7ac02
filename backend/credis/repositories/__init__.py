from .store_repository import StoreRepository
from .customer_repository import CustomerRepository
from .credit_repository import CreditRepository
from .customer_balance_repository import CustomerBalanceRepository
from .store_owner_repository import StoreOwnerRepository

__all__ = [
    "StoreRepository",
    "CustomerRepository",
    "CreditRepository",
    "CustomerBalanceRepository",
    "StoreOwnerRepository",
]
