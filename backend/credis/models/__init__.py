from .stores import Store
from .auth import StoreOwner, RefreshToken, AccessToken
from .customers import Customer, CustomerBalance
from .credits import Credit, TRANSACTION_TYPES, CREDIT_GIVEN, PAYMENT_RECEIVED

__all__ = [
    'Store',
    'StoreOwner', 'RefreshToken', 'AccessToken',
    'Customer', 'CustomerBalance',
    'Credit', 'TRANSACTION_TYPES', 'CREDIT_GIVEN', 'PAYMENT_RECEIVED',
]
