# Overview: Service-layer operations for customers; enforces per-store uniqueness and the overdue report.

from __future__ import annotations

import logging
from datetime import timedelta

from credis.errors import ConflictError, NotFoundError, ValidationError
from credis.models import Customer, CustomerBalance
from credis.repositories.customer_balance_repository import CustomerBalanceRepository
from credis.repositories.customer_repository import CustomerRepository
from credis.repositories.store_repository import StoreRepository
from credis.services.inputs import CustomerCreate, CustomerUpdate
from credis.services.transactions import atomic
from credis.time_utils import utcnow


logger = logging.getLogger(__name__)

DEFAULT_OVERDUE_DAYS = 30


class CustomerService:
    def __init__(
        self,
        session,
        *,
        customers: CustomerRepository,
        stores: StoreRepository,
        balances: CustomerBalanceRepository,
    ):
        self.session = session
        self.customers = customers
        self.stores = stores
        self.balances = balances

    def _require_store(self, store_id: int) -> None:
        if not self.stores.find_by_id(store_id):
            raise NotFoundError("Store not found")

    def create_customer(self, data: CustomerCreate) -> Customer:
        if data.credit_limit is not None and data.credit_limit < 0:
            raise ValidationError("Credit limit cannot be negative")

        with atomic(self.session):
            self._require_store(data.store_id)
            if self.customers.find_by_phone_number(data.store_id, data.phone_number):
                raise ConflictError("Customer with this phone number already exists in this store")

            customer = self.customers.create(
                store_id=data.store_id,
                name=data.name,
                phone_number=data.phone_number,
                email=data.email,
                address=data.address,
                cid_number=data.cid_number,
                credit_limit=data.credit_limit,
            )
        return customer

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.customers.find_by_id(customer_id)
        if not customer:
            raise NotFoundError("Customer not found")
        return customer

    def list_customers(self, store_id: int | None = None) -> list[Customer]:
        if store_id is not None:
            self._require_store(store_id)
        return self.customers.find_all(store_id)

    def update_customer(self, customer_id: int, data: CustomerUpdate) -> Customer:
        changes = data.changes()

        with atomic(self.session):
            customer = self.customers.find_by_id(customer_id, for_update=True)
            if not customer:
                raise NotFoundError("Customer not found")

            credit_limit = changes.get("credit_limit")
            if credit_limit is not None and credit_limit < 0:
                raise ValidationError("Credit limit cannot be negative")

            phone = changes.get("phone_number")
            if phone and phone != customer.phone_number:
                other = self.customers.find_by_phone_number(customer.store_id, phone)
                if other and other.id != customer.id:
                    raise ConflictError("Customer with this phone number already exists in this store")

            self.customers.update(customer, changes)
        return customer

    def get_overdue_customers(self, store_id: int, days: int = DEFAULT_OVERDUE_DAYS) -> list[CustomerBalance]:
        """
        Customers of a store who owe money and have not paid in `days` days.

        A customer who has never paid counts as overdue as soon as they owe.
        """
        if days < 0:
            raise ValidationError("Days cannot be negative")
        self._require_store(store_id)

        cutoff = utcnow() - timedelta(days=days)
        rows = self.balances.find_customers_with_overdue_payments(store_id, cutoff)
        logger.debug("Overdue report for store %s (cutoff %s): %d customers", store_id, cutoff, len(rows))
        return rows
