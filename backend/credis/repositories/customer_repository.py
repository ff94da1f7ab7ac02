from __future__ import annotations

from credis.models import Customer
from credis.services.transactions import lock_for_update


class CustomerRepository:
    def __init__(self, session):
        self.session = session

    def create(self, **fields) -> Customer:
        customer = Customer(**fields)
        self.session.add(customer)
        self.session.flush()
        return customer

    def find_by_id(self, customer_id: int, *, for_update: bool = False) -> Customer | None:
        query = self.session.query(Customer).filter_by(id=customer_id)
        if for_update:
            query = lock_for_update(query)
        return query.first()

    def find_all(self, store_id: int | None = None) -> list[Customer]:
        query = self.session.query(Customer)
        if store_id is not None:
            query = query.filter(Customer.store_id == store_id)
        return query.order_by(Customer.created_at.desc(), Customer.id.desc()).all()

    def find_by_phone_number(self, store_id: int, phone_number: str) -> Customer | None:
        return self.session.query(Customer).filter_by(
            store_id=store_id,
            phone_number=phone_number,
        ).first()

    def update(self, customer: Customer, changes: dict) -> Customer:
        for key, value in changes.items():
            setattr(customer, key, value)
        self.session.flush()
        return customer
