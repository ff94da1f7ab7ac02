from __future__ import annotations

from sqlalchemy.orm import selectinload

from credis.models import Credit, Customer, Store


class StoreRepository:
    def __init__(self, session):
        self.session = session

    def create(self, *, name: str, phone_number: str | None = None, address: str | None = None) -> Store:
        store = Store(name=name, phone_number=phone_number, address=address)
        self.session.add(store)
        self.session.flush()
        return store

    def find_by_id(self, store_id: int) -> Store | None:
        return self.session.query(Store).filter_by(id=store_id).first()

    def find_by_phone_number(self, phone_number: str) -> Store | None:
        return self.session.query(Store).filter_by(phone_number=phone_number).first()

    def find_all(self) -> list[Store]:
        return self.session.query(Store).order_by(Store.created_at.desc(), Store.id.desc()).all()

    def find_with_customers(self, store_id: int) -> Store | None:
        return (
            self.session.query(Store)
            .options(selectinload(Store.customers))
            .filter_by(id=store_id)
            .first()
        )

    def find_with_owners(self, store_id: int) -> Store | None:
        return (
            self.session.query(Store)
            .options(selectinload(Store.store_owners))
            .filter_by(id=store_id)
            .first()
        )

    def has_ledger_data(self, store_id: int) -> bool:
        has_customers = self.session.query(Customer.id).filter_by(store_id=store_id).first() is not None
        has_credits = self.session.query(Credit.id).filter_by(store_id=store_id).first() is not None
        return has_customers or has_credits

    def update(self, store: Store, changes: dict) -> Store:
        for key, value in changes.items():
            setattr(store, key, value)
        self.session.flush()
        return store

    def delete(self, store: Store) -> None:
        self.session.delete(store)
        self.session.flush()
