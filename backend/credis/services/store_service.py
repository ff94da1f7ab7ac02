# Overview: Service-layer operations for stores; phone uniqueness and guarded deletion.

from __future__ import annotations

import logging

from credis.errors import ConflictError, NotFoundError
from credis.models import Store, StoreOwner
from credis.repositories.store_repository import StoreRepository
from credis.services.inputs import StoreUpdate
from credis.services.transactions import atomic


logger = logging.getLogger(__name__)


class StoreService:
    def __init__(self, session, *, stores: StoreRepository):
        self.session = session
        self.stores = stores

    def create_store(
        self,
        *,
        name: str,
        phone_number: str | None,
        address: str | None,
        owner: StoreOwner | None = None,
    ) -> Store:
        """
        Create a store. An owner who registered before having a store is
        linked to the one they create.
        """
        with atomic(self.session):
            if phone_number and self.stores.find_by_phone_number(phone_number):
                raise ConflictError("Store with this phone number already exists")

            store = self.stores.create(name=name, phone_number=phone_number, address=address)

            if owner is not None and owner.store_id is None:
                owner.store_id = store.id
                logger.info("Linked store owner %s to new store %s", owner.id, store.id)
        return store

    def get_store(self, store_id: int) -> Store:
        store = self.stores.find_by_id(store_id)
        if not store:
            raise NotFoundError("Store not found")
        return store

    def list_stores(self) -> list[Store]:
        return self.stores.find_all()

    def update_store(self, store_id: int, data: StoreUpdate) -> Store:
        changes = data.changes()

        with atomic(self.session):
            store = self.get_store(store_id)

            phone = changes.get("phone_number")
            if phone and phone != store.phone_number:
                other = self.stores.find_by_phone_number(phone)
                if other and other.id != store.id:
                    raise ConflictError("Store with this phone number already exists")

            self.stores.update(store, changes)
        return store

    def delete_store(self, store_id: int) -> None:
        with atomic(self.session):
            store = self.get_store(store_id)
            if self.stores.has_ledger_data(store_id):
                raise ConflictError("Cannot delete a store that still has customers or credit transactions")
            self.stores.delete(store)

    def get_store_with_customers(self, store_id: int) -> Store:
        store = self.stores.find_with_customers(store_id)
        if not store:
            raise NotFoundError("Store not found")
        return store

    def get_store_with_owners(self, store_id: int) -> Store:
        store = self.stores.find_with_owners(store_id)
        if not store:
            raise NotFoundError("Store not found")
        return store
