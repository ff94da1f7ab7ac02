from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import joinedload

from credis.models import Credit
from credis.services import ledger_aggregator
from credis.services.ledger_aggregator import CustomerSummary, StoreSummary
from credis.services.inputs import CreditCreate, CreditFilters


class CreditRepository:
    """
    Queries over the credits table.

    Every listing is ordered newest first by transaction_date (id breaks
    ties so pagination-free listings are deterministic).
    """

    def __init__(self, session):
        self.session = session

    def _ordered(self, query):
        return query.order_by(Credit.transaction_date.desc(), Credit.id.desc())

    def _with_relations(self):
        return self.session.query(Credit).options(
            joinedload(Credit.customer),
            joinedload(Credit.store),
        )

    def create(self, data: CreditCreate) -> Credit:
        credit = Credit(
            customer_id=data.customer_id,
            store_id=data.store_id,
            amount=data.amount,
            transaction_type=data.transaction_type,
            items_description=data.items_description,
            journal_number=data.journal_number,
            created_by_owner_id=data.created_by_owner_id,
        )
        if data.transaction_date is not None:
            credit.transaction_date = data.transaction_date
        self.session.add(credit)
        self.session.flush()
        return credit

    def find_by_id(self, credit_id: int) -> Credit | None:
        return self._with_relations().filter(Credit.id == credit_id).first()

    def find_all(self) -> list[Credit]:
        return self._ordered(self._with_relations()).all()

    def find_by_customer_id(self, customer_id: int, store_id: int | None = None) -> list[Credit]:
        query = self._with_relations().filter(Credit.customer_id == customer_id)
        if store_id is not None:
            query = query.filter(Credit.store_id == store_id)
        return self._ordered(query).all()

    def find_by_store_id(self, store_id: int) -> list[Credit]:
        return self._ordered(self._with_relations().filter(Credit.store_id == store_id)).all()

    def find_by_filters(self, filters: CreditFilters) -> list[Credit]:
        query = self._with_relations()
        if filters.customer_id is not None:
            query = query.filter(Credit.customer_id == filters.customer_id)
        if filters.store_id is not None:
            query = query.filter(Credit.store_id == filters.store_id)
        if filters.transaction_type is not None:
            query = query.filter(Credit.transaction_type == filters.transaction_type)
        if filters.start_date is not None:
            query = query.filter(Credit.transaction_date >= filters.start_date)
        if filters.end_date is not None:
            query = query.filter(Credit.transaction_date <= filters.end_date)
        if filters.min_amount is not None:
            query = query.filter(Credit.amount >= filters.min_amount)
        if filters.max_amount is not None:
            query = query.filter(Credit.amount <= filters.max_amount)
        return self._ordered(query).all()

    def update(self, credit: Credit, changes: dict) -> Credit:
        for key, value in changes.items():
            setattr(credit, key, value)
        self.session.flush()
        return credit

    def delete(self, credit: Credit) -> None:
        self.session.delete(credit)
        self.session.flush()

    def get_customer_summary(self, customer_id: int, store_id: int | None = None) -> CustomerSummary:
        query = self.session.query(Credit).filter(Credit.customer_id == customer_id)
        if store_id is not None:
            query = query.filter(Credit.store_id == store_id)
        return ledger_aggregator.customer_summary(query.all())

    def get_store_summary(self, store_id: int) -> StoreSummary:
        rows = self.session.query(Credit).filter(Credit.store_id == store_id).all()
        return ledger_aggregator.store_summary(rows)

    def get_recent_transactions(self, limit: int = 10, store_id: int | None = None) -> list[Credit]:
        query = self._with_relations()
        if store_id is not None:
            query = query.filter(Credit.store_id == store_id)
        return self._ordered(query).limit(limit).all()

    def get_transactions_by_date_range(
        self,
        start_date: datetime,
        end_date: datetime,
        store_id: int | None = None,
    ) -> list[Credit]:
        query = self._with_relations().filter(
            Credit.transaction_date >= start_date,
            Credit.transaction_date <= end_date,
        )
        if store_id is not None:
            query = query.filter(Credit.store_id == store_id)
        return self._ordered(query).all()
