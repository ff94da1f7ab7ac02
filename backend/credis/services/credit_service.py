# Overview: Service-layer operations for the credit ledger; validates business rules and keeps the balance cache in sync.

"""
Credit ledger service.

RULES:
- amount is always positive; the transaction type carries the sign
- payment_received rows always carry a journal number
- a credit_given row may not push a customer past a non-null credit limit
  (reaching the limit exactly is allowed)
- every write (create, update, delete) recomputes the customer's
  CustomerBalance row inside the same database transaction

The balance cache is a projection: it is always rebuilt from the full set of
credit rows, never incremented.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from credis.errors import NotFoundError, ValidationError
from credis.models import CREDIT_GIVEN, PAYMENT_RECEIVED, Credit, CustomerBalance, Customer, Store
from credis.money import money_str
from credis.repositories.credit_repository import CreditRepository
from credis.repositories.customer_balance_repository import CustomerBalanceRepository
from credis.repositories.customer_repository import CustomerRepository
from credis.repositories.store_repository import StoreRepository
from credis.services import ledger_aggregator
from credis.services.inputs import CreditCreate, CreditFilters, CreditUpdate
from credis.services.ledger_aggregator import CustomerSummary, OutstandingBalance, StoreSummary
from credis.services.transactions import atomic


logger = logging.getLogger(__name__)

MAX_RECENT_LIMIT = 100
MAX_RANGE_DAYS = 365


class CreditService:
    def __init__(
        self,
        session,
        *,
        credits: CreditRepository,
        customers: CustomerRepository,
        stores: StoreRepository,
        balances: CustomerBalanceRepository,
    ):
        self.session = session
        self.credits = credits
        self.customers = customers
        self.stores = stores
        self.balances = balances

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _require_customer(self, customer_id: int, *, for_update: bool = False) -> Customer:
        customer = self.customers.find_by_id(customer_id, for_update=for_update)
        if not customer:
            raise NotFoundError("Customer not found")
        return customer

    def _require_store(self, store_id: int) -> Store:
        store = self.stores.find_by_id(store_id)
        if not store:
            raise NotFoundError("Store not found")
        return store

    def _require_credit(self, credit_id: int) -> Credit:
        credit = self.credits.find_by_id(credit_id)
        if not credit:
            raise NotFoundError("Credit transaction not found")
        return credit

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_credit(self, data: CreditCreate) -> Credit:
        """
        Record a credit or payment and refresh the customer's balance row.

        Checks run in order and the first failure wins: customer exists,
        store exists, customer belongs to store, amount positive, customer
        active, credit limit.
        """
        if data.transaction_type == PAYMENT_RECEIVED and not data.journal_number:
            raise ValidationError("Journal number is required for payment transactions")

        with atomic(self.session):
            # Locking the customer row serializes concurrent writes for one customer
            customer = self._require_customer(data.customer_id, for_update=True)
            self._require_store(data.store_id)

            if customer.store_id != data.store_id:
                raise ValidationError("Customer does not belong to this store")

            if data.amount is None or data.amount <= 0:
                raise ValidationError("Amount must be greater than zero")

            if not customer.is_active:
                raise ValidationError("Cannot create credit transaction for inactive customer")

            if data.transaction_type == CREDIT_GIVEN and customer.credit_limit is not None:
                current = self.credits.get_customer_summary(customer.id, data.store_id).outstanding_balance
                if current + data.amount > customer.credit_limit:
                    raise ValidationError(
                        f"Credit limit exceeded. Current balance: {money_str(current)}, "
                        f"Credit limit: {money_str(customer.credit_limit)}"
                    )

            credit = self.credits.create(data)
            self._recompute_balance(customer.id, data.store_id)

        return credit

    def update_credit(self, credit_id: int, data: CreditUpdate) -> Credit:
        changes = data.changes()

        with atomic(self.session):
            credit = self._require_credit(credit_id)

            if "amount" in changes and (changes["amount"] is None or changes["amount"] <= 0):
                raise ValidationError("Amount must be greater than zero")

            new_type = changes.get("transaction_type", credit.transaction_type)
            new_amount = changes.get("amount", credit.amount)
            new_journal = changes.get("journal_number", credit.journal_number)

            if new_type == PAYMENT_RECEIVED and not new_journal:
                raise ValidationError("Journal number is required for payment transactions")

            if ("amount" in changes or "transaction_type" in changes) and new_type == CREDIT_GIVEN:
                customer = self._require_customer(credit.customer_id, for_update=True)
                if customer.credit_limit is not None:
                    current = self.credits.get_customer_summary(
                        credit.customer_id, credit.store_id
                    ).outstanding_balance
                    adjusted = (
                        current
                        - ledger_aggregator.signed_amount(credit.transaction_type, credit.amount)
                        + ledger_aggregator.signed_amount(new_type, new_amount)
                    )
                    if adjusted > customer.credit_limit:
                        raise ValidationError(
                            "Updated transaction would exceed credit limit. "
                            f"Credit limit: {money_str(customer.credit_limit)}"
                        )

            self.credits.update(credit, changes)
            self._recompute_balance(credit.customer_id, credit.store_id)

        return credit

    def delete_credit(self, credit_id: int) -> None:
        with atomic(self.session):
            credit = self._require_credit(credit_id)
            customer_id, store_id = credit.customer_id, credit.store_id
            self.credits.delete(credit)
            self._recompute_balance(customer_id, store_id)

    def _recompute_balance(self, customer_id: int, store_id: int) -> CustomerBalance:
        rows = self.credits.find_by_customer_id(customer_id, store_id)
        snapshot = ledger_aggregator.balance_snapshot(rows)
        logger.debug(
            "Recomputed balance for customer %s in store %s: outstanding=%s over %d rows",
            customer_id,
            store_id,
            snapshot.outstanding_balance,
            len(rows),
        )
        return self.balances.upsert_balance(customer_id, store_id, snapshot)

    def rebuild_all_balances(self) -> int:
        """Recompute every (customer, store) balance row from the ledger. Returns rows written."""
        pairs = self.session.query(Credit.customer_id, Credit.store_id).distinct().all()
        with atomic(self.session):
            for customer_id, store_id in pairs:
                self._recompute_balance(customer_id, store_id)
        return len(pairs)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_credit(self, credit_id: int) -> Credit:
        return self._require_credit(credit_id)

    def get_all_credits(self) -> list[Credit]:
        return self.credits.find_all()

    def get_credits_by_customer(self, customer_id: int) -> list[Credit]:
        self._require_customer(customer_id)
        return self.credits.find_by_customer_id(customer_id)

    def get_credits_by_store(self, store_id: int) -> list[Credit]:
        self._require_store(store_id)
        return self.credits.find_by_store_id(store_id)

    def get_customer_summary(self, customer_id: int, store_id: int | None = None) -> CustomerSummary:
        customer = self._require_customer(customer_id)
        if store_id is not None:
            self._require_store(store_id)
            if customer.store_id != store_id:
                raise ValidationError("Customer does not belong to this store")
        return self.credits.get_customer_summary(customer_id, store_id)

    def get_store_summary(self, store_id: int) -> StoreSummary:
        self._require_store(store_id)
        return self.credits.get_store_summary(store_id)

    def get_filtered_transactions(self, filters: CreditFilters) -> list[Credit]:
        if filters.customer_id is not None:
            self._require_customer(filters.customer_id)
        if filters.store_id is not None:
            self._require_store(filters.store_id)

        if filters.start_date is not None and filters.end_date is not None:
            if filters.start_date > filters.end_date:
                raise ValidationError("Start date must be before end date")

        if filters.min_amount is not None and filters.min_amount < 0:
            raise ValidationError("Minimum amount cannot be negative")
        if filters.max_amount is not None and filters.max_amount < 0:
            raise ValidationError("Maximum amount cannot be negative")
        if (
            filters.min_amount is not None
            and filters.max_amount is not None
            and filters.min_amount > filters.max_amount
        ):
            raise ValidationError("Minimum amount must be less than maximum amount")

        return self.credits.find_by_filters(filters)

    def get_recent_transactions(self, limit: int = 10, store_id: int | None = None) -> list[Credit]:
        if limit <= 0:
            raise ValidationError("Limit must be greater than zero")
        if limit > MAX_RECENT_LIMIT:
            raise ValidationError(f"Limit cannot exceed {MAX_RECENT_LIMIT}")
        if store_id is not None:
            self._require_store(store_id)
        return self.credits.get_recent_transactions(limit, store_id)

    def get_transactions_by_date_range(
        self,
        start_date: datetime,
        end_date: datetime,
        store_id: int | None = None,
    ) -> list[Credit]:
        if start_date > end_date:
            raise ValidationError("Start date must be before end date")
        if end_date - start_date > timedelta(days=MAX_RANGE_DAYS):
            raise ValidationError(f"Date range cannot exceed {MAX_RANGE_DAYS} days")
        if store_id is not None:
            self._require_store(store_id)
        return self.credits.get_transactions_by_date_range(start_date, end_date, store_id)

    def get_outstanding_balances(self, store_id: int, limit: int | None = None) -> list[OutstandingBalance]:
        self._require_store(store_id)
        if limit is not None and limit <= 0:
            raise ValidationError("Limit must be greater than zero")
        rows = self.credits.find_by_store_id(store_id)
        return ledger_aggregator.rank_outstanding_balances(rows, limit=limit)
