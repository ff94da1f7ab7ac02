# Overview: Pure ledger arithmetic over credit rows; no database access.

"""
Ledger Aggregator

Every function here takes already-fetched credit rows (anything with
customer_id, amount, transaction_type, transaction_date; Credit models in
production, plain objects in tests) and returns summaries. Amounts are
Decimal throughout.

Invariant: outstanding = sum(credit_given) - sum(payment_received) over the
exact rows passed in. The balance cache, the summaries and the ranking all
go through these functions so they cannot drift from each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from credis.models.credits import CREDIT_GIVEN, PAYMENT_RECEIVED
from credis.money import ZERO, money_str
from credis.time_utils import to_utc_z


@dataclass
class CustomerSummary:
    total_credit_given: Decimal = ZERO
    total_payments_received: Decimal = ZERO
    outstanding_balance: Decimal = ZERO
    transaction_count: int = 0
    last_transaction_date: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "total_credit_given": money_str(self.total_credit_given),
            "total_payments_received": money_str(self.total_payments_received),
            "outstanding_balance": money_str(self.outstanding_balance),
            "transaction_count": self.transaction_count,
            "last_transaction_date": to_utc_z(self.last_transaction_date),
        }


@dataclass
class StoreSummary:
    total_customers: int = 0
    total_credit_given: Decimal = ZERO
    total_payments_received: Decimal = ZERO
    total_outstanding_balance: Decimal = ZERO
    total_transactions: int = 0

    def to_dict(self) -> dict:
        return {
            "total_customers": self.total_customers,
            "total_credit_given": money_str(self.total_credit_given),
            "total_payments_received": money_str(self.total_payments_received),
            "total_outstanding_balance": money_str(self.total_outstanding_balance),
            "total_transactions": self.total_transactions,
        }


@dataclass
class OutstandingBalance:
    customer_id: int
    customer_name: str | None = None
    customer_phone: str | None = None
    total_credit_given: Decimal = ZERO
    total_payments_received: Decimal = ZERO

    @property
    def outstanding_balance(self) -> Decimal:
        return self.total_credit_given - self.total_payments_received

    def to_dict(self) -> dict:
        return {
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "totalCreditGiven": money_str(self.total_credit_given),
            "totalPaymentsReceived": money_str(self.total_payments_received),
            "outstandingBalance": money_str(self.outstanding_balance),
        }


@dataclass
class BalanceSnapshot:
    """Values written into the customer_balances cache row."""
    total_credit_given: Decimal = ZERO
    total_payments_received: Decimal = ZERO
    last_credit_date: datetime | None = None
    last_payment_date: datetime | None = None
    last_transaction_date: datetime | None = None

    @property
    def outstanding_balance(self) -> Decimal:
        return self.total_credit_given - self.total_payments_received


def _amount(row) -> Decimal:
    return Decimal(row.amount)


def _later(current: datetime | None, candidate: datetime | None) -> datetime | None:
    if candidate is None:
        return current
    if current is None or candidate > current:
        return candidate
    return current


def sum_by_type(rows: Iterable) -> tuple[Decimal, Decimal]:
    """Return (credit_given_total, payment_received_total)."""
    given = ZERO
    received = ZERO
    for row in rows:
        if row.transaction_type == CREDIT_GIVEN:
            given += _amount(row)
        elif row.transaction_type == PAYMENT_RECEIVED:
            received += _amount(row)
    return given, received


def outstanding_balance(rows: Iterable) -> Decimal:
    given, received = sum_by_type(rows)
    return given - received


def signed_amount(transaction_type: str, amount: Decimal) -> Decimal:
    """Contribution of one row to the outstanding balance."""
    return amount if transaction_type == CREDIT_GIVEN else -amount


def customer_summary(rows: Sequence) -> CustomerSummary:
    given, received = sum_by_type(rows)
    last = None
    for row in rows:
        last = _later(last, row.transaction_date)
    return CustomerSummary(
        total_credit_given=given,
        total_payments_received=received,
        outstanding_balance=given - received,
        transaction_count=len(rows),
        last_transaction_date=last,
    )


def store_summary(rows: Sequence) -> StoreSummary:
    given, received = sum_by_type(rows)
    return StoreSummary(
        total_customers=len({row.customer_id for row in rows}),
        total_credit_given=given,
        total_payments_received=received,
        total_outstanding_balance=given - received,
        total_transactions=len(rows),
    )


def rank_outstanding_balances(rows: Iterable, limit: int | None = None) -> list[OutstandingBalance]:
    """
    Group rows by customer, keep balances > 0, order by balance descending.

    Ties keep the order in which each customer was first seen in rows
    (sorted() is stable). limit=None returns every positive balance.
    """
    groups: dict[int, OutstandingBalance] = {}
    for row in rows:
        entry = groups.get(row.customer_id)
        if entry is None:
            customer = getattr(row, "customer", None)
            entry = OutstandingBalance(
                customer_id=row.customer_id,
                customer_name=getattr(customer, "name", None),
                customer_phone=getattr(customer, "phone_number", None),
            )
            groups[row.customer_id] = entry
        if row.transaction_type == CREDIT_GIVEN:
            entry.total_credit_given += _amount(row)
        elif row.transaction_type == PAYMENT_RECEIVED:
            entry.total_payments_received += _amount(row)

    ranked = sorted(
        (entry for entry in groups.values() if entry.outstanding_balance > 0),
        key=lambda entry: entry.outstanding_balance,
        reverse=True,
    )
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def balance_snapshot(rows: Iterable) -> BalanceSnapshot:
    snapshot = BalanceSnapshot()
    for row in rows:
        if row.transaction_type == CREDIT_GIVEN:
            snapshot.total_credit_given += _amount(row)
            snapshot.last_credit_date = _later(snapshot.last_credit_date, row.transaction_date)
        elif row.transaction_type == PAYMENT_RECEIVED:
            snapshot.total_payments_received += _amount(row)
            snapshot.last_payment_date = _later(snapshot.last_payment_date, row.transaction_date)
        snapshot.last_transaction_date = _later(snapshot.last_transaction_date, row.transaction_date)
    return snapshot
