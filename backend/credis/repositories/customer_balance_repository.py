from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import joinedload

from credis.models import CustomerBalance
from credis.services.ledger_aggregator import BalanceSnapshot


class CustomerBalanceRepository:
    def __init__(self, session):
        self.session = session

    def find(self, customer_id: int, store_id: int) -> CustomerBalance | None:
        return self.session.query(CustomerBalance).filter_by(
            customer_id=customer_id,
            store_id=store_id,
        ).first()

    def upsert_balance(self, customer_id: int, store_id: int, snapshot: BalanceSnapshot) -> CustomerBalance:
        balance = self.find(customer_id, store_id)
        if balance is None:
            balance = CustomerBalance(customer_id=customer_id, store_id=store_id)
            self.session.add(balance)

        balance.total_credit_given = snapshot.total_credit_given
        balance.total_payments_received = snapshot.total_payments_received
        balance.outstanding_balance = snapshot.outstanding_balance
        balance.last_credit_date = snapshot.last_credit_date
        balance.last_payment_date = snapshot.last_payment_date
        balance.last_transaction_date = snapshot.last_transaction_date

        self.session.flush()
        return balance

    def find_customers_with_overdue_payments(self, store_id: int, cutoff: datetime) -> list[CustomerBalance]:
        """
        Balances with money still owed and no payment since cutoff
        (or no payment ever).
        """
        return (
            self.session.query(CustomerBalance)
            .options(joinedload(CustomerBalance.customer))
            .filter(
                CustomerBalance.store_id == store_id,
                CustomerBalance.outstanding_balance > 0,
                (CustomerBalance.last_payment_date < cutoff) | (CustomerBalance.last_payment_date.is_(None)),
            )
            .order_by(CustomerBalance.outstanding_balance.desc(), CustomerBalance.customer_id.asc())
            .all()
        )
