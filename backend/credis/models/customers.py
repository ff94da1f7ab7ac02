from __future__ import annotations

from ..extensions import db
from credis.money import money_str
from credis.time_utils import to_utc_z


class Customer(db.Model):
    """
    A store's credit customer.

    Phone numbers are unique within a store, not globally: two shops may
    both serve the same person. credit_limit NULL means "no limit".
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.UniqueConstraint("store_id", "phone_number", name="uq_customers_store_phone"),
        db.Index("ix_customers_store_active", "store_id", "is_active"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    phone_number = db.Column(db.String(32), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    cid_number = db.Column(db.String(64), nullable=True)
    credit_limit = db.Column(db.Numeric(12, 2), nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    store = db.relationship("Store", backref=db.backref("customers", lazy=True))

    def __repr__(self) -> str:
        return f"<Customer id={self.id} store_id={self.store_id} phone={self.phone_number!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "store_id": self.store_id,
            "name": self.name,
            "phone_number": self.phone_number,
            "email": self.email,
            "address": self.address,
            "cid_number": self.cid_number,
            "credit_limit": money_str(self.credit_limit),
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

    def to_summary_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "phone_number": self.phone_number}


class CustomerBalance(db.Model):
    """
    Materialized per-(customer, store) balance.

    NOT a source of truth: rebuilt from the customer's credits after every
    ledger write, in the same transaction as the write.
    """
    __tablename__ = "customer_balances"
    __table_args__ = (
        db.UniqueConstraint("customer_id", "store_id", name="uq_customer_balances_customer_store"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)

    total_credit_given = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_payments_received = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    outstanding_balance = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    last_credit_date = db.Column(db.DateTime(timezone=True), nullable=True)
    last_payment_date = db.Column(db.DateTime(timezone=True), nullable=True)
    last_transaction_date = db.Column(db.DateTime(timezone=True), nullable=True)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    customer = db.relationship("Customer", backref=db.backref("balance_rows", lazy=True))
    store = db.relationship("Store")

    def to_dict(self, include_customer: bool = False) -> dict:
        data = {
            "customer_id": self.customer_id,
            "store_id": self.store_id,
            "total_credit_given": money_str(self.total_credit_given),
            "total_payments_received": money_str(self.total_payments_received),
            "outstanding_balance": money_str(self.outstanding_balance),
            "last_credit_date": to_utc_z(self.last_credit_date),
            "last_payment_date": to_utc_z(self.last_payment_date),
            "last_transaction_date": to_utc_z(self.last_transaction_date),
        }
        if include_customer:
            data["customer"] = self.customer.to_dict() if self.customer else None
        return data
