from __future__ import annotations

from ..extensions import db
from credis.money import money_str
from credis.time_utils import to_utc_z, utcnow


CREDIT_GIVEN = "credit_given"
PAYMENT_RECEIVED = "payment_received"
TRANSACTION_TYPES = (CREDIT_GIVEN, PAYMENT_RECEIVED)


class Credit(db.Model):
    """
    One ledger row: credit handed to a customer, or a payment taken from one.

    TRANSACTION TYPES:
    - credit_given: increases the customer's outstanding balance
    - payment_received: decreases it; journal_number is mandatory

    amount is always positive; the type carries the sign.
    transaction_date is business time (editable), created_at is system time.
    """
    __tablename__ = "credits"
    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_credits_amount_positive"),
        db.CheckConstraint(
            "transaction_type IN ('credit_given', 'payment_received')",
            name="ck_credits_transaction_type",
        ),
        db.Index("ix_credits_customer_date", "customer_id", "transaction_date"),
        db.Index("ix_credits_store_date", "store_id", "transaction_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)

    amount = db.Column(db.Numeric(12, 2), nullable=False)
    transaction_type = db.Column(db.String(32), nullable=False, index=True)
    items_description = db.Column(db.String(1000), nullable=True)
    journal_number = db.Column(db.String(100), nullable=True)
    transaction_date = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    created_by_owner_id = db.Column(db.Integer, db.ForeignKey("store_owners.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    customer = db.relationship("Customer", backref=db.backref("credits", lazy=True))
    store = db.relationship("Store", backref=db.backref("credits", lazy=True))
    created_by_owner = db.relationship("StoreOwner")

    def __repr__(self) -> str:
        return f"<Credit id={self.id} {self.transaction_type} {self.amount} customer_id={self.customer_id}>"

    def to_dict(self, include: str | None = None) -> dict:
        """
        include=None     -> ledger fields only
        include="full"   -> plus full customer and store objects
        include="brief"  -> plus {id, name, phone_number} customer and {id, name} store
        """
        data = {
            "id": self.id,
            "customer_id": self.customer_id,
            "store_id": self.store_id,
            "amount": money_str(self.amount),
            "transaction_type": self.transaction_type,
            "items_description": self.items_description,
            "journal_number": self.journal_number,
            "transaction_date": to_utc_z(self.transaction_date),
            "created_by_owner_id": self.created_by_owner_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include == "full":
            data["customer"] = self.customer.to_dict() if self.customer else None
            data["store"] = self.store.to_dict() if self.store else None
        elif include == "brief":
            data["customer"] = self.customer.to_summary_dict() if self.customer else None
            data["store"] = self.store.to_summary_dict() if self.store else None
        return data
