from __future__ import annotations

from ..extensions import db
from credis.time_utils import to_utc_z


class Store(db.Model):
    """
    A shop whose owner extends credit to customers.

    Stores own customers, store owners and every ledger row. Phone numbers
    are globally unique so a store can be looked up by its contact number.
    """
    __tablename__ = "stores"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    phone_number = db.Column(db.String(32), nullable=True, unique=True, index=True)
    address = db.Column(db.String(200), nullable=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Store id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone_number": self.phone_number,
            "address": self.address,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

    def to_summary_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
