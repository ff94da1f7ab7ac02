from __future__ import annotations

from ..extensions import db
from credis.time_utils import to_utc_z


class StoreOwner(db.Model):
    """
    Store owner account; logs in with phone number + password/PIN.

    store_id is nullable: an owner can register before their store exists
    and is linked when they create it.
    """
    __tablename__ = "store_owners"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    phone_number = db.Column(db.String(32), nullable=False, unique=True, index=True)

    # Bcrypt hashed password; never serialized
    password_hash = db.Column(db.String(255), nullable=False)

    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=True, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    store = db.relationship("Store", backref=db.backref("store_owners", lazy=True))

    def __repr__(self) -> str:
        return f"<StoreOwner id={self.id} phone={self.phone_number!r}>"

    def to_dict(self) -> dict:
        # Auth/profile payloads are camelCase on the wire
        return {
            "id": self.id,
            "name": self.name,
            "phoneNumber": self.phone_number,
            "storeId": self.store_id,
            "isActive": self.is_active,
            "lastLoginAt": to_utc_z(self.last_login_at) if self.last_login_at else None,
            "createdAt": to_utc_z(self.created_at),
        }


class RefreshToken(db.Model):
    """
    One login session (device). The raw JWT is never stored, only a bcrypt
    hash of its SHA-256 digest. A token is usable while revoked is False and
    expires_at is in the future.
    """
    __tablename__ = "refresh_tokens"
    __table_args__ = (
        db.Index("ix_refresh_tokens_owner_active", "store_owner_id", "revoked"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    store_owner_id = db.Column(db.Integer, db.ForeignKey("store_owners.id"), nullable=False, index=True)
    token_hash = db.Column(db.String(255), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
    revoked = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    store_owner = db.relationship("StoreOwner", backref=db.backref("refresh_tokens", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "storeOwnerId": self.store_owner_id,
            "expiresAt": to_utc_z(self.expires_at),
            "revoked": self.revoked,
            "createdAt": to_utc_z(self.created_at),
        }


class AccessToken(db.Model):
    """Audit record of an access token minted under a refresh-token session."""
    __tablename__ = "tokens"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    store_owner_id = db.Column(db.Integer, db.ForeignKey("store_owners.id"), nullable=False, index=True)
    refresh_token_id = db.Column(db.Integer, db.ForeignKey("refresh_tokens.id"), nullable=False, index=True)
    token_hash = db.Column(db.String(255), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    refresh_token = db.relationship("RefreshToken", backref=db.backref("access_tokens", lazy=True))
