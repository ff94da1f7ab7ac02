from __future__ import annotations

from datetime import datetime

from credis import security
from credis.models import AccessToken, RefreshToken, StoreOwner


class StoreOwnerRepository:
    """
    Credentials and session storage for store owners.

    Token hashing happens here so callers hand over raw JWTs and never see
    the stored form.
    """

    def __init__(self, session, *, bcrypt_rounds: int = security.DEFAULT_ROUNDS):
        self.session = session
        self.bcrypt_rounds = bcrypt_rounds

    def create(self, *, name: str, phone_number: str, password_hash: str, store_id: int | None = None) -> StoreOwner:
        owner = StoreOwner(
            name=name,
            phone_number=phone_number,
            password_hash=password_hash,
            store_id=store_id,
        )
        self.session.add(owner)
        self.session.flush()
        return owner

    def find_by_id(self, owner_id: int) -> StoreOwner | None:
        return self.session.query(StoreOwner).filter_by(id=owner_id).first()

    def find_by_phone_number(self, phone_number: str) -> StoreOwner | None:
        return self.session.query(StoreOwner).filter_by(phone_number=phone_number).first()

    def set_last_login(self, owner: StoreOwner, when: datetime) -> None:
        owner.last_login_at = when
        self.session.flush()

    def save_refresh_token(self, owner_id: int, token: str, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(
            store_owner_id=owner_id,
            token_hash=security.hash_token(token, rounds=self.bcrypt_rounds),
            expires_at=expires_at,
            revoked=False,
        )
        self.session.add(record)
        self.session.flush()
        return record

    def save_access_token(self, owner_id: int, refresh_token_id: int, token: str, expires_at: datetime) -> AccessToken:
        record = AccessToken(
            store_owner_id=owner_id,
            refresh_token_id=refresh_token_id,
            token_hash=security.hash_token(token, rounds=self.bcrypt_rounds),
            expires_at=expires_at,
        )
        self.session.add(record)
        self.session.flush()
        return record

    def find_refresh_token(self, owner_id: int, token: str, now: datetime) -> RefreshToken | None:
        """
        Match token against the owner's live sessions.

        Linear in the number of active sessions: each stored hash is salted,
        so the only way to find the row is to bcrypt-compare against each.
        """
        candidates = self.session.query(RefreshToken).filter(
            RefreshToken.store_owner_id == owner_id,
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > now,
        ).all()

        for record in candidates:
            if security.verify_token_hash(token, record.token_hash):
                return record
        return None

    def revoke_all_refresh_tokens(self, owner_id: int) -> int:
        count = self.session.query(RefreshToken).filter(
            RefreshToken.store_owner_id == owner_id,
            RefreshToken.revoked.is_(False),
        ).update({RefreshToken.revoked: True}, synchronize_session="fetch")
        self.session.flush()
        return count

    def delete_stale_tokens(self, *, now: datetime, created_before: datetime) -> int:
        """
        Delete sessions that are expired or revoked and older than created_before,
        together with the access-token records minted under them.
        """
        stale_ids = [
            row.id
            for row in self.session.query(RefreshToken.id).filter(
                (RefreshToken.expires_at < now) | (RefreshToken.revoked.is_(True)),
                RefreshToken.created_at < created_before,
            )
        ]
        if not stale_ids:
            return 0

        self.session.query(AccessToken).filter(
            AccessToken.refresh_token_id.in_(stale_ids)
        ).delete(synchronize_session=False)
        deleted = self.session.query(RefreshToken).filter(
            RefreshToken.id.in_(stale_ids)
        ).delete(synchronize_session=False)
        self.session.flush()
        return deleted
