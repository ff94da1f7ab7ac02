# Overview: Service-layer operations for store-owner auth; registration, login, refresh, logout.

"""
Store-owner authentication.

SESSION LIFECYCLE:
- login mints an access JWT and a refresh JWT; the refresh token is the
  session (one row per device), the access token is recorded under it
- refresh verifies the JWT, then matches it against the owner's live
  session rows (bcrypt compare, one per active session)
- logout revokes every session of the owner, not just the current device

SECURITY NOTES:
- Login failures never say which half of the credential was wrong
- Raw tokens are never stored (see credis.security)
- Unexpected failures during refresh are logged and reported as a plain
  "Invalid refresh token"
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta

import jwt

from credis import security
from credis.errors import ConflictError, CredisError, NotFoundError, UnauthorizedError
from credis.models import StoreOwner
from credis.repositories.store_owner_repository import StoreOwnerRepository
from credis.repositories.store_repository import StoreRepository
from credis.services.inputs import OwnerRegistration
from credis.services.transactions import atomic
from credis.time_utils import utcnow


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class TokenSettings:
    access_secret: str
    refresh_secret: str
    access_expires: timedelta
    refresh_expires: timedelta

    @classmethod
    def from_config(cls, config) -> "TokenSettings":
        return cls(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
        )


@dataclass
class LoginResult:
    owner: StoreOwner
    access_token: str
    refresh_token: str


@dataclass
class RefreshResult:
    owner: StoreOwner
    access_token: str


def token_payload(owner: StoreOwner) -> dict:
    return {
        "id": owner.id,
        "phoneNumber": owner.phone_number,
        "name": owner.name,
        "storeId": owner.store_id,
    }


class AuthService:
    def __init__(
        self,
        session,
        *,
        owners: StoreOwnerRepository,
        stores: StoreRepository,
        settings: TokenSettings,
        bcrypt_rounds: int = security.DEFAULT_ROUNDS,
    ):
        self.session = session
        self.owners = owners
        self.stores = stores
        self.settings = settings
        self.bcrypt_rounds = bcrypt_rounds
        # Checked against when the phone number is unknown so every failed
        # login costs one bcrypt comparison
        self._dummy_hash = security.hash_password(secrets.token_hex(16), rounds=bcrypt_rounds)

    def register(self, data: OwnerRegistration) -> StoreOwner:
        with atomic(self.session):
            if self.owners.find_by_phone_number(data.phone_number):
                raise ConflictError("PhoneNumber already registered")

            if data.store_id is not None and not self.stores.find_by_id(data.store_id):
                raise NotFoundError("Store not found")

            owner = self.owners.create(
                name=data.name,
                phone_number=data.phone_number,
                password_hash=security.hash_password(data.password, rounds=self.bcrypt_rounds),
                store_id=data.store_id,
            )
        logger.info("Registered store owner %s", owner.id)
        return owner

    def _mint_access_token(self, owner: StoreOwner) -> str:
        return security.sign_token(
            token_payload(owner),
            self.settings.access_secret,
            self.settings.access_expires,
        )

    def login(self, phone_number: str, password: str) -> LoginResult:
        owner = self.owners.find_by_phone_number(phone_number) if phone_number else None
        password_hash = owner.password_hash if owner else self._dummy_hash
        password_ok = security.verify_password(password or "", password_hash)

        if not owner or not owner.is_active or not password_ok:
            logger.info("Failed login attempt")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        now = utcnow()
        access_token = self._mint_access_token(owner)
        refresh_token = security.sign_token(
            {"id": owner.id},
            self.settings.refresh_secret,
            self.settings.refresh_expires,
        )

        with atomic(self.session):
            self.owners.set_last_login(owner, now)
            session_row = self.owners.save_refresh_token(
                owner.id,
                refresh_token,
                now + self.settings.refresh_expires,
            )
            self.owners.save_access_token(
                owner.id,
                session_row.id,
                access_token,
                now + self.settings.access_expires,
            )

        return LoginResult(owner=owner, access_token=access_token, refresh_token=refresh_token)

    def refresh(self, refresh_token: str | None) -> RefreshResult:
        if not refresh_token:
            raise UnauthorizedError("Refresh token required")

        try:
            payload = security.verify_token(refresh_token, self.settings.refresh_secret)
        except jwt.InvalidTokenError:
            logger.warning("Rejected refresh token: bad signature or expired")
            raise UnauthorizedError("Invalid refresh token")

        try:
            owner_id = payload["id"]
            now = utcnow()

            session_row = self.owners.find_refresh_token(owner_id, refresh_token, now)
            if not session_row:
                logger.warning("Rejected refresh token for owner %s: revoked or unknown", owner_id)
                raise UnauthorizedError("Token revoked or invalid")

            owner = self.owners.find_by_id(owner_id)
            if not owner or not owner.is_active:
                raise UnauthorizedError("User inactive")

            access_token = self._mint_access_token(owner)
            with atomic(self.session):
                self.owners.save_access_token(
                    owner.id,
                    session_row.id,
                    access_token,
                    now + self.settings.access_expires,
                )
            return RefreshResult(owner=owner, access_token=access_token)
        except CredisError:
            raise
        except Exception:
            logger.exception("Unexpected error during token refresh")
            raise UnauthorizedError("Invalid refresh token")

    def logout(self, owner_id: int) -> int:
        with atomic(self.session):
            revoked = self.owners.revoke_all_refresh_tokens(owner_id)
        logger.info("Store owner %s logged out; %d sessions revoked", owner_id, revoked)
        return revoked

    def verify_access_token(self, token: str | None) -> dict | None:
        if not token:
            return None
        try:
            return security.verify_token(token, self.settings.access_secret)
        except jwt.InvalidTokenError:
            return None

    def get_profile(self, owner_id: int) -> StoreOwner:
        owner = self.owners.find_by_id(owner_id)
        if not owner:
            raise NotFoundError("Store owner not found")
        return owner

    def cleanup_tokens(self, retention_days: int) -> int:
        """Delete expired or revoked sessions older than retention_days. Returns sessions removed."""
        now = utcnow()
        with atomic(self.session):
            return self.owners.delete_stale_tokens(
                now=now,
                created_before=now - timedelta(days=retention_days),
            )
