# Overview: Typed inputs for the services; optional fields are explicit.

"""
Service inputs.

Update inputs distinguish "not provided" (UNSET) from "set to None": only
fields the caller actually set end up in changes(), which is what the
repositories apply.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


class _PartialUpdate:
    def changes(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)  # type: ignore[arg-type]
            if is_set(getattr(self, f.name))
        }

    @classmethod
    def from_patch(cls, patch: dict):
        """Build from a validated patch dict; absent keys stay UNSET."""
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**{k: v for k, v in patch.items() if k in known})


@dataclass
class CreditCreate:
    customer_id: int
    store_id: int
    amount: Decimal
    transaction_type: str
    items_description: str | None = None
    journal_number: str | None = None
    created_by_owner_id: int | None = None
    transaction_date: datetime | None = None


@dataclass
class CreditUpdate(_PartialUpdate):
    amount: Decimal = UNSET
    transaction_type: str = UNSET
    transaction_date: datetime = UNSET
    items_description: str | None = UNSET
    journal_number: str | None = UNSET


@dataclass
class CreditFilters:
    customer_id: int | None = None
    store_id: int | None = None
    transaction_type: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None


@dataclass
class CustomerCreate:
    store_id: int
    name: str
    phone_number: str
    email: str | None = None
    address: str | None = None
    cid_number: str | None = None
    credit_limit: Decimal | None = None


@dataclass
class CustomerUpdate(_PartialUpdate):
    name: str = UNSET
    phone_number: str = UNSET
    email: str | None = UNSET
    address: str | None = UNSET
    cid_number: str | None = UNSET
    credit_limit: Decimal | None = UNSET
    is_active: bool = UNSET


@dataclass
class StoreUpdate(_PartialUpdate):
    name: str = UNSET
    phone_number: str | None = UNSET
    address: str | None = UNSET


@dataclass
class OwnerRegistration:
    name: str
    phone_number: str
    password: str
    store_id: int | None = None
